"""Errors raised by the Chakra engine.

Every error carries an ``error_code`` that the web layer reports verbatim.
All of them are recoverable: a rejected command leaves the game untouched.
"""

from __future__ import annotations


class ChakraError(Exception):
    error_code: str = "CHAKRA_ERROR"


class InvalidConfiguration(ChakraError, ValueError):
    """Player count, human count, names or colours are out of range."""

    error_code = "INVALID_CONFIGURATION"


class IllegalMove(ChakraError, ValueError):
    """The requested move is not legal for the acting player right now."""

    error_code = "ILLEGAL_MOVE"


class GameAlreadyOver(ChakraError):
    error_code = "GAME_ALREADY_OVER"
