"""Chakra: a 2-4 player jump-capture race game on a graph board."""

from chakra.errors import ChakraError, GameAlreadyOver, IllegalMove, InvalidConfiguration
from chakra.session import GameSession, new_game

__all__ = [
    "ChakraError",
    "GameAlreadyOver",
    "GameSession",
    "IllegalMove",
    "InvalidConfiguration",
    "new_game",
]
