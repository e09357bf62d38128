"""
Simple (non-capture) move generator for Chakra.

Defines the ``Move`` variants shared by the engine and the helpers that read
piece ownership out of a ``BoardState``.  Jumps are handled separately by
``chakra.captures``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, List, Optional, Set, Union

from chakra.board import Board, BoardState

# ---------------------------------------------------------------------------
# Move variants
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SimpleMove:
    """Slide to an empty adjacent node."""

    source: str
    dest: str

    is_jump: ClassVar[bool] = False

    @property
    def captured(self) -> None:
        return None


@dataclass(frozen=True)
class JumpMove:
    """Leap over the opposing piece on *captured* and remove it."""

    source: str
    dest: str
    captured: str

    is_jump: ClassVar[bool] = True


Move = Union[SimpleMove, JumpMove]


# ---------------------------------------------------------------------------
# Piece ownership helpers
# ---------------------------------------------------------------------------

def owner_of(state: BoardState, node: str) -> Optional[int]:
    """Return the id of the player whose piece sits on *node*, or None."""
    piece = state.get(node)
    return None if piece is None else piece.player


def is_player_piece(state: BoardState, node: str, player: int) -> bool:
    """Return True if the piece at *node* belongs to *player*."""
    return owner_of(state, node) == player


def get_player_pieces(state: BoardState, player: int) -> List[str]:
    """Return the nodes where *player* has pieces, in state order."""
    return [node for node, piece in state.items() if piece is not None and piece.player == player]


# ---------------------------------------------------------------------------
# Simple moves
# ---------------------------------------------------------------------------

def get_simple_moves(board: Board, state: BoardState, node: str) -> Set[str]:
    """Return the neighbours of *node* that are empty."""
    return {n for n in board.neighbors(node) if state[n] is None}


def get_simple_move_list(board: Board, state: BoardState, node: str) -> List[SimpleMove]:
    """Return ``SimpleMove`` objects from *node*, in neighbour order.

    Unlike ``get_simple_moves`` this keeps a stable order so that callers
    drawing from a seeded random source get reproducible results.
    """
    return [SimpleMove(node, n) for n in board.neighbors(node) if state[n] is None]
