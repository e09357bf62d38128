"""
Chakra jump-capture logic.

Boards mix triangular and square cells, so "the node opposite a neighbour"
cannot be found by graph distance alone.  A jump is valid when the jumped
node is adjacent to both ends and lies on the straight segment between them
in the board's canonical coordinates.

Also provides the combined legal-move generators (simple steps plus jumps).
"""

from __future__ import annotations

from typing import List, Optional, Sequence

import numpy as np

from chakra.board import Board, BoardState
from chakra.move_gen import (
    JumpMove,
    Move,
    get_player_pieces,
    get_simple_move_list,
    owner_of,
)

# Tolerance (canvas units) for both the cross product and the distance sum.
COLLINEAR_TOLERANCE: float = 10.0


# ---------------------------------------------------------------------------
# Geometry
# ---------------------------------------------------------------------------

def is_collinear_and_between(
    a: Sequence[float],
    b: Sequence[float],
    c: Sequence[float],
    tol: float = COLLINEAR_TOLERANCE,
) -> bool:
    """Return True if point *b* lies on the straight segment from *a* to *c*.

    Two checks, both within *tol*:

    * the cross product of ``b - a`` and ``c - a`` is at most *tol*
      (the three points are on one line);
    * ``|ab| + |bc|`` equals ``|ac|`` (``b`` is between, not beyond).
    """
    a, b, c = (np.asarray(p, dtype=float) for p in (a, b, c))
    ab = b - a
    ac = c - a
    cross = abs(ab[0] * ac[1] - ab[1] * ac[0])
    if cross > tol:
        return False
    d_ab = np.hypot(*ab)
    d_bc = np.hypot(*(c - b))
    d_ac = np.hypot(*ac)
    return bool(abs(d_ab + d_bc - d_ac) < tol)


# ---------------------------------------------------------------------------
# Jumps
# ---------------------------------------------------------------------------

def get_jump_target(
    board: Board, state: BoardState, source: str, dest: str
) -> Optional[str]:
    """Return the node jumped over by moving *source* -> *dest*, or None.

    The move is a jump when *source* holds a piece, *dest* is empty, and a
    node adjacent to both holds a piece of another player and lies between
    them.  Neighbours of *source* are scanned in board order; the first
    match is returned.
    """
    if source == dest:
        return None
    mover = owner_of(state, source)
    if mover is None or state[dest] is not None:
        return None

    a = board.position(source)
    c = board.position(dest)
    for mid in board.neighbors(source):
        if not board.is_adjacent(mid, dest):
            continue
        if not is_collinear_and_between(a, board.position(mid), c):
            continue
        jumped = owner_of(state, mid)
        if jumped is None or jumped == mover:
            continue
        return mid
    return None


def get_jump_moves(board: Board, state: BoardState, node: str) -> List[JumpMove]:
    """Return every single jump available to the piece on *node*.

    Every other node is tried as a landing square; boards have at most 32
    nodes so the exhaustive scan is cheap.
    """
    moves: List[JumpMove] = []
    if state.get(node) is None:
        return moves
    for dest in board:
        if dest == node or state[dest] is not None:
            continue
        captured = get_jump_target(board, state, node, dest)
        if captured is not None:
            moves.append(JumpMove(node, dest, captured))
    return moves


# ---------------------------------------------------------------------------
# Legal moves
# ---------------------------------------------------------------------------

def get_legal_moves(board: Board, state: BoardState, node: str) -> List[Move]:
    """Return all legal moves for the piece on *node*: simple steps first, then jumps.

    There is no chaining; each move is exactly one step or one jump.
    Returns an empty list for an empty node.
    """
    if state.get(node) is None:
        return []
    moves: List[Move] = []
    moves.extend(get_simple_move_list(board, state, node))
    moves.extend(get_jump_moves(board, state, node))
    return moves


def get_legal_moves_for_player(
    board: Board, state: BoardState, player: int
) -> List[Move]:
    """Return all legal moves for every piece of *player*, in board order."""
    moves: List[Move] = []
    for node in get_player_pieces(state, player):
        moves.extend(get_legal_moves(board, state, node))
    return moves
