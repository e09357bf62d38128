"""
Presentation geometry: rotated node positions, per-player view angles and
hit testing.

Rotation is cosmetic.  Move legality always uses the canonical coordinates
stored on the board.
"""

from __future__ import annotations

import math
from typing import Dict, Optional

import numpy as np

from chakra.board import BOARD_CENTER, BOTTOM, LEFT, RIGHT, TOP, Board, Point

# Radius (canvas units) within which a click selects a node.
HIT_RADIUS: float = 15.0

# Angle that turns each home area towards the viewer.
_THREE_PLAYER_ANGLES: Dict[str, float] = {
    BOTTOM: -math.pi / 2 + 0.52,
    RIGHT: math.pi / 2 - 0.52,
    TOP: math.pi,
}

_DEFAULT_ANGLES: Dict[str, float] = {
    TOP: math.pi,
    BOTTOM: 0.0,
    RIGHT: math.pi / 2,
    LEFT: 3 * math.pi / 2,
}


def rotation_matrix(angle: float) -> np.ndarray:
    c, s = math.cos(angle), math.sin(angle)
    return np.array([[c, -s], [s, c]])


def rotate_point(point: Point, angle: float, center: Point = BOARD_CENTER) -> Point:
    """Rotate *point* by *angle* radians about *center*."""
    ctr = np.asarray(center, dtype=float)
    x, y = rotation_matrix(angle) @ (np.asarray(point, dtype=float) - ctr) + ctr
    return float(x), float(y)


def node_positions(board: Board, angle: float = 0.0) -> Dict[str, Point]:
    """Return ``{node: (x, y)}`` for every node, rotated by *angle*."""
    names = list(board)
    coords = board.coordinates()
    if angle:
        ctr = np.asarray(BOARD_CENTER, dtype=float)
        coords = (coords - ctr) @ rotation_matrix(angle).T + ctr
    return {name: (float(x), float(y)) for name, (x, y) in zip(names, coords)}


def turn_angle(player_count: int, area: str) -> float:
    """Return the view angle that puts *area* at the bottom of the screen."""
    table = _THREE_PLAYER_ANGLES if player_count == 3 else _DEFAULT_ANGLES
    return table.get(area, 0.0)


def next_rotation(current: float, target: float) -> float:
    """Return the angle reached from *current* by turning the short way to *target*."""
    delta = (target - current + math.pi) % (2 * math.pi) - math.pi
    return current + delta


def node_at(board: Board, x: float, y: float, angle: float = 0.0,
            radius: float = HIT_RADIUS) -> Optional[str]:
    """Return the first node within *radius* of ``(x, y)`` on the rotated board.

    The click is turned back by *angle* and compared with the canonical
    positions, which gives the same answer as testing the drawn ones.
    """
    cx, cy = rotate_point((x, y), -angle) if angle else (x, y)
    for name in board:
        nx, ny = board.position(name)
        if (cx - nx) ** 2 + (cy - ny) ** 2 <= radius ** 2:
            return name
    return None
