"""
Chakra board representation and geometry.

Builds the 2-, 3- and 4-player board graphs: node labels, canonical 2-D
coordinates, area membership and undirected adjacency.  Boards are immutable
and cached per player count; piece placement lives in a separate
``BoardState`` mapping so the same topology is shared by every game.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from types import MappingProxyType
from typing import TYPE_CHECKING, Callable, Dict, Iterator, List, Mapping, Optional, Sequence, Set, Tuple

import numpy as np

if TYPE_CHECKING:
    from chakra.players import Player

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# Areas (home territories)
TOP: str = "T"
RIGHT: str = "R"
BOTTOM: str = "B"
LEFT: str = "L"

AREAS: Tuple[str, ...] = (TOP, RIGHT, BOTTOM, LEFT)

# Every board is laid out on a 600x600 canvas around this point.
BOARD_CENTER: Tuple[float, float] = (300.0, 300.0)

# Edges inside one 7-node arm (3- and 4-player boards), by node number.
ARM_EDGES: List[Tuple[int, int]] = [
    (1, 2), (2, 3), (1, 4), (2, 5), (3, 6),
    (4, 5), (5, 6), (4, 7), (5, 7), (6, 7),
]

# Edges inside one 6-node cluster of the 2-player board.
CLUSTER_EDGES: List[Tuple[int, int]] = [
    (1, 2), (1, 4), (2, 3), (2, 5), (3, 6), (4, 5), (5, 6),
]

Point = Tuple[float, float]


# ---------------------------------------------------------------------------
# Pieces and board state
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Piece:
    """A piece on the board: owning player id plus its colour for rendering."""

    player: int
    color: str


# node name -> occupying piece, or None when empty
BoardState = Dict[str, Optional[Piece]]


# ---------------------------------------------------------------------------
# Topology
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Node:
    name: str
    position: Point
    area: Optional[str]  # None for junction nodes (G, I1..I4)
    neighbors: Tuple[str, ...]


class Board:
    """Immutable board graph for one player count.

    Nodes keep their insertion order, which is the order used everywhere a
    deterministic iteration over the board is needed (move generation,
    rendering, text display).
    """

    def __init__(self, player_count: int, nodes: Mapping[str, Node]) -> None:
        self.player_count = player_count
        self._nodes: Mapping[str, Node] = MappingProxyType(dict(nodes))

    # -- container protocol ---------------------------------------------

    def __contains__(self, name: object) -> bool:
        return name in self._nodes

    def __iter__(self) -> Iterator[str]:
        return iter(self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)

    def __getitem__(self, name: str) -> Node:
        return self._nodes[name]

    def __repr__(self) -> str:
        return f"Board(players={self.player_count}, nodes={len(self)})"

    # -- queries ----------------------------------------------------------

    @property
    def nodes(self) -> Mapping[str, Node]:
        return self._nodes

    def position(self, name: str) -> Point:
        return self._nodes[name].position

    def neighbors(self, name: str) -> Tuple[str, ...]:
        return self._nodes[name].neighbors

    def is_adjacent(self, a: str, b: str) -> bool:
        return b in self._nodes[a].neighbors

    def area_nodes(self, area: str) -> List[str]:
        """Return the nodes belonging to *area*, in board order."""
        return [n.name for n in self._nodes.values() if n.area == area]

    def edges(self) -> List[Tuple[str, str]]:
        """Return every undirected edge once, as ``(a, b)`` in board order."""
        seen: Set[Tuple[str, str]] = set()
        result: List[Tuple[str, str]] = []
        for node in self._nodes.values():
            for other in node.neighbors:
                key = tuple(sorted((node.name, other)))
                if key in seen:
                    continue
                seen.add(key)
                result.append((node.name, other))
        return result

    def coordinates(self) -> np.ndarray:
        """Return an ``(N, 2)`` float array of positions in board order."""
        return np.array([n.position for n in self._nodes.values()], dtype=float)


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------

class _BoardBuilder:
    """Mutable scratch space used while a board is being laid out."""

    def __init__(self) -> None:
        self.positions: Dict[str, Point] = {}
        self.areas: Dict[str, Optional[str]] = {}
        self.adjacency: Dict[str, List[str]] = {}

    def add_node(self, name: str, position: Sequence[float], area: Optional[str]) -> None:
        self.positions[name] = (float(position[0]), float(position[1]))
        self.areas[name] = area
        self.adjacency.setdefault(name, [])

    def connect(self, a: str, b: str) -> None:
        if b not in self.adjacency[a]:
            self.adjacency[a].append(b)
        if a not in self.adjacency[b]:
            self.adjacency[b].append(a)

    def build(self, player_count: int) -> Board:
        nodes = {
            name: Node(
                name=name,
                position=self.positions[name],
                area=self.areas[name],
                neighbors=tuple(self.adjacency[name]),
            )
            for name in self.positions
        }
        return Board(player_count, nodes)


def midpoint(p1: Sequence[float], p2: Sequence[float]) -> Point:
    """Return the point halfway between *p1* and *p2*."""
    m = (np.asarray(p1, dtype=float) + np.asarray(p2, dtype=float)) / 2.0
    return float(m[0]), float(m[1])


def quarter_turn(points: Mapping[str, Point], turns: int,
                 center: Point = BOARD_CENTER) -> Dict[str, Point]:
    """Rotate *points* clockwise on screen by ``90 * turns`` degrees about *center*.

    Uses the exact integer rotation matrix so that rotated arms keep
    integral coordinates and stay collinear with the template.
    """
    step = np.array([[0, -1], [1, 0]])
    matrix = np.linalg.matrix_power(step, turns % 4)
    c = np.asarray(center, dtype=float)
    rotated: Dict[str, Point] = {}
    for name, pos in points.items():
        x, y = matrix @ (np.asarray(pos, dtype=float) - c) + c
        rotated[name] = (float(x), float(y))
    return rotated


def _build_two_player() -> Board:
    """Two mirrored 6-node clusters joined through the centre node ``G``."""
    b = _BoardBuilder()
    for area, (outer_y, inner_y) in ((TOP, (200, 250)), (BOTTOM, (400, 350))):
        for i, x in enumerate((220, 300, 380), start=1):
            b.add_node(f"{area}{i}", (x, outer_y), area)
        for i, x in enumerate((260, 300, 340), start=4):
            b.add_node(f"{area}{i}", (x, inner_y), area)
    b.add_node("G", (300, 300), None)

    for area in (TOP, BOTTOM):
        for i, j in CLUSTER_EDGES:
            b.connect(f"{area}{i}", f"{area}{j}")
    for area in (TOP, BOTTOM):
        for i in (4, 5, 6):
            b.connect(f"{area}{i}", "G")
    return b.build(2)


# Arm nodes 1-4 and 6 of the 3-player board; node 5 is derived.
_THREE_PLAYER_ARMS: Dict[str, Dict[int, Point]] = {
    TOP: {1: (240, 121.08), 2: (300, 121.08), 3: (360, 121.08),
          4: (270, 173.04), 6: (330, 173.04)},
    RIGHT: {1: (485, 337.5), 2: (455, 389.46), 3: (425, 441.42),
            4: (425, 337.5), 6: (395, 389.46)},
    BOTTOM: {1: (175, 441.42), 2: (145, 389.46), 3: (115, 337.5),
             4: (205, 389.46), 6: (175, 337.5)},
}


def _build_three_player() -> Board:
    """Three 7-node arms around a central triangle of outer nodes."""
    b = _BoardBuilder()
    junctions = {"I1": (300, 450), "I2": (170, 225), "I3": (430, 225)}
    for name, pos in junctions.items():
        b.add_node(name, pos, None)

    # Each outer node sits halfway along one side of the junction triangle.
    b.add_node("B7", midpoint(junctions["I1"], junctions["I2"]), BOTTOM)
    b.add_node("T7", midpoint(junctions["I2"], junctions["I3"]), TOP)
    b.add_node("R7", midpoint(junctions["I3"], junctions["I1"]), RIGHT)

    for area, coords in _THREE_PLAYER_ARMS.items():
        for i in (1, 2, 3, 4, 6):
            b.add_node(f"{area}{i}", coords[i], area)
        b.add_node(f"{area}5", midpoint(coords[4], coords[6]), area)

    for a, c in (("I1", "B7"), ("I1", "R7"), ("I2", "B7"),
                 ("I2", "T7"), ("I3", "T7"), ("I3", "R7")):
        b.connect(a, c)
    for area in (TOP, RIGHT, BOTTOM):
        for i, j in ARM_EDGES:
            b.connect(f"{area}{i}", f"{area}{j}")
    b.connect("T7", "B7")
    b.connect("T7", "R7")
    b.connect("B7", "R7")
    return b.build(3)


# Canonical top arm of the 4-player board; the other arms are rotations.
_FOUR_PLAYER_TEMPLATE: Dict[int, Point] = {
    1: (220, 50), 2: (300, 50), 3: (380, 50),
    4: (260, 90), 5: (300, 90), 6: (340, 90),
    7: (300, 130),
}


def _build_four_player() -> Board:
    """Four 7-node arms joined by a diamond of outer nodes and corner junctions."""
    b = _BoardBuilder()
    for name, pos in (("I1", (130, 130)), ("I2", (470, 130)),
                      ("I3", (470, 470)), ("I4", (130, 470))):
        b.add_node(name, pos, None)

    template = {str(i): pos for i, pos in _FOUR_PLAYER_TEMPLATE.items()}
    for turns, area in enumerate((TOP, RIGHT, BOTTOM, LEFT)):
        for i, pos in quarter_turn(template, turns).items():
            b.add_node(f"{area}{i}", pos, area)

    for a, c in (("I1", "T7"), ("I1", "L7"), ("I2", "T7"), ("I2", "R7"),
                 ("I3", "R7"), ("I3", "B7"), ("I4", "B7"), ("I4", "L7")):
        b.connect(a, c)
    for a, c in (("T7", "R7"), ("R7", "B7"), ("B7", "L7"), ("L7", "T7")):
        b.connect(a, c)
    for area in (TOP, RIGHT, BOTTOM, LEFT):
        for i, j in ARM_EDGES:
            b.connect(f"{area}{i}", f"{area}{j}")
    return b.build(4)


_BUILDERS: Dict[int, Callable[[], Board]] = {
    2: _build_two_player,
    3: _build_three_player,
    4: _build_four_player,
}

SUPPORTED_PLAYER_COUNTS: Tuple[int, ...] = tuple(sorted(_BUILDERS))


@lru_cache(maxsize=None)
def generate(player_count: int) -> Board:
    """Return the board graph for *player_count* (2, 3 or 4).

    The player count is expected to be validated by the caller; an
    unsupported value raises ``KeyError``.
    """
    return _BUILDERS[player_count]()


# ---------------------------------------------------------------------------
# Initial board state
# ---------------------------------------------------------------------------

def empty_state(board: Board) -> BoardState:
    """Return a BoardState with every node of *board* empty."""
    return {name: None for name in board}


def initial_state(board: Board, players: Sequence["Player"]) -> BoardState:
    """Return the starting position: every home-area node holds its owner's piece."""
    state = empty_state(board)
    for player in players:
        for name in board.area_nodes(player.area):
            state[name] = Piece(player.id, player.color)
    return state


# ---------------------------------------------------------------------------
# Display
# ---------------------------------------------------------------------------

def display_board(board: Board, state: BoardState) -> str:
    """
    Return a human-readable text representation of the board.

    One line per area (junction nodes last), each node shown as
    ``name:owner`` where owner is the player id or ``.`` when empty.

    Example output (2 players, initial position):

        T | T1:0  T2:0  T3:0  T4:0  T5:0  T6:0
        B | B1:1  B2:1  B3:1  B4:1  B5:1  B6:1
        * | G:.
    """
    groups: Dict[str, List[str]] = {}
    for name in board:
        key = board[name].area or "*"
        groups.setdefault(key, []).append(name)

    lines: List[str] = []
    for key in [a for a in AREAS if a in groups] + (["*"] if "*" in groups else []):
        cells = []
        for name in groups[key]:
            piece = state.get(name)
            cells.append(f"{name}:{'.' if piece is None else piece.player}")
        lines.append(f"  {key} | {'  '.join(cells)}")
    text = "\n".join(lines)
    print(text)
    return text
