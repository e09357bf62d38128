"""
Player roster: colours, home areas and target areas per player count.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

from chakra.board import BOTTOM, LEFT, RIGHT, TOP

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

PALETTE: Tuple[str, ...] = (
    "blue", "red", "green", "orange", "purple",
    "yellow", "pink", "cyan", "magenta",
)

# Preselected colour for player i when none is given.
DEFAULT_COLORS: Tuple[str, ...] = ("blue", "red", "green", "orange", "purple", "yellow")

# Home area of player i, by player count.
HOME_AREAS: Dict[int, List[str]] = {
    2: [TOP, BOTTOM],
    3: [TOP, RIGHT, BOTTOM],
    4: [TOP, RIGHT, BOTTOM, LEFT],
}

# Area each home area must fill to win, by player count.
# In the 3-player game both R and B race for T.
TARGET_AREAS: Dict[int, Dict[str, str]] = {
    2: {TOP: BOTTOM, BOTTOM: TOP},
    3: {TOP: BOTTOM, RIGHT: TOP, BOTTOM: TOP},
    4: {TOP: BOTTOM, RIGHT: LEFT, BOTTOM: TOP, LEFT: RIGHT},
}

DEFAULT_DIFFICULTY: str = "easy"


class PlayerKind(Enum):
    HUMAN = "human"
    COMPUTER = "computer"


@dataclass
class Player:
    id: int
    name: str
    kind: PlayerKind
    color: str
    area: str
    target: str
    score: int = 0
    difficulty: str = DEFAULT_DIFFICULTY  # reserved, not used by move selection

    @property
    def is_human(self) -> bool:
        return self.kind is PlayerKind.HUMAN


def default_names(player_count: int) -> List[str]:
    return [f"Player {i + 1}" for i in range(player_count)]


def build_players(
    player_count: int,
    human_count: int,
    names: Optional[Sequence[str]] = None,
    colors: Optional[Sequence[str]] = None,
) -> List[Player]:
    """Create the roster for a new game.

    The first *human_count* seats are human, the rest computer.  Arguments
    are assumed valid; see ``chakra.session.new_game`` for validation.
    """
    names = list(names) if names is not None else default_names(player_count)
    colors = list(colors) if colors is not None else list(DEFAULT_COLORS[:player_count])
    areas = HOME_AREAS[player_count]
    targets = TARGET_AREAS[player_count]

    players: List[Player] = []
    for i in range(player_count):
        players.append(
            Player(
                id=i,
                name=names[i],
                kind=PlayerKind.HUMAN if i < human_count else PlayerKind.COMPUTER,
                color=colors[i],
                area=areas[i],
                target=targets[areas[i]],
            )
        )
    return players
