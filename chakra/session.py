"""
Game sessions: the boundary the presentation layer talks to.

``new_game`` validates the setup and returns a ``GameSession``, which owns
the GameState, its TurnController and the cosmetic board rotation.  The
presentation keeps a reference to the session; there is no global instance.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from chakra.board import SUPPORTED_PLAYER_COUNTS, Board, Point
from chakra.errors import GameAlreadyOver, IllegalMove, InvalidConfiguration
from chakra.game import GameState, MoveResult
from chakra.layout import next_rotation, node_positions, turn_angle
from chakra.move_gen import is_player_piece
from chakra.players import PALETTE, Player, build_players
from chakra.turns import TurnController, TurnResult

logger = logging.getLogger(__name__)


def validate_setup(
    player_count: int,
    human_count: int,
    names: Optional[Sequence[str]],
    colors: Optional[Sequence[str]],
) -> None:
    """Raise ``InvalidConfiguration`` unless the arguments describe a playable game."""
    if player_count not in SUPPORTED_PLAYER_COUNTS:
        raise InvalidConfiguration(
            f"player_count must be one of {SUPPORTED_PLAYER_COUNTS}, got {player_count}."
        )
    if not 1 <= human_count <= player_count:
        raise InvalidConfiguration(
            f"human_count must be between 1 and {player_count}, got {human_count}."
        )
    if names is not None:
        if len(names) != player_count:
            raise InvalidConfiguration(
                f"Expected {player_count} names, got {len(names)}."
            )
        if any(not str(n).strip() for n in names):
            raise InvalidConfiguration("Player names must not be blank.")
    if colors is not None:
        if len(colors) != player_count:
            raise InvalidConfiguration(
                f"Expected {player_count} colors, got {len(colors)}."
            )
        unknown = [c for c in colors if c not in PALETTE]
        if unknown:
            raise InvalidConfiguration(f"Unknown colors: {', '.join(unknown)}.")
        if len(set(colors)) != len(colors):
            raise InvalidConfiguration("Each player needs a different color.")


class GameSession:
    """One game from setup to game over, plus the presentation rotation."""

    def __init__(self, players: Sequence[Player], enable_rotation: bool = False,
                 rng: Any = None) -> None:
        self.enable_rotation = enable_rotation
        self.rng = rng
        self.rotation_angle: float = 0.0
        self.game = GameState(players)
        self.controller = TurnController(self.game, rng, on_turn=self._on_turn)
        self._on_turn(self.game.current)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def board(self) -> Board:
        return self.game.board

    @property
    def players(self) -> List[Player]:
        return self.game.players

    @property
    def done(self) -> bool:
        return self.game.done

    @property
    def selected_node(self) -> Optional[str]:
        return self.game.selected_node

    def positions(self) -> Dict[str, Point]:
        """Node positions as drawn, rotated when rotation is enabled."""
        return node_positions(self.board, self.rotation_angle)

    def edges(self) -> List[Tuple[str, str]]:
        return self.board.edges()

    def highlighted_moves(self) -> List[str]:
        """Destinations reachable from the selected node."""
        if self.game.selected_node is None:
            return []
        return self.game.legal_destinations(self.game.selected_node)

    @property
    def winner(self) -> Optional[Player]:
        if self.game.winner is None:
            return None
        return self.game.players[self.game.winner]

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def select_node(self, node: str) -> Optional[MoveResult]:
        """Handle a click on *node* by the current human player.

        With nothing selected, clicking one of the player's pieces selects
        it.  With a piece selected, clicking another own piece reselects and
        clicking an empty node attempts the move there.  Returns the move
        result when a move was played.
        """
        game = self.game
        if game.done:
            raise GameAlreadyOver("The game has already ended.")
        try:
            if node not in game.board:
                raise IllegalMove(f"Unknown node {node!r}.")
            if not game.current.is_human:
                raise IllegalMove(f"It is {game.current.name}'s turn (computer).")

            if is_player_piece(game.state, node, game.current_player):
                game.selected_node = node
                return None
            if game.selected_node is None or game.state[node] is not None:
                return None
            return self.controller.submit(game.selected_node, node)
        except IllegalMove:
            game.selected_node = None
            raise

    def attempt_move(self, source: str, dest: str) -> MoveResult:
        """Play ``source -> dest`` for the current human player.

        On ``IllegalMove`` the selection is cleared and the error re-raised
        so the caller can prompt again.
        """
        try:
            return self.controller.submit(source, dest)
        except IllegalMove:
            self.game.selected_node = None
            raise

    def play_computer_turns(self, max_turns: Optional[int] = None) -> List[TurnResult]:
        """Let computer players (and players with no move) act until a human is up."""
        if self.game.done:
            return []
        return self.controller.run(max_turns)

    def play_computer_turn(self) -> Optional[TurnResult]:
        """Play a single automatic turn, or return None if a human must move."""
        return self.controller.play_turn()

    def reset_game(self) -> None:
        """Start over with the same players and settings."""
        self.game.reset()
        self.rotation_angle = 0.0
        self.controller = TurnController(self.game, self.rng, on_turn=self._on_turn)
        self._on_turn(self.game.current)
        logger.info("Game reset (%d players)", len(self.game.players))

    # ------------------------------------------------------------------
    # Rotation
    # ------------------------------------------------------------------

    def _on_turn(self, player: Player) -> None:
        if not self.enable_rotation:
            self.rotation_angle = 0.0
            return
        target = turn_angle(len(self.game.players), player.area)
        self.rotation_angle = next_rotation(self.rotation_angle, target)


def new_game(
    player_count: int,
    human_count: int,
    names: Optional[Sequence[str]] = None,
    colors: Optional[Sequence[str]] = None,
    enable_rotation: bool = False,
    rng: Any = None,
) -> GameSession:
    """Create a session; raises ``InvalidConfiguration`` for a bad setup."""
    validate_setup(player_count, human_count, names, colors)
    players = build_players(player_count, human_count, names, colors)
    session = GameSession(players, enable_rotation=enable_rotation, rng=rng)
    logger.info(
        "New game: %d players (%d human), rotation %s",
        player_count, human_count, "on" if enable_rotation else "off",
    )
    return session
