"""Turn sequencing: who acts next and how computer players pick their move."""

from __future__ import annotations

import logging
import random
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from chakra.errors import GameAlreadyOver, IllegalMove
from chakra.game import GameState, MoveResult
from chakra.move_gen import Move
from chakra.players import Player, PlayerKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TurnResult:
    """What happened during one automatically played turn."""

    player: int
    result: Optional[MoveResult]  # None when the player passed

    @property
    def passed(self) -> bool:
        return self.result is None


# ---------------------------------------------------------------------------
# Player controllers
# ---------------------------------------------------------------------------

class PlayerController(ABC):
    """Decides moves for one seat."""

    def __init__(self, player_id: int):
        self.player_id = player_id

    @property
    @abstractmethod
    def kind(self) -> PlayerKind:
        pass

    @property
    def is_interactive(self) -> bool:
        """True if the controller waits for external input."""
        return False

    @abstractmethod
    def choose_move(self, game: GameState, legal: List[Move]) -> Optional[Move]:
        """Return the move to play from the non-empty *legal* list, or None to wait."""


class HumanController(PlayerController):
    """Moves arrive from the presentation layer through ``TurnController.submit``."""

    @property
    def kind(self) -> PlayerKind:
        return PlayerKind.HUMAN

    @property
    def is_interactive(self) -> bool:
        return True

    def choose_move(self, game: GameState, legal: List[Move]) -> Optional[Move]:
        return None


class RandomController(PlayerController):
    """Computer player picking uniformly among the legal moves.

    ``difficulty`` is kept for the roster but does not change the choice.
    """

    def __init__(self, player_id: int, rng: Any, difficulty: str = "easy"):
        super().__init__(player_id)
        self.rng = rng
        self.difficulty = difficulty

    @property
    def kind(self) -> PlayerKind:
        return PlayerKind.COMPUTER

    def choose_move(self, game: GameState, legal: List[Move]) -> Optional[Move]:
        return self.rng.choice(legal)


def make_controller(player: Player, rng: Any) -> PlayerController:
    if player.kind is PlayerKind.HUMAN:
        return HumanController(player.id)
    if player.kind is PlayerKind.COMPUTER:
        return RandomController(player.id, rng, player.difficulty)
    raise ValueError(f"Unknown player kind: {player.kind}")


# ---------------------------------------------------------------------------
# TurnController
# ---------------------------------------------------------------------------

class TurnController:
    """Drives a GameState one turn at a time.

    Every accepted move is followed by exactly one ``advance()``.  Pacing
    delays between a computer's choice, its application and the next turn
    belong to the presentation layer; here everything is synchronous.

    *rng* is any object with a ``choice`` method; it defaults to the
    process-wide ``random`` module.  *on_turn* is called with the new
    current player each time the turn changes hands.
    """

    def __init__(
        self,
        game: GameState,
        rng: Any = None,
        on_turn: Optional[Callable[[Player], None]] = None,
    ) -> None:
        self.game = game
        self.rng = rng if rng is not None else random
        self.on_turn = on_turn
        self.controllers: Dict[int, PlayerController] = {
            p.id: make_controller(p, self.rng) for p in game.players
        }

    @property
    def current_controller(self) -> PlayerController:
        return self.controllers[self.game.current_player]

    @property
    def waiting_for_human(self) -> bool:
        """True if the game is waiting for a human with at least one legal move."""
        game = self.game
        return (
            not game.done
            and self.current_controller.is_interactive
            and bool(game.legal_moves_for_player(game.current_player))
        )

    # ------------------------------------------------------------------
    # Advancement
    # ------------------------------------------------------------------

    def advance(self) -> None:
        self.game.advance_turn()
        self._notify()

    def _notify(self) -> None:
        if self.on_turn is not None and not self.game.done:
            self.on_turn(self.game.current)

    # ------------------------------------------------------------------
    # Human input
    # ------------------------------------------------------------------

    def submit(self, source: str, dest: str) -> MoveResult:
        """Apply a human player's ``(source, dest)`` intent and pass the turn on."""
        game = self.game
        if game.done:
            raise GameAlreadyOver("The game has already ended.")
        if not self.current_controller.is_interactive:
            raise IllegalMove(f"It is {game.current.name}'s turn (computer).")
        move = game.find_move(source, dest)
        result = game.apply_move(move)
        self.advance()
        return result

    # ------------------------------------------------------------------
    # Automatic play
    # ------------------------------------------------------------------

    def play_turn(self) -> Optional[TurnResult]:
        """Play the current turn if it does not need human input.

        A player without legal moves passes.  A computer player makes one
        random move.  Returns None when a human has to move.
        """
        game = self.game
        if game.done:
            raise GameAlreadyOver("The game has already ended.")

        player_id = game.current_player
        legal = game.legal_moves_for_player(player_id)
        if not legal:
            game.pass_turn()
            self._notify()
            return TurnResult(player_id, None)

        move = self.current_controller.choose_move(game, legal)
        if move is None:
            return None

        logger.debug("Computer %s chose %s", game.current.name, move)
        result = game.apply_move(move)
        self.advance()
        return TurnResult(player_id, result)

    def run(self, max_turns: Optional[int] = None) -> List[TurnResult]:
        """Play turns until a human must act, the game ends, or *max_turns* is reached."""
        results: List[TurnResult] = []
        while not self.game.done:
            if max_turns is not None and len(results) >= max_turns:
                break
            turn = self.play_turn()
            if turn is None:
                break
            results.append(turn)
        return results
