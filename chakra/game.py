"""
Chakra game engine.

Implements the turn state machine:
- One move per turn, advanced exactly once after each accepted move
- Passing when the acting player has no legal move
- Scoring (one point per captured piece)
- Terminal condition detection (target-area fill, elimination, blocked)
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Sequence

from chakra.board import Board, BoardState, generate, initial_state
from chakra.captures import get_jump_target, get_legal_moves, get_legal_moves_for_player
from chakra.errors import GameAlreadyOver, IllegalMove
from chakra.move_gen import (
    JumpMove, Move, SimpleMove, get_player_pieces, is_player_piece, owner_of,
)
from chakra.players import Player

logger = logging.getLogger(__name__)

# Terminal reasons
TARGET_AREA: str = "target_area"
ELIMINATION: str = "elimination"
BLOCKED: str = "blocked"


class Phase(Enum):
    SETUP = "setup"
    IN_TURN = "in_turn"
    MOVE_ACCEPTED = "move_accepted"
    GAME_OVER = "game_over"


@dataclass(frozen=True)
class MoveResult:
    """Outcome of one accepted move, reported back to the presentation layer."""

    player: int
    move: Move
    score: int
    done: bool
    winner: Optional[int]
    win_reason: Optional[str]


# ---------------------------------------------------------------------------
# GameState
# ---------------------------------------------------------------------------

class GameState:
    """Full game state for one Chakra game.

    Owns the occupancy, the roster and the turn pointer.  The board graph
    itself is shared and never mutated.
    """

    def __init__(self, players: Sequence[Player]) -> None:
        self.phase: Phase = Phase.SETUP
        self.players: List[Player] = list(players)
        self.board: Board = generate(len(self.players))
        self.state: BoardState = initial_state(self.board, self.players)
        self.current_player: int = 0
        self.selected_node: Optional[str] = None  # UI pointer, not authoritative
        self.move_count: int = 0
        self.consecutive_passes: int = 0
        self.last_move: Optional[Move] = None
        self.last_mover: Optional[int] = None
        self.winner: Optional[int] = None
        self.win_reason: Optional[str] = None
        self.phase = Phase.IN_TURN

    # ------------------------------------------------------------------
    # Reset
    # ------------------------------------------------------------------

    def reset(self) -> None:
        """Restart from the initial position with the same roster, scores zeroed."""
        self.__init__([dataclasses.replace(p, score=0) for p in self.players])

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def done(self) -> bool:
        return self.phase is Phase.GAME_OVER

    @property
    def current(self) -> Player:
        return self.players[self.current_player]

    def scores(self) -> Dict[int, int]:
        return {p.id: p.score for p in self.players}

    def piece_counts(self) -> Dict[int, int]:
        counts = {p.id: 0 for p in self.players}
        for piece in self.state.values():
            if piece is not None:
                counts[piece.player] += 1
        return counts

    def legal_moves(self, node: str) -> List[Move]:
        return get_legal_moves(self.board, self.state, node)

    def legal_moves_for_player(self, player: int) -> List[Move]:
        return get_legal_moves_for_player(self.board, self.state, player)

    def legal_destinations(self, node: str) -> List[str]:
        """Return the distinct destinations reachable from *node*, in move order."""
        seen: List[str] = []
        for move in self.legal_moves(node):
            if move.dest not in seen:
                seen.append(move.dest)
        return seen

    # ------------------------------------------------------------------
    # Move resolution
    # ------------------------------------------------------------------

    def _check_can_move(self) -> None:
        if self.done:
            raise GameAlreadyOver("The game has already ended.")
        if self.phase is not Phase.IN_TURN:
            raise IllegalMove(
                f"{self.current.name} has already moved this turn."
            )

    def find_move(self, source: str, dest: str) -> Move:
        """Resolve a ``(source, dest)`` intent into a legal move for the current player.

        A jump takes precedence over a simple step when both would reach
        *dest*.  Raises ``IllegalMove`` when the pair is not legal.
        """
        self._check_can_move()
        for name in (source, dest):
            if name not in self.board:
                raise IllegalMove(f"Unknown node {name!r}.")
        if not is_player_piece(self.state, source, self.current_player):
            raise IllegalMove(
                f"Node {source} does not hold a piece of {self.current.name}."
            )
        if self.state[dest] is not None:
            raise IllegalMove(f"Node {dest} is occupied.")

        captured = get_jump_target(self.board, self.state, source, dest)
        if captured is not None:
            return JumpMove(source, dest, captured)
        if self.board.is_adjacent(source, dest):
            return SimpleMove(source, dest)
        raise IllegalMove(f"{source} -> {dest} is not a legal move.")

    # ------------------------------------------------------------------
    # Move application
    # ------------------------------------------------------------------

    def apply_move(self, move: Move) -> MoveResult:
        """Apply *move* for the current player and evaluate the win conditions.

        Preconditions: the game is not over, the current player has not
        moved yet this turn, the source holds one of their pieces and the
        move is among the legal moves from that source.
        """
        self._check_can_move()
        if not is_player_piece(self.state, move.source, self.current_player):
            raise IllegalMove(
                f"Node {move.source} does not hold a piece of {self.current.name}."
            )
        if move not in self.legal_moves(move.source):
            raise IllegalMove(f"{move} is not legal in the current position.")

        player = self.current
        self.state[move.dest] = self.state[move.source]
        self.state[move.source] = None
        if isinstance(move, JumpMove):
            self.state[move.captured] = None
            player.score += 1

        self.move_count += 1
        self.consecutive_passes = 0
        self.last_move = move
        self.last_mover = player.id
        self.selected_node = None
        logger.debug("%s played %s", player.name, move)

        self._check_terminal(player)
        if not self.done:
            self.phase = Phase.MOVE_ACCEPTED

        return MoveResult(
            player=player.id,
            move=move,
            score=player.score,
            done=self.done,
            winner=self.winner,
            win_reason=self.win_reason,
        )

    # ------------------------------------------------------------------
    # Turn advancement
    # ------------------------------------------------------------------

    def advance_turn(self) -> None:
        """Hand the turn to the next player after an accepted move.

        Does nothing once the game is over.
        """
        if self.done:
            return
        if self.phase is not Phase.MOVE_ACCEPTED:
            raise IllegalMove("No move has been accepted this turn.")
        self._next_player()

    def pass_turn(self) -> None:
        """Skip the current player, who must have no legal move.

        If every player passes in a row nobody can move again and the game
        ends without a winner.
        """
        self._check_can_move()
        if self.legal_moves_for_player(self.current_player):
            raise IllegalMove(f"{self.current.name} has a legal move and cannot pass.")

        logger.debug("%s has no legal move and passes", self.current.name)
        self.consecutive_passes += 1
        if self.consecutive_passes >= len(self.players):
            logger.warning("No player can move; ending the game without a winner")
            self._finish(None, BLOCKED)
            return
        self._next_player()

    def _next_player(self) -> None:
        self.current_player = (self.current_player + 1) % len(self.players)
        self.selected_node = None
        self.phase = Phase.IN_TURN

    # ------------------------------------------------------------------
    # Terminal condition check
    # ------------------------------------------------------------------

    def _check_terminal(self, player: Player) -> None:
        """Check the win conditions after *player* moved, in fixed order."""
        # 1. Target area completely held by the acting player
        target_nodes = self.board.area_nodes(player.target)
        if target_nodes and all(
            owner_of(self.state, n) == player.id for n in target_nodes
        ):
            self._finish(player.id, TARGET_AREA)
            return

        # 2. Exactly one player still has pieces
        remaining = [p for p in self.players if get_player_pieces(self.state, p.id)]
        if len(remaining) == 1:
            self._finish(remaining[0].id, ELIMINATION)

    def _finish(self, winner: Optional[int], reason: str) -> None:
        self.winner = winner
        self.win_reason = reason
        self.selected_node = None
        self.phase = Phase.GAME_OVER
        if winner is None:
            logger.info("Game over (%s)", reason)
        else:
            logger.info("Game over: %s wins by %s", self.players[winner].name, reason)

    # ------------------------------------------------------------------
    # String representation
    # ------------------------------------------------------------------

    def __repr__(self) -> str:
        status = "done" if self.done else "ongoing"
        return (
            f"GameState({status}, players={len(self.players)}, "
            f"{self.current.name} to move, move={self.move_count})"
        )
