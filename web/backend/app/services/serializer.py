from __future__ import annotations

from typing import Optional

from chakra.move_gen import Move
from chakra.turns import TurnResult

from .session import Session


def move_to_payload(player: int, move: Optional[Move]) -> Optional[dict]:
    if move is None:
        return None
    return {
        "player":   player,
        "source":   move.source,
        "dest":     move.dest,
        "captured": move.captured,
        "passed":   False,
    }


def turn_to_payload(turn: TurnResult) -> dict:
    if turn.passed:
        return {"player": turn.player, "source": "", "dest": "", "captured": None, "passed": True}
    return move_to_payload(turn.player, turn.result.move)


def session_to_payload(session_id: str, session: Session) -> dict:
    """Convert a Session into the standard API response payload."""
    gs = session.game
    game = gs.game
    positions = gs.positions()
    counts = game.piece_counts()

    nodes = []
    for name in game.board:
        piece = game.state[name]
        x, y = positions[name]
        nodes.append({
            "name":  name,
            "x":     x,
            "y":     y,
            "area":  game.board[name].area,
            "piece": None if piece is None else piece.player,
            "color": None if piece is None else piece.color,
        })

    players = [
        {
            "id":     p.id,
            "name":   p.name,
            "kind":   p.kind.value,
            "color":  p.color,
            "area":   p.area,
            "target": p.target,
            "score":  p.score,
            "pieces": counts[p.id],
        }
        for p in game.players
    ]

    return {
        "session_id":          session_id,
        "player_count":        len(game.players),
        "nodes":               nodes,
        "edges":               [list(e) for e in gs.edges()],
        "players":             players,
        "current_player":      game.current_player,
        "current_player_kind": game.current.kind.value,
        "waiting_for_human":   gs.controller.waiting_for_human,
        "selected_node":       gs.selected_node,
        "highlighted":         gs.highlighted_moves(),
        "rotation_angle":      gs.rotation_angle,
        "done":                game.done,
        "winner":              game.winner,
        "win_reason":          game.win_reason,
        "move_count":          game.move_count,
        "last_move":           move_to_payload(game.last_mover, game.last_move),
        "computer_turns":      [turn_to_payload(t) for t in session.last_turns],
    }
