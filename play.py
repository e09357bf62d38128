#!/usr/bin/env python3
"""Play Chakra against random computer players from the terminal."""

from __future__ import annotations

import argparse
import logging
import random
from typing import List, Optional

from chakra.board import Piece, display_board
from chakra.errors import ChakraError
from chakra.game import GameState
from chakra.move_gen import Move
from chakra.players import PALETTE
from chakra.session import GameSession, new_game
from chakra.turns import TurnResult


def fmt_move(move: Move) -> str:
    """Human-readable move string."""
    if move.is_jump:
        return f"{move.source} x{move.captured} -> {move.dest}"
    return f"{move.source} -> {move.dest}"


def print_scores(game: GameState) -> None:
    counts = game.piece_counts()
    for p in game.players:
        marker = "*" if p.id == game.current_player and not game.done else " "
        print(
            f" {marker} [{p.id}] {p.name} ({p.color}, {p.kind.value}) "
            f"area={p.area} target={p.target} score={p.score} pieces={counts[p.id]}"
        )


def print_turn(turn: TurnResult, game: GameState) -> None:
    name = game.players[turn.player].name
    if turn.passed:
        print(f"{name} has no legal move and passes.")
    else:
        print(f"{name} plays {fmt_move(turn.result.move)}")


def print_setup_help() -> None:
    print("Setup commands:")
    print("  show                      - display board")
    print("  clear                     - empty every node")
    print("  set <node> <player|.>     - place a piece of player id, or empty the node")
    print("  turn <player>             - set player to move")
    print("  done                      - finish setup and play")
    print("  quit                      - exit")


def setup_position(session: GameSession) -> None:
    """Interactive position editing before or during play."""
    game = session.game
    print_setup_help()
    while True:
        raw = input("setup> ").strip()
        if not raw:
            continue
        parts = raw.split()
        cmd = parts[0].lower()

        if cmd in {"help", "?"}:
            print_setup_help()
            continue
        if cmd in {"quit", "exit"}:
            raise SystemExit(0)
        if cmd == "show":
            display_board(game.board, game.state)
            continue
        if cmd == "clear":
            for node in game.state:
                game.state[node] = None
            print("Board cleared.")
            continue
        if cmd == "set":
            if len(parts) != 3:
                print("Usage: set <node> <player|.>")
                continue
            node = parts[1].upper()
            if node not in game.board:
                print(f"Unknown node {node}.")
                continue
            if parts[2] == ".":
                game.state[node] = None
                print(f"Cleared {node}.")
                continue
            try:
                pid = int(parts[2])
            except ValueError:
                print("Player must be an integer id or '.'.")
                continue
            if not 0 <= pid < len(game.players):
                print(f"Player must be in [0, {len(game.players) - 1}].")
                continue
            game.state[node] = Piece(pid, game.players[pid].color)
            print(f"Set {node} to player {pid}.")
            continue
        if cmd == "turn":
            if len(parts) != 2:
                print("Usage: turn <player>")
                continue
            try:
                pid = int(parts[1])
            except ValueError:
                print("Player must be an integer id.")
                continue
            if not 0 <= pid < len(game.players):
                print(f"Player must be in [0, {len(game.players) - 1}].")
                continue
            game.current_player = pid
            game.selected_node = None
            print(f"Turn set to {game.current.name}.")
            continue
        if cmd in {"done", "start"}:
            print("Setup finished.")
            display_board(game.board, game.state)
            return

        print("Unknown setup command. Type: help")


def print_play_help() -> None:
    print("Play commands:")
    print("  moves                     - list your legal moves")
    print("  moves <node>              - list legal moves of one piece")
    print("  <src> <dst>               - move a piece, e.g. T5 G")
    print("  rand                      - play a random legal move for you")
    print("  board                     - display board")
    print("  scores                    - show scores and piece counts")
    print("  setup                     - enter position setup mode")
    print("  quit                      - exit")


def human_turn(session: GameSession, rng: random.Random) -> None:
    """Read commands until the human player has made one legal move."""
    game = session.game
    while True:
        raw = input(f"{game.current.name}> ").strip()
        if not raw:
            continue
        low = raw.lower()
        parts = raw.upper().split()

        if low in {"help", "?"}:
            print_play_help()
            continue
        if low in {"quit", "exit"}:
            raise SystemExit(0)
        if low in {"board", "show"}:
            display_board(game.board, game.state)
            continue
        if low in {"scores", "s"}:
            print_scores(game)
            continue
        if low in {"setup"}:
            setup_position(session)
            return
        if parts[0] in {"MOVES", "M"}:
            if len(parts) == 2:
                moves = game.legal_moves(parts[1]) if parts[1] in game.board else []
            else:
                moves = game.legal_moves_for_player(game.current_player)
            for move in moves:
                print(f"  {fmt_move(move)}")
            if not moves:
                print("  (none)")
            continue
        if low in {"rand", "r"}:
            move = rng.choice(game.legal_moves_for_player(game.current_player))
            print(f"You (random) play {fmt_move(move)}")
            session.attempt_move(move.source, move.dest)
            return
        if len(parts) == 2:
            try:
                result = session.attempt_move(parts[0], parts[1])
            except ChakraError as exc:
                print(f"Illegal: {exc}")
                continue
            print(f"You play {fmt_move(result.move)}")
            return

        print("Invalid input. Type: help")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Play Chakra vs random computer players.")
    parser.add_argument(
        "--players",
        type=int,
        choices=[2, 3, 4],
        default=2,
        help="Total number of players (default: 2).",
    )
    parser.add_argument(
        "--humans",
        type=int,
        default=1,
        help="Number of human players, seated first (default: 1).",
    )
    parser.add_argument(
        "--names",
        nargs="+",
        default=None,
        help="Player names in seat order.",
    )
    parser.add_argument(
        "--colors",
        nargs="+",
        default=None,
        choices=PALETTE,
        help="Player colors in seat order.",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="RNG seed for computer players (default: unseeded).",
    )
    parser.add_argument(
        "--setup",
        action="store_true",
        help="Open setup mode before starting play.",
    )
    parser.add_argument(
        "--max-ply",
        type=int,
        default=1000,
        help="Safety stop after N turns (default: 1000).",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Engine log level (default: WARNING).",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(levelname)s %(name)s: %(message)s")
    rng = random.Random(args.seed)

    try:
        session = new_game(args.players, args.humans, args.names, args.colors, rng=rng)
    except ChakraError as exc:
        print(f"Cannot start game: {exc}")
        return 2
    game = session.game

    print_scores(game)
    print_play_help()
    if args.setup:
        setup_position(session)

    ply = 0
    while not session.done and ply < args.max_ply:
        for turn in session.play_computer_turns():
            print_turn(turn, session.game)
            ply += 1
        if session.done:
            break
        print()
        display_board(game.board, game.state)
        print(f"To move: {game.current.name} | legal moves: "
              f"{len(game.legal_moves_for_player(game.current_player))}")
        human_turn(session, rng)
        ply += 1

    print()
    display_board(game.board, game.state)
    print_scores(game)
    if session.done:
        winner = session.winner
        if winner is None:
            print(f"Result: no winner ({game.win_reason})")
        else:
            print(f"Result: {winner.name} wins by {game.win_reason}")
    else:
        print(f"Stopped after {args.max_ply} turns.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
