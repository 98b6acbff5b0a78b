"""Terminal front-end for single-player Battleship."""

from __future__ import annotations

import argparse
import random
from typing import Sequence

from battleship.config import load_game_config
from battleship.engine.game import BattleshipGame, Shot
from battleship.session import GameSession
from battleship.telemetry import init_telemetry

SHOT_GLYPHS = {
    Shot.UNTARGETED: " ",
    Shot.MISS: "O",
    Shot.HIT: "X",
}

HELP_TEXT = "Commands: '<row> <col>' to fire, 'new [rows cols]' for a new game, 'q' to quit."


def format_board(game: BattleshipGame) -> str:
    """Render the shot grid with 1-based row and column headers."""
    header = "    " + " ".join(f"{col + 1:^3}" for col in range(game.cols))
    lines = [header]
    for row_index, row in enumerate(game.shots, start=1):
        cells = " ".join(f"[{SHOT_GLYPHS[shot]}]" for shot in row)
        lines.append(f"{row_index:>2} |" + cells)
    return "\n".join(lines)


def render(session: GameSession) -> str:
    game = session.game
    return "\n".join(
        [
            game.message,
            game.game_stats().summary(),
            format_board(game),
        ]
    )


def parse_target(text: str, game: BattleshipGame) -> tuple[int, int]:
    """Turn '3 7' (1-based) into zero-based grid indices."""
    parts = text.replace(",", " ").split()
    if len(parts) != 2:
        raise ValueError("Use the format '<row> <col>', e.g. '3 7'.")
    try:
        row, col = (int(part) - 1 for part in parts)
    except ValueError as exc:
        raise ValueError("Row and column must be numbers.") from exc
    if row not in range(game.rows) or col not in range(game.cols):
        raise ValueError(f"Pick a row in 1-{game.rows} and a column in 1-{game.cols}.")
    return row, col


def _handle_new(session: GameSession, args: Sequence[str]) -> None:
    if args:
        if len(args) != 2:
            raise ValueError("Use 'new <rows> <cols>'.")
        try:
            rows, cols = (int(arg) for arg in args)
        except ValueError as exc:
            raise ValueError("Rows and columns must be numbers.") from exc
        session.set_dimensions(rows, cols)
    session.start_new_game()


def _prompt_play_again(session: GameSession) -> bool:
    while True:
        raw = input("Play again? [Y/n]: ").strip().lower()
        if raw in {"", "y", "yes"}:
            session.request_play_again()
            return True
        if raw in {"n", "no"}:
            return False
        print("Please answer with 'y' or 'n'.")


def play_game(session: GameSession) -> None:
    print("Welcome to Battleship!")
    print(HELP_TEXT)
    try:
        _game_loop(session)
    except (EOFError, KeyboardInterrupt):
        print()
        print("Goodbye!")


def _game_loop(session: GameSession) -> None:
    while True:
        print()
        print(render(session))

        if session.game.game_over:
            if not _prompt_play_again(session):
                print("Goodbye!")
                return
            session.start_new_game()
            continue

        raw = input("> ").strip()
        if not raw:
            continue
        command, *args = raw.split()
        if command.lower() in {"q", "quit", "exit"}:
            print("Goodbye!")
            return
        try:
            if command.lower() == "new":
                _handle_new(session, args)
            else:
                row, col = parse_target(raw, session.game)
                session.select_and_shoot(row, col)
        except ValueError as exc:
            print(f"Invalid input: {exc}")


def main(argv: Sequence[str] | None = None) -> None:
    config = load_game_config()
    parser = argparse.ArgumentParser(description="Play single-player Battleship in the terminal.")
    parser.add_argument(
        "--rows", type=int, default=config.default_rows, help="Number of grid rows (4-20)."
    )
    parser.add_argument(
        "--cols", type=int, default=config.default_cols, help="Number of grid columns (4-20)."
    )
    parser.add_argument(
        "--seed", type=int, default=config.seed, help="Optional RNG seed for reproducibility."
    )
    args = parser.parse_args(argv)

    init_telemetry()
    session = GameSession(
        config=config, rng=random.Random(args.seed), rows=args.rows, cols=args.cols
    )
    play_game(session)


if __name__ == "__main__":
    main()
