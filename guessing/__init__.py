"""Terminal guess-the-number: one round per run with a persistent per-player leaderboard."""

import argparse
import json
import logging
import os
import random
import sys
import traceback
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Optional

from shared import logs, settings
from .leaderboard import (
    GameError,
    Leaderboard,
    Player,
    ScoreRecord,
    load_leaderboard,
    print_leaderboard,
    read_player_name,
    save_leaderboard,
    write_game_result,
)
from .game import GameResult, GuessingRound

DATA_DIR = "data"
LOG_DIR = os.path.join(DATA_DIR, "logs")
SETTINGS_FILE = os.path.join(DATA_DIR, "guessing_settings.json")
NAME_FILE = "input.txt"
RESULT_FILE = "output.txt"
SCORES_FILE = "scores.csv"

LOWER_BOUND = 1
UPPER_BOUND = 100
MAX_ATTEMPTS = 10  # 0 = unlimited

SAFE_MODE = os.getenv("GUESSING_SAFE_MODE", "0") not in {"0", "false", "False", ""}
SAFE_MODE_MESSAGE = "Safe mode enabled; skipping persistence."

logger = logging.getLogger(__name__)


@dataclass
class GamePaths:
    name_file: str = NAME_FILE
    scores_file: str = SCORES_FILE
    result_file: str = RESULT_FILE


def set_safe_mode(enabled: bool) -> None:
    """Allow CLI flags/tests to toggle persistence at runtime."""
    global SAFE_MODE
    SAFE_MODE = bool(enabled)


def load_paths(settings_file: str = SETTINGS_FILE) -> GamePaths:
    defaults = {"name_file": NAME_FILE, "scores_file": SCORES_FILE, "result_file": RESULT_FILE}
    data = settings.load_settings(Path(settings_file), defaults)
    return GamePaths(data["name_file"], data["scores_file"], data["result_file"])


def resolve_player_name(name_file: str, input_fn: Callable[[str], str] = input, output_fn: Callable[[str], None] = print) -> str:
    name_from_file = None
    try:
        name_from_file = read_player_name(name_file)
    except GameError as exc:
        logger.warning("Couldn't read name file: %s", exc)
        output_fn(f"Warning: couldn't read input file: {exc}")

    if name_from_file:
        output_fn(f"Using player name from input file: {name_from_file}")
        return name_from_file

    name = input_fn("Enter your name: ").strip()
    while not name:
        name = input_fn("Name cannot be empty. Enter your name: ").strip()
    return name


def format_summary(player: Player, result: GameResult, record: ScoreRecord, lower: int, upper: int) -> str:
    lines = [
        f"Player: {player.name}",
        f"Secret Range: {lower} - {upper}",
        f"Attempts this round: {result.attempts}",
        f"Result: {'Guessed Correctly' if result.won else 'Did not guess'}",
        "",
        f"Aggregated stats for {player.name}",
        f"  Total attempts: {record.total_attempts}",
        f"  Games played: {record.games_played}",
        f"  Wins: {record.wins}",
        f"  Best attempts (lowest successful attempts): {record.reported_best_attempts()}",
        f"  Average attempts per game: {record.average_attempts():.2f}",
    ]
    return "\n".join(lines) + "\n"


def apply_result(leaderboard: Leaderboard, name: str, result: GameResult) -> bool:
    """Fold ``result`` into ``name``'s record; rounds with no attempts are not recorded."""
    record = leaderboard.get(name, ScoreRecord())
    recorded = result.attempts > 0
    if recorded:
        record.record_game(result.attempts, result.won)
    leaderboard[name] = record
    return recorded


def play_session(
    paths: Optional[GamePaths] = None,
    *,
    input_fn: Optional[Callable[[str], str]] = None,
    output_fn: Callable[[str], None] = print,
    rng: Optional[random.Random] = None,
    secret: Optional[int] = None,
    lower: int = LOWER_BOUND,
    upper: int = UPPER_BOUND,
    max_attempts: int = MAX_ATTEMPTS,
) -> Dict[str, object]:
    """Run one full session and return a summary of what happened."""
    input_fn = input_fn or input
    paths = paths or GamePaths()
    player = Player(resolve_player_name(paths.name_file, input_fn, output_fn))
    logger.info("Session started for %s", player.name)

    try:
        leaderboard = load_leaderboard(paths.scores_file)
    except GameError as exc:
        logger.warning("Couldn't load leaderboard: %s", exc)
        output_fn(f"Warning: couldn't load leaderboard: {exc}")
        leaderboard = {}
    print_leaderboard(leaderboard, "Leaderboard snapshot:", output_fn)

    game = GuessingRound(lower, upper, max_attempts, rng=rng, input_fn=input_fn, output_fn=output_fn)
    result = game.play(player.name, secret=secret)

    recorded = apply_result(leaderboard, player.name, result)
    record = leaderboard[player.name]

    if SAFE_MODE:
        output_fn(SAFE_MODE_MESSAGE)
    else:
        try:
            save_leaderboard(leaderboard, paths.scores_file)
        except GameError as exc:
            logger.warning("Couldn't save leaderboard: %s", exc)
            output_fn(f"Warning: couldn't save leaderboard: {exc}")

        try:
            write_game_result(format_summary(player, result, record, lower, upper), paths.result_file)
            output_fn(f"Game result saved to {paths.result_file}")
        except GameError as exc:
            logger.warning("Couldn't write result file: %s", exc)
            output_fn(f"Warning: couldn't write output file: {exc}")

    output_fn("")
    print_leaderboard(leaderboard, "Updated Leaderboard:", output_fn)

    return {
        "player": player.name,
        "lower": lower,
        "upper": upper,
        "max_attempts": game.max_attempts,
        "attempts": result.attempts,
        "won": result.won,
        "outcome": result.outcome,
        "recorded": recorded,
        "stats": {
            "total_attempts": record.total_attempts,
            "games_played": record.games_played,
            "wins": record.wins,
            "best_attempts": record.reported_best_attempts(),
            "average_attempts": round(record.average_attempts(), 2),
        },
    }


def run_doctor(paths: GamePaths) -> None:
    print("Guess-the-number diagnostics")
    print(f"- Python: {sys.version.split()[0]}")
    print(f"- Safe mode: {SAFE_MODE}")
    print(f"- Name file: {paths.name_file}")
    print(f"- Scores file: {paths.scores_file}")
    print(f"- Result file: {paths.result_file}")

    def _check(path: str) -> str:
        try:
            if os.path.exists(path):
                with open(path, "r", encoding="utf-8") as f:
                    f.read(64)
                return "ok"
            return "missing"
        except (OSError, ValueError) as exc:
            return f"error ({exc})"

    print(f"- Name file status: {_check(paths.name_file)}")
    print(f"- Scores file status: {_check(paths.scores_file)}")
    print(f"- Result file status: {_check(paths.result_file)}")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Guess-the-number with a persistent per-player leaderboard.")
    parser.add_argument("--name-file", help=f"File whose first non-blank line is the player name (default {NAME_FILE}).")
    parser.add_argument("--scores-file", help=f"Leaderboard CSV path (default {SCORES_FILE}).")
    parser.add_argument("--result-file", help=f"Where to write the round summary (default {RESULT_FILE}).")
    parser.add_argument("--settings-file", default=SETTINGS_FILE, help="JSON file that can override the file paths.")
    safe = parser.add_mutually_exclusive_group()
    safe.add_argument("--safe-mode", dest="safe_mode", action="store_true", help="Disable persistence during this run.")
    safe.add_argument("--persist", dest="safe_mode", action="store_false", help="Force persistence during this run.")
    parser.set_defaults(safe_mode=None)
    parser.add_argument("--seed", type=int, help="Seed the secret number for a reproducible round.")
    parser.add_argument(
        "--output",
        choices=("text", "json"),
        default="text",
        help="Choose text (default) or also print a json summary after the round.",
    )
    parser.add_argument("--summary-file", help="Optional path to write the summary JSON.")
    parser.add_argument("--log-dir", default=LOG_DIR, help=f"Directory for the rotating log file (default {LOG_DIR}).")
    parser.add_argument("--doctor", action="store_true", help="Print file paths and their status, then exit.")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    paths = load_paths(args.settings_file)
    if args.name_file:
        paths.name_file = args.name_file
    if args.scores_file:
        paths.scores_file = args.scores_file
    if args.result_file:
        paths.result_file = args.result_file
    if args.safe_mode is not None:
        set_safe_mode(args.safe_mode)
    if args.doctor:
        run_doctor(paths)
        return

    app_logger = logs.configure_logger("guessing", args.log_dir, "guessing.log")
    rng = random.Random(args.seed) if args.seed is not None else None
    try:
        summary = play_session(paths, rng=rng)
    except ValueError as exc:
        logger.error("Invalid data: %s", exc)
        print(f"Invalid data: {exc}", file=sys.stderr)
        raise SystemExit(1)
    except Exception as exc:
        logger.exception("Unexpected error")
        print(f"Unexpected error: {exc}", file=sys.stderr)
        traceback.print_exc()
        raise SystemExit(1)
    finally:
        logs.shutdown_logger(app_logger)

    if args.output == "json":
        payload = json.dumps(summary, indent=2)
        print(payload)
        if args.summary_file:
            try:
                with open(args.summary_file, "w", encoding="utf-8") as f:
                    f.write(payload)
            except OSError as exc:
                print(f"Could not write summary file: {exc}")


if __name__ == "__main__":
    main()
