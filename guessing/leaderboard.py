"""Player stats and the CSV-backed leaderboard store.

The leaderboard file is plain text, one player per line::

    # name,totalAttempts,gamesPlayed,wins,bestAttempts
    alice,12,3,2,4

A ``bestAttempts`` of 0 means "no win yet". The in-memory record keeps that as
``None`` and only collapses it to 0 when writing or reporting, so a real win
can never be stored as 0.
"""

from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

HEADER = "# name,totalAttempts,gamesPlayed,wins,bestAttempts"
FIELD_COUNT = 5


class GameError(Exception):
    """Reading or writing one of the game's files failed."""


@dataclass(frozen=True)
class Player:
    name: str

    def __post_init__(self) -> None:
        if self.name is None or not self.name.strip():
            raise ValueError("Player name cannot be null or empty.")
        object.__setattr__(self, "name", self.name.strip())


@dataclass
class ScoreRecord:
    """Aggregated stats for one player across every recorded round."""

    total_attempts: int = 0
    games_played: int = 0
    wins: int = 0
    best_attempts: Optional[int] = field(default=None)

    @classmethod
    def from_row(cls, total_attempts: int, games_played: int, wins: int, best_attempts: int) -> "ScoreRecord":
        """Build a record from stored values; a stored best of 0 means no win yet."""
        return cls(total_attempts, games_played, wins, best_attempts or None)

    def record_game(self, attempts: int, won: bool) -> None:
        self.total_attempts += attempts
        self.games_played += 1
        if won:
            self.wins += 1
            if self.best_attempts is None or attempts < self.best_attempts:
                self.best_attempts = attempts

    def average_attempts(self) -> float:
        if self.games_played == 0:
            return 0.0
        return self.total_attempts / self.games_played

    def reported_best_attempts(self) -> int:
        """Best winning attempt count, or 0 when the player has never won."""
        return self.best_attempts if self.best_attempts is not None else 0

    def to_row(self, name: str) -> str:
        return f"{name},{self.total_attempts},{self.games_played},{self.wins},{self.reported_best_attempts()}"

    def __str__(self) -> str:
        return (
            f"total attempts={self.total_attempts}  games={self.games_played}  "
            f"wins={self.wins}  best={self.reported_best_attempts()}  avg={self.average_attempts():.2f}"
        )


Leaderboard = Dict[str, ScoreRecord]


def _split_row(line: str) -> List[str]:
    parts = line.split(",")
    # Trailing commas do not produce fields.
    while parts and parts[-1] == "":
        parts.pop()
    return [part.strip() for part in parts]


def load_leaderboard(file_path: str) -> Leaderboard:
    """Read the leaderboard at ``file_path``.

    A missing file is an empty leaderboard. Rows with fewer than five fields
    are skipped, but a five-field row whose numbers do not parse raises
    :class:`GameError`, as does any read failure.
    """
    leaderboard: Leaderboard = {}
    if not os.path.exists(file_path):
        return leaderboard
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            for raw in f:
                line = raw.strip()
                if not line or line.startswith("#"):
                    continue
                parts = _split_row(line)
                if len(parts) < FIELD_COUNT:
                    logger.debug("Skipping malformed leaderboard row: %r", line)
                    continue
                name = parts[0]
                total_attempts, games_played, wins, best_attempts = (int(value) for value in parts[1:FIELD_COUNT])
                leaderboard[name] = ScoreRecord.from_row(total_attempts, games_played, wins, best_attempts)
    except (OSError, ValueError) as exc:
        raise GameError(f"Error loading leaderboard from {os.path.basename(file_path)} ({exc})") from exc
    logger.info("Loaded %d leaderboard entries from %s", len(leaderboard), file_path)
    return leaderboard


def save_leaderboard(leaderboard: Leaderboard, file_path: str) -> None:
    """Overwrite ``file_path`` with ``leaderboard``, keeping the old file as ``.bak``."""
    lines = [HEADER]
    lines.extend(record.to_row(name) for name, record in leaderboard.items())
    payload = "\n".join(lines) + "\n"

    dir_name = os.path.dirname(file_path) or "."
    backup_path = file_path + ".bak"
    try:
        os.makedirs(dir_name, exist_ok=True)
        if os.path.exists(file_path):
            with open(file_path, "r", encoding="utf-8") as f:
                current = f.read()
            with open(backup_path, "w", encoding="utf-8") as f:
                f.write(current)
    except (OSError, ValueError) as exc:
        logger.warning("Could not back up leaderboard (%s)", exc)

    temp_path = None
    try:
        fd, temp_path = tempfile.mkstemp(dir=dir_name, prefix=".scores.", text=True)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(payload)
        os.replace(temp_path, file_path)
    except OSError as exc:
        raise GameError(f"Error saving leaderboard to {os.path.basename(file_path)} ({exc})") from exc
    finally:
        if temp_path and os.path.exists(temp_path):
            try:
                os.remove(temp_path)
            except OSError:
                pass
    logger.info("Saved %d leaderboard entries to %s", len(leaderboard), file_path)


def read_player_name(file_path: str) -> Optional[str]:
    """Return the first non-blank line of ``file_path``, or None if there is none."""
    if not os.path.exists(file_path):
        return None
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            for raw in f:
                line = raw.strip()
                if line:
                    return line
    except (OSError, ValueError) as exc:
        raise GameError(f"Error reading {os.path.basename(file_path)} ({exc})") from exc
    return None


def write_game_result(content: str, file_path: str) -> None:
    try:
        os.makedirs(os.path.dirname(file_path) or ".", exist_ok=True)
        with open(file_path, "w", encoding="utf-8") as f:
            f.write(content)
    except OSError as exc:
        raise GameError(f"Error writing {os.path.basename(file_path)} ({exc})") from exc


def print_leaderboard(
    leaderboard: Leaderboard, title: str = "Leaderboard:", output_fn: Callable[[str], None] = print
) -> None:
    if not leaderboard:
        output_fn("No leaderboard data yet.")
        return
    output_fn(title)
    for name, record in sorted(leaderboard.items()):
        output_fn(f"  {name} -> {record}")
