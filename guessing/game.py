"""One round of guess-the-number: pick a secret and loop over guesses until it ends."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Callable, Optional

logger = logging.getLogger(__name__)

QUIT_TOKENS = {"q", "quit"}

# Outcomes of a single submitted line.
INVALID = "invalid"
OUT_OF_RANGE = "out_of_range"
TOO_LOW = "too_low"
TOO_HIGH = "too_high"
CORRECT = "correct"
QUIT = "quit"

# How a round ended.
WON = "won"
QUIT_ROUND = "quit"
GAVE_UP = "gave_up"


@dataclass(frozen=True)
class GameResult:
    attempts: int
    won: bool
    outcome: str = GAVE_UP
    secret: Optional[int] = None


class GuessingRound:
    """Guess loop for a secret in ``[lower, upper]`` with an optional attempt cap.

    ``max_attempts`` of 0 (negative values are clamped to 0) means unlimited.
    Only in-range integer guesses count as attempts; quitting or hitting the
    cap ends the round with ``won=False``.
    """

    def __init__(
        self,
        lower: int,
        upper: int,
        max_attempts: int = 0,
        *,
        rng: Optional[random.Random] = None,
        input_fn: Callable[[str], str] = input,
        output_fn: Callable[[str], None] = print,
    ) -> None:
        if lower >= upper:
            raise ValueError("lower bound must be less than upper bound.")
        self.lower = lower
        self.upper = upper
        self.max_attempts = max(0, max_attempts)
        self._rng = rng or random.Random()
        self._input = input_fn
        self._output = output_fn
        self.secret: Optional[int] = None
        self.attempts = 0
        self.won = False
        self.finished = False

    def start(self, secret: Optional[int] = None) -> int:
        """Reset the round and choose the secret (random unless given)."""
        if secret is None:
            secret = self._rng.randint(self.lower, self.upper)
        elif not self.lower <= secret <= self.upper:
            raise ValueError(f"secret must be between {self.lower} and {self.upper}.")
        self.secret = secret
        self.attempts = 0
        self.won = False
        self.finished = False
        return secret

    def cap_reached(self) -> bool:
        return self.max_attempts > 0 and self.attempts >= self.max_attempts

    def submit(self, text: str) -> str:
        """Apply one line of player input and return what it meant."""
        if self.secret is None:
            self.start()
        if self.finished:
            raise RuntimeError("round is already over")
        line = text.strip()
        if line.lower() in QUIT_TOKENS:
            self.finished = True
            return QUIT
        try:
            guess = int(line)
        except ValueError:
            return INVALID
        if guess < self.lower or guess > self.upper:
            return OUT_OF_RANGE

        self.attempts += 1
        if guess == self.secret:
            self.won = True
            self.finished = True
            return CORRECT
        return TOO_LOW if guess < self.secret else TOO_HIGH

    def play(self, player_name: str, secret: Optional[int] = None) -> GameResult:
        secret = self.start(secret)
        self._output(f"Hello {player_name}! I have chosen a number between {self.lower} and {self.upper}.")
        self._output("Try to guess it. Type 'q' or 'quit' to give up.")

        outcome = GAVE_UP
        while True:
            if self.cap_reached():
                self._output("Maximum attempts reached. Giving up.")
                break
            try:
                line = self._input("Enter your guess: ")
            except EOFError:
                line = "quit"
            result = self.submit(line)
            if result == QUIT:
                self._output(f"You chose to quit. The secret number was: {secret}")
                outcome = QUIT_ROUND
                break
            if result == INVALID:
                self._output(f"Invalid input. Please enter an integer between {self.lower} and {self.upper}.")
            elif result == OUT_OF_RANGE:
                self._output("Guess out of range. Try again.")
            elif result == CORRECT:
                plural = "" if self.attempts == 1 else "s"
                self._output(f"Correct! You guessed the number in {self.attempts} attempt{plural}.")
                outcome = WON
                break
            elif result == TOO_LOW:
                self._output("Too low. Try again.")
            else:
                self._output("Too high. Try again.")

        self.finished = True
        logger.info("Round over for %s: %s after %d attempts", player_name, outcome, self.attempts)
        return GameResult(attempts=self.attempts, won=self.won, outcome=outcome, secret=secret)
