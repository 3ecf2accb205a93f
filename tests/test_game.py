import random
import unittest

from guessing import game as outcomes
from guessing.game import GuessingRound


def scripted(lines):
    """Input function that replays ``lines`` and then signals end of input."""
    feed = iter(lines)

    def _input(prompt: str = "") -> str:
        try:
            return next(feed)
        except StopIteration:
            raise EOFError

    return _input


class TestGuessingRound(unittest.TestCase):
    def setUp(self) -> None:
        self.output = []

    def _round(self, lines, max_attempts=10, lower=1, upper=100) -> GuessingRound:
        return GuessingRound(lower, upper, max_attempts, input_fn=scripted(lines), output_fn=self.output.append)

    def test_forced_secret_won_in_three(self) -> None:
        result = self._round(["50", "25", "42"]).play("Ada", secret=42)
        self.assertEqual(3, result.attempts)
        self.assertTrue(result.won)
        self.assertEqual(outcomes.WON, result.outcome)
        self.assertIn("Too high. Try again.", self.output)
        self.assertIn("Too low. Try again.", self.output)
        self.assertIn("Correct! You guessed the number in 3 attempts.", self.output)

    def test_invalid_and_out_of_range_do_not_consume_attempts(self) -> None:
        game = self._round(["abc", "0", "101", "  ", "7"], max_attempts=3)
        result = game.play("Ada", secret=7)
        self.assertEqual(1, result.attempts)
        self.assertTrue(result.won)
        self.assertEqual(2, sum("Guess out of range" in line for line in self.output))
        self.assertEqual(2, sum(line.startswith("Invalid input") for line in self.output))

    def test_cap_exhaustion_gives_up(self) -> None:
        result = self._round(["x", "500", "-3", "10", "20", "30", "42"], max_attempts=3).play("Ada", secret=42)
        self.assertEqual(3, result.attempts)
        self.assertFalse(result.won)
        self.assertEqual(outcomes.GAVE_UP, result.outcome)
        self.assertIn("Maximum attempts reached. Giving up.", self.output)

    def test_quit_immediately(self) -> None:
        for token in ("quit", "Q", "QuIt"):
            self.output.clear()
            result = self._round([token]).play("Ada", secret=12)
            self.assertEqual(0, result.attempts)
            self.assertFalse(result.won)
            self.assertEqual(outcomes.QUIT_ROUND, result.outcome)
            self.assertIn("You chose to quit. The secret number was: 12", self.output)

    def test_quit_keeps_attempts_so_far(self) -> None:
        result = self._round(["1", "2", "q"]).play("Ada", secret=50)
        self.assertEqual(2, result.attempts)
        self.assertFalse(result.won)

    def test_end_of_input_counts_as_quit(self) -> None:
        result = self._round(["60"]).play("Ada", secret=50)
        self.assertEqual(1, result.attempts)
        self.assertEqual(outcomes.QUIT_ROUND, result.outcome)

    def test_zero_or_negative_cap_is_unlimited(self) -> None:
        guesses = [str(n) for n in range(1, 31)]
        for cap in (0, -5):
            game = self._round(guesses, max_attempts=cap)
            self.assertEqual(0, game.max_attempts)
            result = game.play("Ada", secret=30)
            self.assertEqual(30, result.attempts)
            self.assertTrue(result.won)

    def test_invalid_range_rejected(self) -> None:
        for lower, upper in ((5, 5), (10, 1)):
            with self.assertRaises(ValueError):
                GuessingRound(lower, upper)

    def test_secret_outside_range_rejected(self) -> None:
        with self.assertRaises(ValueError):
            GuessingRound(1, 10).start(secret=11)

    def test_random_secret_stays_in_range(self) -> None:
        game = GuessingRound(3, 7, rng=random.Random(1234))
        seen = {game.start() for _ in range(200)}
        self.assertTrue(seen <= set(range(3, 8)))
        self.assertEqual(set(range(3, 8)), seen)

    def test_seeded_rng_is_reproducible(self) -> None:
        first = GuessingRound(1, 100, rng=random.Random(99)).start()
        second = GuessingRound(1, 100, rng=random.Random(99)).start()
        self.assertEqual(first, second)


class TestSubmit(unittest.TestCase):
    def test_outcomes(self) -> None:
        game = GuessingRound(1, 100, 10)
        game.start(secret=42)
        self.assertEqual(outcomes.INVALID, game.submit("forty"))
        self.assertEqual(outcomes.OUT_OF_RANGE, game.submit("1000"))
        self.assertEqual(outcomes.TOO_LOW, game.submit(" 10 "))
        self.assertEqual(outcomes.TOO_HIGH, game.submit("90"))
        self.assertEqual(2, game.attempts)
        self.assertEqual(outcomes.CORRECT, game.submit("42"))
        self.assertTrue(game.won)
        self.assertTrue(game.finished)

    def test_submit_after_finish_rejected(self) -> None:
        game = GuessingRound(1, 10)
        game.start(secret=3)
        game.submit("q")
        with self.assertRaises(RuntimeError):
            game.submit("3")

    def test_cap_reached(self) -> None:
        game = GuessingRound(1, 100, 2)
        game.start(secret=42)
        game.submit("1")
        self.assertFalse(game.cap_reached())
        game.submit("2")
        self.assertTrue(game.cap_reached())


if __name__ == "__main__":
    unittest.main()
