"""One round of guessing against a single answer idiom."""

from __future__ import annotations

from dataclasses import dataclass
import time
from typing import Callable, Sequence

from chengyu_quiz.compare import compare_idioms, is_solved
from chengyu_quiz.config import DEFAULT_MAX_GUESSES
from chengyu_quiz.models import CharMatch, PhoneticChar
from chengyu_quiz.pinyin import parse_idiom
from chengyu_quiz.validation import validate_guess


class GuessError(ValueError):
    """Raised when a guess cannot be accepted by a round."""


@dataclass(frozen=True)
class GuessFeedback:
    """A submitted guess with its decomposition and per-position feedback."""

    guess: str
    chars: tuple[PhoneticChar, ...]
    matches: tuple[CharMatch, ...]

    @property
    def solved(self) -> bool:
        return is_solved(self.matches)


class GameRound:
    """Track the guesses made against one answer.

    Args:
        answer: Secret idiom.
        max_guesses: Attempts allowed before the round is exhausted.
        guesses: Previously recorded guesses, for resuming an autosaved round.
        clock: Monotonic time source in seconds.
        elapsed_before: Seconds already spent on this answer before resuming.
    """

    def __init__(
        self,
        answer: str,
        max_guesses: int = DEFAULT_MAX_GUESSES,
        guesses: Sequence[str] = (),
        clock: Callable[[], float] = time.monotonic,
        elapsed_before: float = 0,
    ) -> None:
        if max_guesses < 1:
            raise ValueError(f"max_guesses must be positive, got {max_guesses}")
        self.answer = answer
        self.max_guesses = max_guesses
        self.guesses: list[str] = list(guesses)
        self._clock = clock
        self._started = clock()
        self._elapsed_before = elapsed_before

    @property
    def won(self) -> bool:
        return self.answer in self.guesses

    @property
    def exhausted(self) -> bool:
        return not self.won and len(self.guesses) >= self.max_guesses

    @property
    def finished(self) -> bool:
        return self.won or self.exhausted

    @property
    def remaining(self) -> int:
        return max(0, self.max_guesses - len(self.guesses))

    def elapsed(self) -> float:
        """Seconds spent on the round, including time carried over from a resume."""

        return self._elapsed_before + self._clock() - self._started

    def evaluate(self, guess: str) -> GuessFeedback:
        """Compare ``guess`` to the answer without recording it."""

        chars = parse_idiom(guess)
        return GuessFeedback(guess=guess, chars=chars, matches=compare_idioms(chars, parse_idiom(self.answer)))

    def submit(self, guess: str) -> GuessFeedback:
        """Record a guess and return its feedback.

        Raises:
            GuessError: If the round is over or the guess is malformed.
        """

        if self.finished:
            raise GuessError("Round is already finished")
        try:
            validate_guess(guess, len(self.answer))
        except ValueError as exc:
            raise GuessError(str(exc)) from exc

        feedback = self.evaluate(guess)
        self.guesses.append(guess)
        return feedback

    def history(self) -> list[GuessFeedback]:
        """Feedback for every recorded guess, recomputed from the raw strings."""

        return [self.evaluate(guess) for guess in self.guesses]
