"""Data models shared by the comparator, the round engine and the session manager.

Comparison inputs and outputs are immutable value records built by construction.
``QuizResult`` is frozen as well: the session manager replaces a slot instead of
mutating it, so a result handed to a caller never changes underneath it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Mapping


class MatchTier(IntEnum):
    """Ordinal feedback for one character or one pinyin attribute."""

    NONE = 0
    ELSEWHERE = 1
    SAME = 2


@dataclass(frozen=True)
class PinyinParts:
    """Pinyin of one character split into initial, tone-less final and tone digit.

    Empty strings mean "not applicable" (no initial, neutral tone, or a character
    the lookup has no reading for).
    """

    initial: str
    final: str
    tone: str


@dataclass(frozen=True)
class PhoneticChar:
    """One idiom character together with its decomposed pinyin."""

    char: str
    pinyin: PinyinParts


@dataclass(frozen=True)
class PinyinMatch:
    """Match tiers of the initial, final and tone of one guess character."""

    initial: MatchTier = MatchTier.NONE
    final: MatchTier = MatchTier.NONE
    tone: MatchTier = MatchTier.NONE


@dataclass(frozen=True)
class CharMatch:
    """Feedback for one guess position."""

    char: MatchTier = MatchTier.NONE
    pinyin: PinyinMatch = field(default_factory=PinyinMatch)

    def to_dict(self) -> dict[str, Any]:
        """Return the plain ``{char, pinyin: {initial, final, tone}}`` mapping."""

        return {
            "char": int(self.char),
            "pinyin": {
                "initial": int(self.pinyin.initial),
                "final": int(self.pinyin.final),
                "tone": int(self.pinyin.tone),
            },
        }


@dataclass(frozen=True)
class QuizResult:
    """Outcome of one idiom inside a quiz session.

    ``time`` is an opaque duration supplied by the caller. ``completed`` is set
    once the idiom was won or given up; until then ``guesses`` only holds the
    autosaved attempts.
    """

    idiom: str
    guesses: tuple[str, ...] = ()
    won: bool = False
    time: float = 0
    completed: bool = False

    @classmethod
    def empty(cls, idiom: str) -> QuizResult:
        return cls(idiom=idiom)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], idiom: str = "") -> QuizResult:
        """Build a result from persisted JSON, tolerating per-field mismatches.

        Args:
            data: Decoded JSON object for one result slot.
            idiom: Fallback idiom when the stored one is missing or not a string.

        Returns:
            Result where every malformed field is replaced by its default.
        """

        stored_idiom = data.get("idiom")
        raw_guesses = data.get("guesses")
        guesses: tuple[str, ...] = ()
        if isinstance(raw_guesses, list):
            guesses = tuple(item for item in raw_guesses if isinstance(item, str))

        raw_time = data.get("time")
        time_value: float = 0
        if isinstance(raw_time, (int, float)) and not isinstance(raw_time, bool):
            time_value = raw_time

        won = data.get("won")
        completed = data.get("completed")
        return cls(
            idiom=stored_idiom if isinstance(stored_idiom, str) else idiom,
            guesses=guesses,
            won=won if isinstance(won, bool) else False,
            time=time_value,
            completed=completed if isinstance(completed, bool) else False,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "idiom": self.idiom,
            "guesses": list(self.guesses),
            "won": self.won,
            "time": self.time,
            "completed": self.completed,
        }


@dataclass
class QuizSessionState:
    """Mutable state of one play-through, owned by :class:`QuizSession`.

    Invariants: ``len(results) == len(idioms)`` after ``init``, and
    ``0 <= current_index <= len(idioms)`` where the upper bound marks a fully
    completed set.
    """

    idioms: tuple[str, ...]
    current_index: int
    results: list[QuizResult]


@dataclass(frozen=True)
class SavedProgress:
    """Persisted ``{currentIndex, results}`` document after parsing.

    ``results`` keeps one entry per stored slot; ``None`` marks a slot whose
    stored value was not a JSON object.
    """

    current_index: int
    results: tuple[QuizResult | None, ...] = ()
