"""Wordle-style comparison of a guess idiom against the answer idiom.

Feedback is computed in six greedy passes, from the most specific attribute to
the least specific one:

1. character identity,
2. full pinyin (initial + final + tone),
3. pinyin without tone (initial + final),
4. initial, 5. final, 6. tone.

A pass only considers guess and answer positions whose ``char`` and target
fields are still unclaimed, so a tier set by an earlier pass is never lowered
and one answer unit is credited to at most one guess position per field. Inside
a pass every same-position pair is tried before any cross-position pair, and
cross-position candidates are scanned in ascending answer order.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Sequence

from chengyu_quiz.models import CharMatch, MatchTier, PhoneticChar, PinyinMatch

CHAR = "char"
INITIAL = "initial"
FINAL = "final"
TONE = "tone"
FIELDS = (CHAR, INITIAL, FINAL, TONE)

_Claims = list[dict[str, MatchTier]]


@dataclass(frozen=True)
class _Pass:
    """One comparison pass: the key it compares and the fields a match claims."""

    name: str
    key: Callable[[PhoneticChar], str]
    targets: tuple[str, ...]

    @property
    def guards(self) -> tuple[str, ...]:
        """Fields that must be unclaimed on both sides for a pair to be tried."""

        return self.targets if CHAR in self.targets else (CHAR, *self.targets)


PASSES: tuple[_Pass, ...] = (
    _Pass("char", lambda c: c.char, (CHAR, INITIAL, FINAL, TONE)),
    _Pass("full_pinyin", lambda c: c.pinyin.initial + c.pinyin.final + c.pinyin.tone, (INITIAL, FINAL, TONE)),
    _Pass("syllable", lambda c: c.pinyin.initial + c.pinyin.final, (INITIAL, FINAL)),
    _Pass("initial", lambda c: c.pinyin.initial, (INITIAL,)),
    _Pass("final", lambda c: c.pinyin.final, (FINAL,)),
    _Pass("tone", lambda c: c.pinyin.tone, (TONE,)),
)


def _empty_claims(size: int) -> _Claims:
    return [{name: MatchTier.NONE for name in FIELDS} for _ in range(size)]


def _is_claimed(slot: dict[str, MatchTier], fields: tuple[str, ...]) -> bool:
    return any(slot[name] != MatchTier.NONE for name in fields)


def _run_pass(
    rule: _Pass,
    guess: Sequence[PhoneticChar],
    answer: Sequence[PhoneticChar],
    guess_claims: _Claims,
    answer_claims: _Claims,
) -> None:
    """Apply one pass in place: same-position pairs first, then first-fit cross pairs."""

    guards = rule.guards

    def attempt(i: int, j: int) -> bool:
        if _is_claimed(guess_claims[i], guards) or _is_claimed(answer_claims[j], guards):
            return False
        if rule.key(guess[i]) != rule.key(answer[j]):
            return False
        tier = MatchTier.SAME if i == j else MatchTier.ELSEWHERE
        for name in rule.targets:
            guess_claims[i][name] = tier
            answer_claims[j][name] = tier
        return True

    for i in range(min(len(guess), len(answer))):
        attempt(i, i)

    for i in range(len(guess)):
        for j in range(len(answer)):
            if i != j and attempt(i, j):
                break


def compare_idioms(guess: Sequence[PhoneticChar], answer: Sequence[PhoneticChar]) -> tuple[CharMatch, ...]:
    """Classify every guess position against the answer.

    Args:
        guess: Decomposed guess idiom.
        answer: Decomposed answer idiom of the same length.

    Returns:
        One :class:`CharMatch` per guess position, index-aligned to ``guess``.
    """

    guess_claims = _empty_claims(len(guess))
    answer_claims = _empty_claims(len(answer))
    for rule in PASSES:
        _run_pass(rule, guess, answer, guess_claims, answer_claims)

    return tuple(
        CharMatch(
            char=slot[CHAR],
            pinyin=PinyinMatch(initial=slot[INITIAL], final=slot[FINAL], tone=slot[TONE]),
        )
        for slot in guess_claims
    )


def is_solved(matches: Sequence[CharMatch]) -> bool:
    """Return whether every position matched the answer character in place."""

    return bool(matches) and all(match.char == MatchTier.SAME for match in matches)
