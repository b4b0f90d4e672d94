"""Wordle-style Chinese idiom quiz: comparison engine and session state."""

from .compare import compare_idioms
from .models import CharMatch, MatchTier, PhoneticChar, PinyinMatch, PinyinParts, QuizResult
from .pinyin import parse_idiom
from .session import QuizSession

__all__ = [
    "CharMatch",
    "MatchTier",
    "PhoneticChar",
    "PinyinMatch",
    "PinyinParts",
    "QuizResult",
    "QuizSession",
    "compare_idioms",
    "parse_idiom",
]
