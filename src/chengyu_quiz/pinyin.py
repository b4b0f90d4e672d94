"""Pinyin decomposition of idiom strings backed by ``pypinyin``."""

from __future__ import annotations

from dataclasses import dataclass
import functools

from pypinyin import Style, lazy_pinyin

from chengyu_quiz.models import PhoneticChar, PinyinParts


@dataclass(frozen=True)
class PinyinColumns:
    """Per-character pinyin attributes as three parallel, index-aligned tuples."""

    initials: tuple[str, ...]
    finals: tuple[str, ...]
    tones: tuple[str, ...]


def _blank_for_each(chars: str) -> list[str]:
    """``pypinyin`` error handler keeping one empty reading per unknown character."""

    return ["" for _ in chars]


def _tone_digit(syllable: str) -> str:
    """Return the trailing tone digit of a ``TONE3`` syllable, or ``""`` if neutral."""

    return syllable[-1] if syllable and syllable[-1].isdigit() else ""


def _column(text: str, style: Style, strict: bool = False) -> list[str]:
    """Convert ``text`` to one ``pypinyin`` column, one entry per character.

    Args:
        text: Hanzi string.
        style: Output style of the column.
        strict: Use standard initial/final tables (``yu`` has final ``v``, no initial).

    Returns:
        Readings in character order; ``""`` for characters without one.
    """

    return lazy_pinyin(text, style=style, strict=strict, errors=_blank_for_each)


# The phrase dictionary stores sandhi tones for these (一心一意 -> yi4 xin1 yi2 yi4).
CITATION_TONES = {"一": ("yi", "1"), "不": ("bu", "4")}


def _citation_tone(char: str, syllable: str, tone: str) -> str:
    """Undo tone sandhi for ``一``/``不`` when read with their usual syllable."""

    citation = CITATION_TONES.get(char)
    if citation is None or syllable.rstrip("012345") != citation[0]:
        return tone
    return citation[1]


def decompose(text: str) -> PinyinColumns:
    """Look up initial, final and tone for every character of ``text``.

    The whole string is converted in one call so phrase-level readings of
    polyphonic characters apply (``行`` in ``天马行空`` reads ``xing2``).
    ``y`` and ``w`` count as initials, finals are the standard ones (``v`` for
    ``ü`` in ``yu``, ``ju`` and ``lü`` alike) without tone marks, and characters
    without a reading contribute ``""`` to every column. Tones are citation
    tones: no sandhi is applied, even where the phrase dictionary stores it.

    Args:
        text: Hanzi string, usually one idiom.

    Returns:
        Columns with exactly ``len(text)`` entries each.
    """

    size = len(text)
    initials = _column(text, Style.INITIALS)
    finals = _column(text, Style.FINALS, strict=True)
    syllables = _column(text, Style.TONE3)
    tones = [
        _citation_tone(char, syllable, _tone_digit(syllable)) for char, syllable in zip(text, syllables)
    ]

    def fit(values: list[str]) -> tuple[str, ...]:
        return tuple(values[idx] if idx < len(values) else "" for idx in range(size))

    return PinyinColumns(initials=fit(initials), finals=fit(finals), tones=fit(tones))


@functools.lru_cache(maxsize=512)
def parse_idiom(idiom: str) -> tuple[PhoneticChar, ...]:
    """Decompose an idiom into :class:`PhoneticChar` records, one per character.

    Results are memoized, so repeated comparisons against the same answer do
    not hit the pinyin dictionaries again.
    """

    columns = decompose(idiom)
    return tuple(
        PhoneticChar(
            char=char,
            pinyin=PinyinParts(
                initial=columns.initials[idx],
                final=columns.finals[idx],
                tone=columns.tones[idx],
            ),
        )
        for idx, char in enumerate(idiom)
    )
