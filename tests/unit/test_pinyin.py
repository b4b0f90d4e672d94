"""Unit tests for pinyin decomposition."""

from __future__ import annotations

from chengyu_quiz.compare import compare_idioms
from chengyu_quiz.models import MatchTier, PhoneticChar, PinyinParts
from chengyu_quiz.pinyin import _citation_tone, _tone_digit, decompose, parse_idiom


def test_parse_idiom_splits_initial_final_and_tone() -> None:
    chars = parse_idiom("天马行空")

    assert chars == (
        PhoneticChar("天", PinyinParts("t", "ian", "1")),
        PhoneticChar("马", PinyinParts("m", "a", "3")),
        PhoneticChar("行", PinyinParts("x", "ing", "2")),
        PhoneticChar("空", PinyinParts("k", "ong", "1")),
    )


def test_y_and_w_count_as_initials() -> None:
    columns = decompose("一万")

    assert columns.initials == ("y", "w")
    assert columns.finals == ("i", "uan")


def test_decompose_columns_are_aligned_to_characters() -> None:
    columns = decompose("画蛇添足")

    assert len(columns.initials) == len(columns.finals) == len(columns.tones) == 4
    assert columns.tones == ("4", "2", "1", "2")


def test_tone_digit_is_empty_for_neutral_syllables() -> None:
    assert _tone_digit("ma3") == "3"
    assert _tone_digit("de") == ""
    assert _tone_digit("") == ""


def test_parse_idiom_is_memoized() -> None:
    assert parse_idiom("一心一意") is parse_idiom("一心一意")


def test_yi_and_bu_keep_citation_tones() -> None:
    assert tuple(char.pinyin.tone for char in parse_idiom("一心一意")) == ("1", "1", "1", "4")
    assert tuple(char.pinyin.tone for char in parse_idiom("不亦乐乎"))[0] == "4"


def test_citation_tone_only_applies_to_usual_syllable() -> None:
    assert _citation_tone("一", "yi2", "2") == "1"
    assert _citation_tone("不", "bu2", "2") == "4"
    assert _citation_tone("不", "fou3", "3") == "3"
    assert _citation_tone("心", "xin1", "1") == "1"


def test_u_umlaut_finals_are_shared_across_initials() -> None:
    fish, reside, green, pearl = (char.pinyin.final for char in parse_idiom("鱼居绿珠"))

    assert fish == reside == green == "v"
    assert pearl == "u"


def test_u_umlaut_final_matches_in_place() -> None:
    matches = compare_idioms(parse_idiom("鱼目混珠"), parse_idiom("绿水青山"))

    assert matches[0].pinyin.final == MatchTier.SAME
