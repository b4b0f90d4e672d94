"""Unit tests for idiom list reading and results TSV output."""

from __future__ import annotations

from pathlib import Path

import pytest

from chengyu_quiz.io.idiom_list import RESULTS_TSV_HEADER, parse_idiom_list, read_idiom_list, write_results_tsv
from chengyu_quiz.models import QuizResult


def test_parse_idiom_list_accepts_lines_commas_and_comments() -> None:
    text = "# week 1\n一心一意, 天马行空\n\n画蛇添足，守株待兔\n  # done\n"

    assert parse_idiom_list(text) == ["一心一意", "天马行空", "画蛇添足", "守株待兔"]


def test_read_idiom_list_reads_file(tmp_path: Path) -> None:
    path = tmp_path / "quiz.txt"
    path.write_text("一心一意\n天马行空\n", encoding="utf-8")

    assert read_idiom_list(path) == ["一心一意", "天马行空"]


def test_read_idiom_list_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError, match="Idiom list not found"):
        read_idiom_list(tmp_path / "missing.txt")


def test_write_results_tsv_writes_one_row_per_idiom(tmp_path: Path) -> None:
    output = tmp_path / "results.tsv"
    results = [
        QuizResult("一心一意", ("一心二意", "一心一意"), True, 12.5, True),
        QuizResult.empty("天马行空"),
    ]

    write_results_tsv(results, output_path=output, include_header=True)
    lines = output.read_text(encoding="utf-8").splitlines()

    assert lines[0].split("\t") == RESULTS_TSV_HEADER
    assert lines[1].split("\t") == ["1", "一心一意", "1", "1", "12.5", "一心二意 一心一意"]
    assert lines[2].split("\t") == ["2", "天马行空", "0", "0", "0", ""]
