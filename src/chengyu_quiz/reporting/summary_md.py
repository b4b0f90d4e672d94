"""Markdown review of a quiz session's results."""

from __future__ import annotations

from typing import Iterable, Sequence

from chengyu_quiz.models import QuizResult

HIDDEN_IDIOM = "????"


def _cell(value: str) -> str:
    return value.replace("|", "\\|").replace("\n", " ")


def _markdown_table(headers: Sequence[str], rows: Iterable[Sequence[str]]) -> str:
    """Render a markdown table; ``|`` and newlines inside cells are neutralized.

    Saved results are read back tolerantly, so cells may hold arbitrary text.
    """

    lines = ["| " + " | ".join(headers) + " |", "|" + "|".join(" --- " for _ in headers) + "|"]
    lines.extend("| " + " | ".join(_cell(value) for value in row) + " |" for row in rows)
    return "\n".join(lines)


def _format_time(value: float) -> str:
    return f"{value:.1f}"


def build_summary_md(results: Sequence[QuizResult], progress: str = "") -> str:
    """Build the markdown review for one quiz.

    Idioms that are not completed yet are masked so the review can be shown
    while the quiz is still running.

    Args:
        results: Session results in quiz order.
        progress: Optional progress label printed under the title.

    Returns:
        Markdown with a summary table and one row per idiom.
    """

    completed = [result for result in results if result.completed]
    won = [result for result in completed if result.won]
    total_time = sum(result.time for result in completed)

    summary_rows = [
        ("total", str(len(results))),
        ("completed", str(len(completed))),
        ("won", str(len(won))),
        ("total_time", _format_time(total_time)),
    ]

    round_rows = [
        (
            str(idx),
            result.idiom if result.completed else HIDDEN_IDIOM,
            str(len(result.guesses)),
            ("yes" if result.won else "no") if result.completed else "-",
            _format_time(result.time) if result.completed else "-",
        )
        for idx, result in enumerate(results, start=1)
    ]

    sections = ["# Quiz Review", ""]
    if progress:
        sections.extend([progress, ""])
    sections.extend(
        [
            "## Summary",
            _markdown_table(["metric", "value"], summary_rows),
            "",
            "## Rounds",
            _markdown_table(["#", "idiom", "guesses", "won", "time"], round_rows),
        ]
    )
    return "\n".join(sections) + "\n"
