"""Text file helpers: idiom lists in, result tables out."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

from chengyu_quiz.models import QuizResult

RESULTS_TSV_HEADER = ["index", "idiom", "completed", "won", "time", "guesses"]


def parse_idiom_list(text: str) -> list[str]:
    """Split idiom list text into idioms.

    Idioms may be given one per line or comma separated (ASCII or full-width
    commas). Blank entries and lines starting with ``#`` are skipped.

    Args:
        text: Raw list text.

    Returns:
        Idioms in file order.
    """

    idioms: list[str] = []
    for line in text.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        for item in stripped.replace("，", ",").split(","):
            item = item.strip()
            if item:
                idioms.append(item)
    return idioms


def read_idiom_list(path: Path) -> list[str]:
    """Read an idiom list file.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
    """

    if not path.exists():
        raise FileNotFoundError(f"Idiom list not found: {path}")
    return parse_idiom_list(path.read_text(encoding="utf-8"))


def write_results_tsv(results: Sequence[QuizResult], output_path: Path, include_header: bool = True) -> None:
    """Write session results to a TSV file, one row per idiom.

    Args:
        results: Session results in quiz order.
        output_path: Destination TSV file path.
        include_header: Whether to include a header row.
    """

    with output_path.open("w", encoding="utf-8") as handle:
        if include_header:
            handle.write("\t".join(RESULTS_TSV_HEADER))
            handle.write("\n")
        for idx, result in enumerate(results, start=1):
            handle.write(
                "\t".join(
                    [
                        str(idx),
                        result.idiom,
                        "1" if result.completed else "0",
                        "1" if result.won else "0",
                        f"{result.time:g}",
                        " ".join(result.guesses),
                    ]
                )
            )
            handle.write("\n")
