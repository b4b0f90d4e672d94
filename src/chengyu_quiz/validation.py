"""Shape checks for idioms and guesses.

Only the form of the input is checked (length and Hanzi-only content); whether a
string is a real idiom is up to the caller.
"""

from __future__ import annotations

import re
from typing import Sequence

HANZI_RE = re.compile(r"^[一-鿿]+$")
MAX_REPORTED_ERRORS = 25


def _raise_if_errors(errors: list[str], subject: str) -> None:
    if not errors:
        return
    preview = "\n".join(f"- {item}" for item in errors[:MAX_REPORTED_ERRORS])
    rest = len(errors) - min(MAX_REPORTED_ERRORS, len(errors))
    more = f"\n- ... and {rest} more" if rest > 0 else ""
    raise ValueError(f"{subject} validation failed with {len(errors)} errors:\n{preview}{more}")


def idiom_problems(text: str, length: int) -> list[str]:
    """List what is wrong with ``text`` as an idiom of ``length`` characters.

    Args:
        text: Candidate idiom.
        length: Required number of characters.

    Returns:
        Human-readable problems; empty when the text is well formed.
    """

    problems: list[str] = []
    if len(text) != length:
        problems.append(f"'{text}' has {len(text)} characters, expected {length}")
    if text and not HANZI_RE.fullmatch(text):
        problems.append(f"'{text}' contains non-Chinese characters")
    if not text:
        problems.append("empty idiom")
    return problems


def validate_guess(guess: str, length: int) -> None:
    """Validate one guess against the answer length.

    Raises:
        ValueError: If the guess has the wrong length or non-Hanzi characters.
    """

    _raise_if_errors(idiom_problems(guess, length), "Guess")


def validate_idiom_list(idioms: Sequence[str], length: int) -> None:
    """Validate the answers of a quiz before a session is started.

    Args:
        idioms: Ordered answers.
        length: Required characters per idiom.

    Raises:
        ValueError: If the list is empty or any idiom is malformed.
    """

    errors: list[str] = []
    if not idioms:
        errors.append("no idioms given")
    for idx, idiom in enumerate(idioms, start=1):
        errors.extend(f"Idiom {idx}: {problem}" for problem in idiom_problems(idiom, length))
    _raise_if_errors(errors, "Idiom list")
