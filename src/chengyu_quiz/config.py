"""Game constants and runtime configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

IDIOM_LENGTH = 4
DEFAULT_MAX_GUESSES = 10
STORAGE_KEY_PREFIX = "customQuiz_"
SESSION_ID_LENGTH = 16
DEFAULT_STORAGE_PATH = Path.home() / ".chengyu_quiz" / "storage.json"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

ENV_STORAGE = "CHENGYU_QUIZ_STORAGE"
ENV_MAX_GUESSES = "CHENGYU_QUIZ_MAX_GUESSES"
ENV_LOG_LEVEL = "CHENGYU_QUIZ_LOG_LEVEL"


@dataclass(frozen=True)
class QuizConfig:
    """Settings for the command-line game.

    Attributes:
        storage_path: JSON file holding saved sessions.
        max_guesses: Attempts allowed per idiom before the round is exhausted.
        log_level: Name of the logging level passed to ``logging.basicConfig``.
    """

    storage_path: Path = DEFAULT_STORAGE_PATH
    max_guesses: int = DEFAULT_MAX_GUESSES
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> QuizConfig:
        """Read overrides from ``CHENGYU_QUIZ_*`` environment variables.

        Args:
            environ: Mapping to read instead of ``os.environ``.

        Returns:
            Configuration with defaults for every unset variable.

        Raises:
            ValueError: If the max-guesses override is not a positive integer.
        """

        env = os.environ if environ is None else environ
        storage = env.get(ENV_STORAGE)
        max_guesses_raw = env.get(ENV_MAX_GUESSES)
        max_guesses = DEFAULT_MAX_GUESSES
        if max_guesses_raw:
            if not max_guesses_raw.strip().isdigit() or int(max_guesses_raw) < 1:
                raise ValueError(f"{ENV_MAX_GUESSES} must be a positive integer, got '{max_guesses_raw}'")
            max_guesses = int(max_guesses_raw)

        return cls(
            storage_path=Path(storage).expanduser() if storage else DEFAULT_STORAGE_PATH,
            max_guesses=max_guesses,
            log_level=(env.get(ENV_LOG_LEVEL) or "WARNING").upper(),
        )
