"""Key/value storage backends for saved quiz progress.

Values are JSON documents stored as strings, the way browser local storage
holds them; decoding and validating a document is the session manager's job.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from chengyu_quiz.config import DEFAULT_STORAGE_PATH

logger = logging.getLogger(__name__)


class KeyValueStorage(Protocol):
    """Minimal string-keyed storage used by :class:`~chengyu_quiz.session.QuizSession`."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


@dataclass
class MemoryStorage:
    """In-process storage; contents vanish with the object."""

    items: dict[str, str] = field(default_factory=dict)

    def get(self, key: str) -> str | None:
        return self.items.get(key)

    def set(self, key: str, value: str) -> None:
        self.items[key] = value

    def delete(self, key: str) -> None:
        self.items.pop(key, None)


@dataclass(frozen=True)
class JsonFileStorage:
    """Storage persisted as one JSON object file mapping keys to documents.

    Every call re-reads the file, so two storages on the same path observe each
    other's writes. A missing, unreadable or non-object file reads as empty and
    is replaced on the next write.
    """

    path: Path = DEFAULT_STORAGE_PATH

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Ignoring unreadable storage file %s: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring storage file %s: top-level value is not an object", self.path)
            return {}
        return {key: value for key, value in data.items() if isinstance(value, str)}

    def _dump(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")

    def get(self, key: str) -> str | None:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._dump(data)

    def delete(self, key: str) -> None:
        data = self._load()
        if data.pop(key, None) is not None:
            self._dump(data)
