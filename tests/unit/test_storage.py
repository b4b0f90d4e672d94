"""Unit tests for key/value storage backends."""

from __future__ import annotations

import json
from pathlib import Path

from chengyu_quiz.storage.backends import JsonFileStorage, MemoryStorage


def test_memory_storage_get_set_delete() -> None:
    storage = MemoryStorage()

    storage.set("k", "v")
    assert storage.get("k") == "v"

    storage.delete("k")
    storage.delete("k")
    assert storage.get("k") is None


def test_json_file_storage_persists_across_instances(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "storage.json"

    JsonFileStorage(path).set("customQuiz_a", '{"currentIndex": 1}')

    assert JsonFileStorage(path).get("customQuiz_a") == '{"currentIndex": 1}'
    assert json.loads(path.read_text(encoding="utf-8")) == {"customQuiz_a": '{"currentIndex": 1}'}


def test_json_file_storage_delete_keeps_other_keys(tmp_path: Path) -> None:
    storage = JsonFileStorage(tmp_path / "storage.json")
    storage.set("a", "1")
    storage.set("b", "2")

    storage.delete("a")

    assert storage.get("a") is None
    assert storage.get("b") == "2"


def test_json_file_storage_reads_corrupt_file_as_empty(tmp_path: Path) -> None:
    path = tmp_path / "storage.json"
    path.write_text("{oops", encoding="utf-8")
    storage = JsonFileStorage(path)

    assert storage.get("a") is None

    storage.set("a", "1")
    assert storage.get("a") == "1"


def test_json_file_storage_ignores_non_object_documents(tmp_path: Path) -> None:
    path = tmp_path / "storage.json"
    path.write_text('["a", "b"]', encoding="utf-8")

    assert JsonFileStorage(path).get("a") is None
