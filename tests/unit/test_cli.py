"""Unit tests for the command-line entrypoint."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from chengyu_quiz import cli
from chengyu_quiz.cli import main
from chengyu_quiz.game_round import GameRound
from chengyu_quiz.identity import derive_session_id, storage_key


def _scripted(*answers: str):
    pending = list(answers)

    def read(prompt: str) -> str:
        if not pending:
            raise EOFError
        return pending.pop(0)

    return read


def _saved(storage: Path, idioms: list[str]) -> dict:
    documents = json.loads(storage.read_text(encoding="utf-8"))
    return json.loads(documents[storage_key(derive_session_id(idioms))])


def test_compare_prints_feedback_table(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["compare", "一心二意", "一心一意"]) == 0

    output = capsys.readouterr().out
    lines = output.splitlines()
    assert lines[0].split(" | ")[0].strip() == "pos"
    assert "xin1" in output
    assert lines[2].startswith("1   | 一")


def test_compare_rejects_length_mismatch() -> None:
    with pytest.raises(SystemExit, match="expected 4"):
        main(["compare", "一心", "一心一意"])


def test_play_runs_through_quiz_and_prints_review(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    storage = tmp_path / "storage.json"
    idioms = ["一心一意", "天马行空"]

    code = main(
        ["--storage", str(storage), "play", "--idioms", ",".join(idioms)],
        input_fn=_scripted("一心二意", "一心一意", "?"),
    )

    output = capsys.readouterr().out
    assert code == 0
    assert "Solved!" in output
    assert "The answer was 天马行空." in output
    assert "| won | 1 |" in output
    saved = _saved(storage, idioms)
    assert saved["currentIndex"] == 1
    assert [result["completed"] for result in saved["results"]] == [True, True]
    assert saved["results"][0]["guesses"] == ["一心二意", "一心一意"]


def test_play_quits_and_resumes_mid_round(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    storage = tmp_path / "storage.json"
    idioms = ["画蛇添足"]
    args = ["--storage", str(storage), "play", "--idioms", idioms[0]]

    main(args, input_fn=_scripted("画龙点睛", ""))
    assert "Progress saved (第 1/1 题)." in capsys.readouterr().out
    assert _saved(storage, idioms)["results"][0]["guesses"] == ["画龙点睛"]
    assert _saved(storage, idioms)["results"][0]["completed"] is False

    main(args, input_fn=_scripted("画蛇添足"))
    saved = _saved(storage, idioms)
    assert saved["results"][0]["guesses"] == ["画龙点睛", "画蛇添足"]
    assert saved["results"][0]["won"] is True


def test_play_reports_invalid_guesses_and_keeps_asking(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    storage = tmp_path / "storage.json"

    main(
        ["--storage", str(storage), "--max-guesses", "1", "play", "--idioms", "守株待兔"],
        input_fn=_scripted("守株", "亡羊补牢"),
    )

    output = capsys.readouterr().out
    assert "Guess validation failed" in output
    assert "The answer was 守株待兔." in output


def test_play_rejects_malformed_idiom_list(tmp_path: Path) -> None:
    with pytest.raises(SystemExit, match="Idiom list validation failed"):
        main(["--storage", str(tmp_path / "s.json"), "play", "--idioms", "一心一意,abc"])


def test_status_and_reset(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    storage = tmp_path / "storage.json"
    quiz_file = tmp_path / "quiz.txt"
    quiz_file.write_text("一心一意\n天马行空\n", encoding="utf-8")
    base = ["--storage", str(storage)]

    main([*base, "status", "--idioms-file", str(quiz_file)])
    assert "No saved progress" in capsys.readouterr().out

    main([*base, "play", "--idioms-file", str(quiz_file)], input_fn=_scripted("一心一意", ""))
    capsys.readouterr()

    main([*base, "status", "--idioms-file", str(quiz_file)])
    status = capsys.readouterr().out
    assert "第 2/2 题" in status
    assert "| completed | 1 |" in status

    main([*base, "reset", "--idioms-file", str(quiz_file)])
    assert "Cleared saved progress" in capsys.readouterr().out
    assert json.loads(storage.read_text(encoding="utf-8")) == {}


def test_compare_rejects_malformed_answer() -> None:
    with pytest.raises(SystemExit, match="Idiom list validation failed"):
        main(["compare", "一心一意", "abcd"])


def test_status_writes_results_tsv(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    storage = tmp_path / "storage.json"
    output = tmp_path / "results.tsv"
    base = ["--storage", str(storage)]

    main([*base, "play", "--idioms", "守株待兔"], input_fn=_scripted("守株待兔"))
    main([*base, "status", "--idioms", "守株待兔", "--tsv", str(output)])
    capsys.readouterr()

    lines = output.read_text(encoding="utf-8").splitlines()
    assert lines[0] == "index\tidiom\tcompleted\twon\ttime\tguesses"
    assert lines[1].split("\t")[:4] == ["1", "守株待兔", "1", "1"]
    assert lines[1].split("\t")[5] == "守株待兔"


def test_play_autosave_records_time_spent(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    storage = tmp_path / "storage.json"
    idioms = ["画蛇添足"]

    main(["--storage", str(storage), "play", "--idioms", idioms[0]], input_fn=_scripted("画龙点睛", ""))
    capsys.readouterr()

    saved = _saved(storage, idioms)["results"][0]
    assert saved["completed"] is False
    assert isinstance(saved["time"], float)
    assert saved["time"] >= 0


def test_quitting_saves_time_spent_since_last_guess(
    tmp_path: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    storage = tmp_path / "storage.json"
    idioms = ["画蛇添足"]
    now = [100.0]

    def round_with_clock(*args, **kwargs) -> GameRound:
        return GameRound(*args, clock=lambda: now[0], **kwargs)

    def read(prompt: str) -> str:
        now[0] += 20
        return ""

    monkeypatch.setattr(cli, "GameRound", round_with_clock)
    main(["--storage", str(storage), "play", "--idioms", idioms[0]], input_fn=read)
    capsys.readouterr()

    saved = _saved(storage, idioms)["results"][0]
    assert saved["guesses"] == []
    assert saved["time"] == 20.0


def test_table_pads_hanzi_by_display_width() -> None:
    table = cli._format_table(["char", "x"], [["一", "="], ["心意", "."]])

    assert table.splitlines() == [
        "char | x",
        "-----+--",
        "一   | =",
        "心意 | .",
    ]
