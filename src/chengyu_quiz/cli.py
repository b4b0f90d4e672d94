"""CLI entrypoint for playing and inspecting idiom quizzes in a terminal."""

from __future__ import annotations

import argparse
import dataclasses
import logging
import unicodedata
from pathlib import Path
from typing import Callable, Sequence

from chengyu_quiz.compare import compare_idioms
from chengyu_quiz.config import IDIOM_LENGTH, LOG_FORMAT, QuizConfig
from chengyu_quiz.game_round import GameRound, GuessError, GuessFeedback
from chengyu_quiz.identity import derive_session_id
from chengyu_quiz.io.idiom_list import parse_idiom_list, read_idiom_list, write_results_tsv
from chengyu_quiz.models import MatchTier
from chengyu_quiz.pinyin import parse_idiom
from chengyu_quiz.reporting.summary_md import build_summary_md
from chengyu_quiz.session import QuizSession
from chengyu_quiz.storage.backends import JsonFileStorage
from chengyu_quiz.validation import validate_guess, validate_idiom_list

logger = logging.getLogger(__name__)

TIER_SYMBOLS = {MatchTier.NONE: ".", MatchTier.ELSEWHERE: "~", MatchTier.SAME: "="}
GIVE_UP = "?"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

InputFn = Callable[[str], str]


def _display_width(text: str) -> int:
    """Terminal columns taken by ``text``; Hanzi and other wide characters count twice."""

    return sum(2 if unicodedata.east_asian_width(char) in ("W", "F") else 1 for char in text)


def _pad(text: str, width: int) -> str:
    return text + " " * (width - _display_width(text))


def _format_table(headers: Sequence[str], data_rows: Sequence[Sequence[str]]) -> str:
    """Format feedback rows as a monospace table, padding by display width.

    Args:
        headers: Column labels.
        data_rows: Cell values, one sequence per row.

    Returns:
        Table text whose columns line up in a terminal even with Hanzi cells.
    """

    widths = [
        max(_display_width(cell) for cell in column) for column in zip(headers, *data_rows)
    ]
    lines = [
        " | ".join(_pad(header, widths[idx]) for idx, header in enumerate(headers)),
        "-+-".join("-" * width for width in widths),
    ]
    lines.extend(" | ".join(_pad(value, widths[idx]) for idx, value in enumerate(row)) for row in data_rows)
    return "\n".join(lines)


def format_feedback(feedback: GuessFeedback) -> str:
    """Render one guess as a table: ``=`` in place, ``~`` elsewhere, ``.`` absent."""

    rows = []
    for idx, (char, match) in enumerate(zip(feedback.chars, feedback.matches), start=1):
        parts = char.pinyin
        rows.append(
            [
                str(idx),
                char.char,
                f"{parts.initial}{parts.final}{parts.tone}",
                TIER_SYMBOLS[match.char],
                TIER_SYMBOLS[match.pinyin.initial],
                TIER_SYMBOLS[match.pinyin.final],
                TIER_SYMBOLS[match.pinyin.tone],
            ]
        )
    return _format_table(["pos", "char", "pinyin", "hanzi", "initial", "final", "tone"], rows)


def _add_idiom_source(parser: argparse.ArgumentParser) -> None:
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--idioms", help="Comma-separated answer idioms, in quiz order.")
    source.add_argument("--idioms-file", type=Path, help="File with one idiom per line.")
    parser.add_argument("--id", dest="session_id", default=None, help="Explicit quiz id.")


def build_arg_parser() -> argparse.ArgumentParser:
    """Construct CLI argument parser.

    Returns:
        Parser with ``compare``, ``play``, ``status`` and ``reset`` commands.
    """

    parser = argparse.ArgumentParser(description="Wordle-style Chinese idiom quiz.")
    parser.add_argument("--storage", type=Path, default=None, help="Saved progress JSON file.")
    parser.add_argument("--max-guesses", type=int, default=None, help="Guesses allowed per idiom.")
    parser.add_argument("--log-level", choices=LOG_LEVELS, default=None, help="Logging verbosity.")
    commands = parser.add_subparsers(dest="command", required=True)

    compare = commands.add_parser("compare", help="Show feedback for one guess against an answer.")
    compare.add_argument("guess")
    compare.add_argument("answer")

    play = commands.add_parser("play", help="Play (or resume) a quiz interactively.")
    _add_idiom_source(play)

    status = commands.add_parser("status", help="Print saved progress of a quiz.")
    _add_idiom_source(status)
    status.add_argument("--tsv", type=Path, default=None, help="Also write results to this TSV file.")

    reset = commands.add_parser("reset", help="Delete saved progress of a quiz.")
    _add_idiom_source(reset)
    return parser


def _resolve_config(args: argparse.Namespace) -> QuizConfig:
    config = QuizConfig.from_env()
    overrides = {}
    if args.storage is not None:
        overrides["storage_path"] = args.storage
    if args.max_guesses is not None:
        if args.max_guesses < 1:
            raise SystemExit("--max-guesses must be positive")
        overrides["max_guesses"] = args.max_guesses
    if args.log_level is not None:
        overrides["log_level"] = args.log_level
    return dataclasses.replace(config, **overrides)


def _load_idioms(args: argparse.Namespace) -> list[str]:
    try:
        idioms = read_idiom_list(args.idioms_file) if args.idioms_file else parse_idiom_list(args.idioms)
        validate_idiom_list(idioms, IDIOM_LENGTH)
    except (FileNotFoundError, ValueError) as exc:
        raise SystemExit(str(exc)) from exc
    return idioms


def _run_compare(args: argparse.Namespace) -> int:
    try:
        validate_idiom_list([args.answer], IDIOM_LENGTH)
        validate_guess(args.guess, len(args.answer))
    except ValueError as exc:
        raise SystemExit(str(exc)) from exc
    chars = parse_idiom(args.guess)
    feedback = GuessFeedback(guess=args.guess, chars=chars, matches=compare_idioms(chars, parse_idiom(args.answer)))
    print(format_feedback(feedback))
    return 0


def _play_round(session: QuizSession, max_guesses: int, input_fn: InputFn) -> bool:
    """Play the current idiom until it is won, exhausted or given up.

    Returns:
        ``False`` when the player quit mid-round; guesses so far stay saved.
    """

    answer = session.current_idiom
    if answer is None:
        return True
    saved = session.results[session.current_index]
    game = GameRound(answer, max_guesses=max_guesses, guesses=saved.guesses, elapsed_before=saved.time)

    print(f"\n{session.progress}")
    for feedback in game.history():
        print(format_feedback(feedback))

    while not game.finished:
        try:
            raw = input_fn(f"[{game.remaining} left] guess ('{GIVE_UP}' gives up, empty quits): ").strip()
        except EOFError:
            raw = ""
        if not raw:
            session.save_current_progress(game.guesses, round(game.elapsed(), 1))
            return False
        if raw == GIVE_UP:
            break
        try:
            feedback = game.submit(raw)
        except GuessError as exc:
            print(exc)
            continue
        session.save_current_progress(game.guesses, round(game.elapsed(), 1))
        print(format_feedback(feedback))

    session.update_current_result(game.guesses, game.won, round(game.elapsed(), 1))
    print("Solved!" if game.won else f"The answer was {answer}.")
    return True


def _run_play(args: argparse.Namespace, config: QuizConfig, input_fn: InputFn) -> int:
    idioms = _load_idioms(args)
    session = QuizSession(JsonFileStorage(config.storage_path))
    session.init(idioms, args.session_id)

    while not session.finished:
        if not session.results[session.current_index].completed:
            if not _play_round(session, config.max_guesses, input_fn):
                print(f"Progress saved ({session.progress}).")
                return 0
        if not session.next_idiom():
            break

    print()
    print(build_summary_md(session.results))
    return 0


def _run_status(args: argparse.Namespace, config: QuizConfig) -> int:
    idioms = _load_idioms(args)
    session = QuizSession(JsonFileStorage(config.storage_path))
    if not session.restore(idioms, args.session_id or derive_session_id(idioms)):
        print("No saved progress for this quiz.")
        return 0
    print(build_summary_md(session.results, progress=session.progress))
    if args.tsv is not None:
        write_results_tsv(session.results, args.tsv)
        logger.info("Wrote %d results to %s", len(session.results), args.tsv)
    return 0


def _run_reset(args: argparse.Namespace, config: QuizConfig) -> int:
    idioms = _load_idioms(args)
    session = QuizSession(JsonFileStorage(config.storage_path))
    if not session.restore(idioms, args.session_id or derive_session_id(idioms)):
        print("No saved progress for this quiz.")
        return 0
    session_id = session.session_id
    session.exit()
    print(f"Cleared saved progress for quiz {session_id}.")
    return 0


def main(argv: Sequence[str] | None = None, input_fn: InputFn = input) -> int:
    """Run CLI workflow for the selected command.

    Returns:
        Zero exit status on success.
    """

    parser = build_arg_parser()
    args = parser.parse_args(argv)
    config = _resolve_config(args)
    logging.basicConfig(format=LOG_FORMAT, level=config.log_level)
    logger.debug("Using storage %s", config.storage_path)

    if args.command == "compare":
        return _run_compare(args)
    if args.command == "play":
        return _run_play(args, config, input_fn)
    if args.command == "status":
        return _run_status(args, config)
    return _run_reset(args, config)


if __name__ == "__main__":
    raise SystemExit(main())
