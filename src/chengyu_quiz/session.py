"""Quiz session manager: one play-through over an ordered list of idioms.

A :class:`QuizSession` owns the idiom list, the index of the idiom being
played, one :class:`~chengyu_quiz.models.QuizResult` per idiom and a review
cursor for looking at earlier idioms. Progress is written to a
:class:`~chengyu_quiz.storage.backends.KeyValueStorage` after every change and
can be resumed later under the same session id.

Nothing here raises for control flow: calls made before ``init``/``restore``
are ignored, invalid navigation reports ``False`` or is ignored, and malformed
saved data counts as "nothing saved".
"""

from __future__ import annotations

import dataclasses
import json
import logging
from typing import Sequence

from chengyu_quiz.identity import derive_session_id, storage_key
from chengyu_quiz.models import QuizResult, QuizSessionState, SavedProgress
from chengyu_quiz.storage.backends import KeyValueStorage

logger = logging.getLogger(__name__)


def parse_saved_progress(raw: str) -> SavedProgress | None:
    """Decode a stored ``{currentIndex, results}`` document.

    Args:
        raw: JSON text read from storage.

    Returns:
        Parsed progress, or ``None`` when the text is not JSON or not an object.
        A missing or mistyped ``currentIndex`` becomes ``0``; a missing or
        mistyped ``results`` becomes an empty tuple.
    """

    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        return None
    if not isinstance(data, dict):
        return None

    current_index = data.get("currentIndex")
    if not isinstance(current_index, int) or isinstance(current_index, bool):
        current_index = 0

    raw_results = data.get("results")
    if not isinstance(raw_results, list):
        raw_results = []

    return SavedProgress(
        current_index=current_index,
        results=tuple(QuizResult.from_dict(item) if isinstance(item, dict) else None for item in raw_results),
    )


def dump_progress(state: QuizSessionState) -> str:
    """Serialize the persisted part of a session state."""

    return json.dumps(
        {
            "currentIndex": state.current_index,
            "results": [result.to_dict() for result in state.results],
        },
        ensure_ascii=False,
    )


def _restored_index(saved_index: int, total: int) -> int:
    """Map a saved index onto the current list, keeping a finished quiz finished."""

    if saved_index == total:
        return total
    return max(0, min(saved_index, total - 1))


class QuizSession:
    """Progress of one quiz, persisted under ``customQuiz_<session id>``."""

    def __init__(self, storage: KeyValueStorage) -> None:
        self.storage = storage
        self._state: QuizSessionState | None = None
        self._session_id: str | None = None
        self._viewing_index: int | None = None

    @property
    def active(self) -> bool:
        return self._state is not None

    @property
    def session_id(self) -> str | None:
        return self._session_id

    @property
    def current_index(self) -> int:
        return self._state.current_index if self._state is not None else 0

    @property
    def view_index(self) -> int:
        """Index under review, or the current index when no review cursor is set."""

        return self._viewing_index if self._viewing_index is not None else self.current_index

    @property
    def total_count(self) -> int:
        return len(self._state.idioms) if self._state is not None else 0

    @property
    def current_idiom(self) -> str | None:
        """Idiom at :attr:`view_index`; ``None`` when inactive or past the last idiom."""

        if self._state is None or not 0 <= self.view_index < len(self._state.idioms):
            return None
        return self._state.idioms[self.view_index]

    @property
    def results(self) -> tuple[QuizResult, ...]:
        return tuple(self._state.results) if self._state is not None else ()

    @property
    def completed(self) -> bool:
        if self._state is None:
            return False
        return self._state.current_index >= len(self._state.idioms)

    @property
    def finished(self) -> bool:
        """Whether the quiz is over: past the end, or every idiom has a completed result.

        :meth:`next_idiom` never moves past the last idiom, so a quiz played to
        the end is recognized here by its results rather than by its index.
        """

        if self._state is None:
            return False
        return self.completed or all(result.completed for result in self._state.results)

    @property
    def progress(self) -> str:
        if self._state is None:
            return ""
        return f"第 {self._state.current_index + 1}/{len(self._state.idioms)} 题"

    def init(self, idioms: Sequence[str], session_id: str | None = None) -> None:
        """Start or resume the quiz for ``idioms``.

        Saved results are realigned to ``idioms`` by index: slots missing from
        the save (or stored as non-objects) get a fresh empty result, and every
        slot takes the idiom of the current list. Without a usable save the
        session starts at the first idiom and is saved right away.

        Args:
            idioms: Ordered answers; kept as given for the whole session.
            session_id: Explicit id; derived from ``idioms`` when omitted.
        """

        ordered = tuple(idioms)
        self._session_id = session_id or derive_session_id(ordered)
        self._viewing_index = None

        saved = self._read_saved(self._session_id)
        if saved is not None:
            results = []
            for idx, idiom in enumerate(ordered):
                stored = saved.results[idx] if idx < len(saved.results) else None
                results.append(QuizResult.empty(idiom) if stored is None else dataclasses.replace(stored, idiom=idiom))
            self._state = QuizSessionState(
                idioms=ordered,
                current_index=_restored_index(saved.current_index, len(ordered)),
                results=results,
            )
            logger.info(
                "Resumed quiz %s at %d/%d", self._session_id, self._state.current_index + 1, len(ordered)
            )
            return

        self._state = QuizSessionState(
            idioms=ordered,
            current_index=0,
            results=[QuizResult.empty(idiom) for idiom in ordered],
        )
        logger.info("Started quiz %s with %d idioms", self._session_id, len(ordered))
        self.save()

    def restore(self, idioms: Sequence[str], session_id: str) -> bool:
        """Load saved progress for ``session_id`` as stored, without realignment.

        Args:
            idioms: Ordered answers the caller trusts to match the save.
            session_id: Explicit id of the saved session.

        Returns:
            ``True`` when a save existed and was loaded; ``False`` leaves the
            session untouched.
        """

        saved = self._read_saved(session_id)
        if saved is None:
            return False

        ordered = tuple(idioms)
        self._session_id = session_id
        self._viewing_index = None
        self._state = QuizSessionState(
            idioms=ordered,
            current_index=saved.current_index,
            results=[
                stored if stored is not None else QuizResult.empty(ordered[idx] if idx < len(ordered) else "")
                for idx, stored in enumerate(saved.results)
            ],
        )
        logger.info("Restored quiz %s", session_id)
        return True

    def update_current_result(self, guesses: Sequence[str], won: bool, time: float) -> None:
        """Record the final outcome of the current idiom and mark it completed."""

        state = self._state
        if state is None or not self._has_current_slot():
            return
        idx = state.current_index
        state.results[idx] = QuizResult(
            idiom=state.idioms[idx],
            guesses=tuple(guesses),
            won=won,
            time=time,
            completed=True,
        )
        self.save()

    def save_current_progress(self, guesses: Sequence[str], time: float | None = None) -> None:
        """Autosave the guesses of the current idiom without completing it.

        ``time``, when given, also replaces the time spent so far.
        """

        state = self._state
        if state is None or not self._has_current_slot():
            return
        idx = state.current_index
        changes: dict[str, object] = {"guesses": tuple(guesses)}
        if time is not None:
            changes["time"] = time
        state.results[idx] = dataclasses.replace(state.results[idx], **changes)
        self.save()

    def next_idiom(self) -> bool:
        """Advance to the next idiom.

        Returns:
            ``False`` without changing anything when inactive or already at the
            last idiom; finish the last idiom with :meth:`update_current_result`
            and check :attr:`completed` instead.
        """

        state = self._state
        if state is None or state.current_index >= len(state.idioms) - 1:
            return False
        state.current_index += 1
        self.save()
        return True

    def jump_to_idiom(self, index: int) -> None:
        """Point the review cursor at ``index``; out-of-range indexes are ignored."""

        if self._state is None or not 0 <= index < len(self._state.idioms):
            return
        self._viewing_index = index

    def back_to_current(self) -> None:
        self._viewing_index = None

    def exit(self) -> None:
        """Forget the saved progress of this session and deactivate it."""

        if self._session_id is not None:
            self.storage.delete(storage_key(self._session_id))
            logger.info("Cleared quiz %s", self._session_id)
        self._state = None
        self._session_id = None
        self._viewing_index = None

    def save(self) -> None:
        if self._state is None or self._session_id is None:
            return
        self.storage.set(storage_key(self._session_id), dump_progress(self._state))
        logger.debug("Saved quiz %s at index %d", self._session_id, self._state.current_index)

    def _has_current_slot(self) -> bool:
        """Return whether ``current_index`` points at an idiom that has a result slot."""

        state = self._state
        if state is None:
            return False
        idx = state.current_index
        return 0 <= idx < len(state.idioms) and idx < len(state.results)

    def _read_saved(self, session_id: str) -> SavedProgress | None:
        """Read and decode the save of ``session_id``.

        Args:
            session_id: Session whose storage slot is read.

        Returns:
            Parsed progress, or ``None`` when nothing usable is stored.
        """

        raw = self.storage.get(storage_key(session_id))
        if raw is None:
            return None
        saved = parse_saved_progress(raw)
        if saved is None:
            logger.warning("Discarding malformed saved progress for quiz %s", session_id)
        return saved
