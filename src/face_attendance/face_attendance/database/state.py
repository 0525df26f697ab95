from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterator

from ..attendance.model import AttendanceEvent
from ..core.exceptions import PersistenceError
from ..students.model import Student

if TYPE_CHECKING:
    from .backend import StateBackend

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AttendanceState:
    """Immutable snapshot of both tables, in insertion order."""

    students: tuple[Student, ...] = ()
    events: tuple[AttendanceEvent, ...] = ()


class Database:
    """Owns the in-memory tables and writes every change through to a backend.

    All reads and writes go through one re-entrant lock, so readers never see
    a half-applied change and check-then-act sequences are atomic.
    """

    def __init__(self, backend: "StateBackend"):
        self._backend = backend
        self._lock = threading.RLock()
        self._depth = 0
        self.students: dict[str, Student] = {}
        self.events: list[AttendanceEvent] = []

        state = backend.load()
        self._apply(state)
        logger.info("Loaded %d students and %d attendance events", len(state.students), len(state.events))

    def snapshot(self) -> AttendanceState:
        with self._lock:
            return AttendanceState(students=tuple(self.students.values()), events=tuple(self.events))

    def _apply(self, state: AttendanceState) -> None:
        self.students = {s.student_id: s for s in state.students}
        self.events = list(state.events)

    @contextmanager
    def read(self) -> Iterator["Database"]:
        with self._lock:
            yield self

    @contextmanager
    def transaction(self) -> Iterator["Database"]:
        """Serialize a mutation and persist it before returning.

        Nested transactions join the outermost one. If the body raises or the
        backend save fails, the tables are restored to the prior snapshot.
        """

        with self._lock:
            if self._depth:
                self._depth += 1
                try:
                    yield self
                finally:
                    self._depth -= 1
                return

            before = self.snapshot()
            self._depth = 1
            try:
                yield self
            except Exception:
                self._apply(before)
                raise
            finally:
                self._depth = 0

            after = self.snapshot()
            if after == before:
                return
            try:
                self._backend.save(after)
            except Exception as e:
                self._apply(before)
                logger.error("Failed to persist attendance state, change rolled back: %s", e)
                raise PersistenceError("Could not save attendance data") from e
            logger.debug("Persisted state (%d students, %d events)", len(after.students), len(after.events))
