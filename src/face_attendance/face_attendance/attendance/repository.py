from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AttendanceEvent


class AttendanceRepository(Protocol):
    """Append-only ledger of presence events."""

    def list_all(self) -> Sequence[AttendanceEvent]:
        """Snapshot in insertion order."""

        raise NotImplementedError

    def get_for_student_and_day(self, student_id: str, day: date) -> Optional[AttendanceEvent]:
        raise NotImplementedError

    def list_for_day(self, day: date) -> Sequence[AttendanceEvent]:
        raise NotImplementedError

    def add(self, event: AttendanceEvent) -> None:
        raise NotImplementedError
