from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..common.datetime_utils import CalendarPolicy
from ..database.state import Database
from .model import AttendanceEvent
from .repository import AttendanceRepository


class InMemoryAttendanceRepository(AttendanceRepository):
    """Event list kept in ``Database``; the calendar day comes from ``calendar``."""

    def __init__(self, db: Database, calendar: CalendarPolicy):
        self._db = db
        self._calendar = calendar

    def list_all(self) -> Sequence[AttendanceEvent]:
        with self._db.read() as db:
            return list(db.events)

    def get_for_student_and_day(self, student_id: str, day: date) -> Optional[AttendanceEvent]:
        with self._db.read() as db:
            for e in db.events:
                if e.student_id == student_id and self._calendar.day_of(e.timestamp) == day:
                    return e
            return None

    def list_for_day(self, day: date) -> Sequence[AttendanceEvent]:
        with self._db.read() as db:
            return [e for e in db.events if self._calendar.day_of(e.timestamp) == day]

    def add(self, event: AttendanceEvent) -> None:
        with self._db.transaction() as db:
            db.events.append(event)
