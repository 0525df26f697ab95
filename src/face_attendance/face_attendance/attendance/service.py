from __future__ import annotations

import logging
import uuid
from collections import Counter
from datetime import date, datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import CalendarPolicy, now_utc
from ..common.validators import require_non_empty
from ..core.constants import RECENT_ACTIVITY_LIMIT, RECENT_DATES_LIMIT
from ..core.enums import MarkStatus
from ..database.state import Database
from ..students.repository import StudentRepository
from .model import AttendanceEvent, DayReport, MarkResult
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


def attendance_rate(present: int, total: int) -> int:
    """Rounded percentage of present students; 0 when nobody is enrolled."""
    if total <= 0:
        return 0
    # Halves round up.
    return int(present * 100 / total + 0.5)


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        students: StudentRepository,
        db: Database,
        *,
        calendar: CalendarPolicy,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._attendance = attendance
        self._students = students
        self._db = db
        self._calendar = calendar
        self._clock = clock

    @property
    def calendar(self) -> CalendarPolicy:
        return self._calendar

    def today(self, now: Optional[datetime] = None) -> date:
        return self._calendar.day_of(now or self._clock())

    def mark(self, student_id: str, student_name: str, *, now: Optional[datetime] = None) -> MarkResult:
        """Record presence once per student per calendar day.

        A second mark on the same day returns ALREADY_MARKED and writes nothing.
        """

        student_id = require_non_empty(student_id, "Student")
        student_name = require_non_empty(student_name, "Name")
        now = now or self._clock()
        day = self._calendar.day_of(now)

        with self._db.transaction():
            existing = self._attendance.get_for_student_and_day(student_id, day)
            if existing:
                logger.debug("Student %s already marked on %s", student_id, day)
                return MarkResult(status=MarkStatus.ALREADY_MARKED, event=existing)

            event = AttendanceEvent(
                event_id=str(uuid.uuid4()),
                student_id=student_id,
                student_name=student_name,
                timestamp=now,
            )
            self._attendance.add(event)

        logger.info("Marked %s (%s) present on %s", student_name, student_id, day)
        return MarkResult(status=MarkStatus.MARKED, event=event)

    def is_present(self, student_id: str, day: date) -> bool:
        return self._attendance.get_for_student_and_day(student_id, day) is not None

    def events_for_day(self, day: date) -> Sequence[AttendanceEvent]:
        """Events of ``day``, most recent first."""
        rows = list(self._attendance.list_for_day(day))
        rows.sort(key=lambda e: e.timestamp, reverse=True)
        return rows

    def all_events(self) -> Sequence[AttendanceEvent]:
        return self._attendance.list_all()

    def summary_by_day(self) -> dict[date, int]:
        # Recomputed on every call; never cached.
        return dict(Counter(self._calendar.day_of(e.timestamp) for e in self._attendance.list_all()))

    def recent_dates(self, *, limit: int = RECENT_DATES_LIMIT) -> list[tuple[date, int]]:
        return sorted(self.summary_by_day().items(), key=lambda kv: kv[0], reverse=True)[:limit]

    def today_activity(self, *, now: Optional[datetime] = None, limit: int = RECENT_ACTIVITY_LIMIT) -> Sequence[AttendanceEvent]:
        return self.events_for_day(self.today(now))[:limit]

    def day_report(self, day: date) -> DayReport:
        with self._db.read():
            events = self.events_for_day(day)
            total = len(self._students.list_all())
        return DayReport(
            day=day,
            events=list(events),
            total_students=total,
            present_count=len(events),
            present_percent=attendance_rate(len(events), total),
        )

    def export_rows(self, day: date) -> list[dict]:
        """Rows for the day's CSV export: student code, name and local time."""

        with self._db.read():
            events = self.events_for_day(day)
            codes = {s.student_id: s.student_code for s in self._students.list_all()}
        return [
            {
                "student_code": codes.get(e.student_id, ""),
                "student_name": e.student_name,
                "time": self._calendar.format_time(e.timestamp),
            }
            for e in events
        ]

    def dashboard(self, *, now: Optional[datetime] = None) -> dict:
        now = now or self._clock()
        report = self.day_report(self.today(now))
        recent = self.today_activity(now=now)
        return {
            "date": report.day.isoformat(),
            "total_students": report.total_students,
            "present_today": report.present_count,
            "attendance_rate": report.present_percent,
            "recent": [
                {"student_name": e.student_name, "time": self._calendar.format_time(e.timestamp)}
                for e in recent
            ],
        }
