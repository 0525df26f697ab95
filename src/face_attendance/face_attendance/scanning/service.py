from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Iterable, Optional

from ..attendance.service import AttendanceService
from ..common.datetime_utils import now_utc
from ..common.validators import require_signature
from ..core.enums import MarkStatus, ScanOutcome
from ..database.state import Database
from ..students.service import StudentService
from .model import ScanResult

logger = logging.getLogger(__name__)


class ScanService:
    """Use case: one signature in, one attendance decision out.

    Matching, the presence check and the mark run inside a single
    transaction, so two near-simultaneous scans of the same face cannot both
    create an event.
    """

    def __init__(
        self,
        students: StudentService,
        attendance: AttendanceService,
        db: Database,
        *,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._students = students
        self._attendance = attendance
        self._db = db
        self._clock = clock

    def submit_signature(
        self,
        signature: Iterable[float],
        *,
        now: Optional[datetime] = None,
        threshold: Optional[float] = None,
    ) -> ScanResult:
        # Validate before taking the lock: nothing is touched for bad input.
        values = require_signature(signature)
        now = now or self._clock()

        with self._db.transaction():
            found = self._students.match(values, threshold=threshold)
            if not found:
                logger.info("Unrecognized face signature")
                return ScanResult(outcome=ScanOutcome.UNRECOGNIZED)

            student = found.item
            today = self._attendance.calendar.day_of(now)
            if self._attendance.is_present(student.student_id, today):
                return ScanResult(outcome=ScanOutcome.ALREADY_PRESENT, student=student, distance=found.distance)

            result = self._attendance.mark(student.student_id, student.full_name, now=now)

        if result.status == MarkStatus.ALREADY_MARKED:
            return ScanResult(outcome=ScanOutcome.ALREADY_PRESENT, student=student, distance=found.distance)
        return ScanResult(
            outcome=ScanOutcome.MARKED,
            student=student,
            timestamp=result.event.timestamp,
            distance=found.distance,
        )
