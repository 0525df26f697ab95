from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import MarkStatus


@dataclass(frozen=True)
class AttendanceEvent:
    """Domain entity: one presence event in the ledger.

    ``student_name`` is captured at marking time and is kept even if the
    student is renamed or deleted later.
    """

    event_id: str
    student_id: str
    student_name: str
    timestamp: datetime


@dataclass(frozen=True)
class MarkResult:
    status: MarkStatus
    event: Optional[AttendanceEvent]


@dataclass(frozen=True)
class DayReport:
    """Read-model for the daily attendance view/export."""

    day: date
    events: list[AttendanceEvent]
    total_students: int
    present_count: int
    present_percent: int
