from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import ScanOutcome
from ..students.model import Student


@dataclass(frozen=True)
class ScanResult:
    """What the scanner shows for one submitted signature."""

    outcome: ScanOutcome
    student: Optional[Student] = None
    timestamp: Optional[datetime] = None
    distance: Optional[float] = None

    def to_dict(self) -> dict:
        return {
            "outcome": self.outcome.value,
            "student": (
                {
                    "id": self.student.student_id,
                    "name": self.student.full_name,
                    "student_id": self.student.student_code,
                }
                if self.student
                else None
            ),
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
            "distance": self.distance,
        }
