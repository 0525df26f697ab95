from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from datetime import datetime
from typing import Callable, Iterable, Optional, Sequence

from ..common.datetime_utils import now_utc
from ..common.validators import require_non_empty, require_signature
from ..core.constants import DEFAULT_MATCH_THRESHOLD
from ..core.exceptions import DuplicateKeyError, NotFoundError, ValidationError
from ..database.state import Database
from ..matching.matcher import Match, nearest_match
from .model import Student
from .repository import StudentRepository

logger = logging.getLogger(__name__)


class StudentService:
    """Use cases: enroll, edit, remove and look up students; match face signatures."""

    def __init__(
        self,
        students: StudentRepository,
        db: Database,
        *,
        match_threshold: float = DEFAULT_MATCH_THRESHOLD,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._students = students
        self._db = db
        self._threshold = float(match_threshold)
        self._clock = clock

    @property
    def match_threshold(self) -> float:
        return self._threshold

    def enroll(
        self,
        *,
        full_name: str,
        student_code: str,
        signature: Iterable[float],
        now: Optional[datetime] = None,
    ) -> Student:
        full_name = require_non_empty(full_name, "Name")
        student_code = require_non_empty(student_code, "Student ID")
        values = require_signature(signature)

        with self._db.transaction():
            expected = self._students.signature_length()
            if expected is not None and len(values) != expected:
                raise ValidationError(f"Signature length {len(values)} does not match enrolled length {expected}")
            if self._students.get_by_code(student_code):
                raise DuplicateKeyError(f"A student with ID {student_code} already exists")

            student = Student(
                student_id=str(uuid.uuid4()),
                full_name=full_name,
                student_code=student_code,
                signature=values,
                enrolled_at=now or self._clock(),
            )
            self._students.add(student)

        logger.info("Enrolled student %s (%s)", student.student_code, student.student_id)
        return student

    def update_student(self, student_id: str, *, full_name: str, student_code: str) -> Student:
        """Replace name and code; signature and enrollment time are kept."""

        full_name = require_non_empty(full_name, "Name")
        student_code = require_non_empty(student_code, "Student ID")

        with self._db.transaction():
            current = self._students.get_by_id(student_id)
            if not current:
                raise NotFoundError(f"Student {student_id} not found")
            holder = self._students.get_by_code(student_code)
            if holder and holder.student_id != student_id:
                raise DuplicateKeyError(f"A student with ID {student_code} already exists")

            updated = replace(current, full_name=full_name, student_code=student_code)
            self._students.replace(updated)

        logger.info("Updated student %s", student_id)
        return updated

    def delete_student(self, student_id: str) -> None:
        with self._db.transaction():
            if not self._students.delete_by_id(student_id):
                raise NotFoundError(f"Student {student_id} not found")
        logger.info("Deleted student %s", student_id)

    def get_student(self, student_id: str) -> Student:
        student = self._students.get_by_id(student_id)
        if not student:
            raise NotFoundError(f"Student {student_id} not found")
        return student

    def list_students(self) -> Sequence[Student]:
        return self._students.list_all()

    def count(self) -> int:
        return len(self._students.list_all())

    def search(self, term: str) -> Sequence[Student]:
        term = (term or "").strip().lower()
        students = self._students.list_all()
        if not term:
            return students
        return [s for s in students if term in s.full_name.lower() or term in s.student_code.lower()]

    def match(self, signature: Iterable[float], *, threshold: Optional[float] = None) -> Optional[Match[Student]]:
        """Closest student under the threshold, with its distance."""

        query = require_signature(signature)
        threshold = self._threshold if threshold is None else float(threshold)
        with self._db.read():
            candidates = self._students.list_all()
            if not candidates:
                return None
            query = require_signature(query, expected_length=len(candidates[0].signature))
            return nearest_match(candidates, query, threshold=threshold, signature_of=lambda s: s.signature)

    def find_nearest_match(self, signature: Iterable[float], *, threshold: Optional[float] = None) -> Optional[Student]:
        found = self.match(signature, threshold=threshold)
        return found.item if found else None
