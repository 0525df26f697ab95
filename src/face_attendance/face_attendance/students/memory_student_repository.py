from __future__ import annotations

from typing import Optional, Sequence

from ..database.state import Database
from .model import Student
from .repository import StudentRepository


class InMemoryStudentRepository(StudentRepository):
    """Student table kept in ``Database``; every write is persisted through it."""

    def __init__(self, db: Database):
        self._db = db

    def get_by_id(self, student_id: str) -> Optional[Student]:
        with self._db.read() as db:
            return db.students.get(student_id)

    def get_by_code(self, student_code: str) -> Optional[Student]:
        with self._db.read() as db:
            for s in db.students.values():
                if s.student_code == student_code:
                    return s
            return None

    def list_all(self) -> Sequence[Student]:
        with self._db.read() as db:
            return list(db.students.values())

    def signature_length(self) -> Optional[int]:
        with self._db.read() as db:
            first = next(iter(db.students.values()), None)
            return len(first.signature) if first else None

    def add(self, student: Student) -> None:
        with self._db.transaction() as db:
            if student.student_id in db.students:
                raise KeyError(student.student_id)
            db.students[student.student_id] = student

    def replace(self, student: Student) -> bool:
        with self._db.transaction() as db:
            if student.student_id not in db.students:
                return False
            # dict keeps the original slot, so insertion order is unchanged.
            db.students[student.student_id] = student
            return True

    def delete_by_id(self, student_id: str) -> bool:
        with self._db.transaction() as db:
            return db.students.pop(student_id, None) is not None
