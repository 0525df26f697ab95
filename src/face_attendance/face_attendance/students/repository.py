from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Student


class StudentRepository(Protocol):
    """Repository interface for Student.

    Note (DIP): the service layer depends on this interface, not on a concrete store.
    """

    def get_by_id(self, student_id: str) -> Optional[Student]:
        raise NotImplementedError

    def get_by_code(self, student_code: str) -> Optional[Student]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Student]:
        """Snapshot in insertion order."""

        raise NotImplementedError

    def signature_length(self) -> Optional[int]:
        """Length shared by every stored signature, or None when empty."""

        raise NotImplementedError

    def add(self, student: Student) -> None:
        raise NotImplementedError

    def replace(self, student: Student) -> bool:
        raise NotImplementedError

    def delete_by_id(self, student_id: str) -> bool:
        raise NotImplementedError
