from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Student:
    """Domain entity: an enrolled identity.

    Note: Plain data object (no storage access). ``signature`` is the face
    descriptor produced upstream; its length is fixed across the store.
    """

    student_id: str
    full_name: str
    student_code: str
    signature: tuple[float, ...]
    enrolled_at: datetime
