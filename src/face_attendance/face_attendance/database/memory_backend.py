from __future__ import annotations

from typing import Optional

from .state import AttendanceState


class MemoryBackend:
    """Keeps the last saved snapshot in process memory (tests, demos)."""

    def __init__(self, initial: Optional[AttendanceState] = None):
        self.state = initial or AttendanceState()
        self.save_count = 0

    def load(self) -> AttendanceState:
        return self.state

    def save(self, state: AttendanceState) -> None:
        self.state = state
        self.save_count += 1
