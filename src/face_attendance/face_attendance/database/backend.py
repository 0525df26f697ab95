from __future__ import annotations

from typing import Protocol

from .state import AttendanceState


class StateBackend(Protocol):
    """Persistence port for the whole attendance state.

    Note (DIP): ``Database`` depends on this interface only, so the JSON file,
    MySQL and in-memory backends can be swapped without touching services.
    """

    def load(self) -> AttendanceState:
        """Return the stored state, or raise CorruptStateError."""

        raise NotImplementedError

    def save(self, state: AttendanceState) -> None:
        raise NotImplementedError
