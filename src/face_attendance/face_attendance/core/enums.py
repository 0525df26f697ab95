from __future__ import annotations

from enum import Enum


class MarkStatus(str, Enum):
    """Outcome of writing a presence event to the ledger."""

    MARKED = "MARKED"
    ALREADY_MARKED = "ALREADY_MARKED"


class ScanOutcome(str, Enum):
    """Outcome reported to the scanner for one submitted signature."""

    UNRECOGNIZED = "UNRECOGNIZED"
    ALREADY_PRESENT = "ALREADY_PRESENT"
    MARKED = "MARKED"


class ScanMode(str, Enum):
    """Which workflow requested signatures from the capture side."""

    ENROLL = "enroll"
    RECOGNIZE = "recognize"


class SessionState(str, Enum):
    IDLE = "IDLE"
    MATCHING = "MATCHING"
