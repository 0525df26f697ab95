from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from ..core.constants import STATE_FORMAT_VERSION
from ..core.exceptions import CorruptStateError
from .codec import decode_state, encode_state
from .state import AttendanceState

logger = logging.getLogger(__name__)


class JsonFileBackend:
    """Stores the whole state as one JSON document.

    Floats are written with Python's shortest round-trip repr, so signatures
    load back bit-for-bit. Saves go to a temp file that replaces the target.
    """

    def __init__(self, path: str | Path):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> AttendanceState:
        if not self._path.exists():
            logger.info("No data file at %s, starting with empty state", self._path)
            return AttendanceState()

        try:
            doc = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, ValueError) as e:
            logger.error("Unreadable data file %s: %s", self._path, e)
            raise CorruptStateError(f"Cannot read {self._path}: {e}") from e

        if not isinstance(doc, dict):
            raise CorruptStateError(f"{self._path}: top-level value must be an object")
        if doc.get("version") != STATE_FORMAT_VERSION:
            raise CorruptStateError(f"{self._path}: unsupported format version {doc.get('version')!r}")

        try:
            return decode_state(doc.get("identities"), doc.get("events"))
        except CorruptStateError as e:
            logger.error("Corrupt data file %s: %s", self._path, e)
            raise

    def save(self, state: AttendanceState) -> None:
        identities, events = encode_state(state)
        doc = {"version": STATE_FORMAT_VERSION, "identities": identities, "events": events}

        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_name(self._path.name + ".tmp")
        try:
            with tmp.open("w", encoding="utf-8") as f:
                json.dump(doc, f, ensure_ascii=False, indent=2, allow_nan=False)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp, self._path)
        except Exception:
            tmp.unlink(missing_ok=True)
            raise
