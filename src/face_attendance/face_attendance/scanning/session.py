from __future__ import annotations

import logging
import threading
from typing import Iterable, Optional

from ..common.validators import require_signature
from ..core.enums import ScanMode, SessionState
from ..core.exceptions import ValidationError
from ..students.model import Student
from ..students.service import StudentService
from .model import ScanResult
from .service import ScanService

logger = logging.getLogger(__name__)


class ScanSession:
    """Receives signatures from the capture side for one workflow at a time.

    * ``recognize``: every delivered signature is submitted until ``stop()``.
    * ``enroll``: the first signature is kept and capture stops; ``enroll()``
      then creates the student from it.

    Nothing is written until a signature has actually arrived.
    """

    def __init__(self, scans: ScanService, students: StudentService):
        self._scans = scans
        self._students = students
        self._lock = threading.Lock()
        self.mode: Optional[ScanMode] = None
        self.state = SessionState.IDLE
        self.captured: Optional[tuple[float, ...]] = None
        self.last_result: Optional[ScanResult] = None

    @property
    def active(self) -> bool:
        return self.mode is not None

    def start(self, mode: ScanMode) -> None:
        with self._lock:
            self.mode = ScanMode(mode)
            self.state = SessionState.IDLE
            self.captured = None
            self.last_result = None
        logger.debug("Scan session started in %s mode", self.mode.value)

    def stop(self) -> None:
        with self._lock:
            self.mode = None
            self.state = SessionState.IDLE

    def on_signature(self, signature: Iterable[float]) -> Optional[ScanResult]:
        """Callback for each signature delivered by the capture side.

        Returns the scan result in recognize mode, None otherwise (including
        signatures that arrive after the session stopped).
        """

        with self._lock:
            if self.mode is None:
                return None

            if self.mode == ScanMode.ENROLL:
                if self.captured is None:
                    self.captured = require_signature(signature)
                    self.mode = None
                return None

            self.state = SessionState.MATCHING
            try:
                self.last_result = self._scans.submit_signature(signature)
            finally:
                self.state = SessionState.IDLE
            return self.last_result

    def enroll(self, *, full_name: str, student_code: str) -> Student:
        with self._lock:
            if self.captured is None:
                raise ValidationError("Please capture a face image")
            signature = self.captured

        student = self._students.enroll(full_name=full_name, student_code=student_code, signature=signature)
        with self._lock:
            self.captured = None
        return student
