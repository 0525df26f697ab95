from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from .attendance.memory_attendance_repository import InMemoryAttendanceRepository
from .attendance.service import AttendanceService
from .common.datetime_utils import CalendarPolicy, now_utc, resolve_timezone
from .core.constants import DEFAULT_MATCH_THRESHOLD
from .database.backend import StateBackend
from .database.bootstrap import apply_schema
from .database.connection import DatabaseConnection, DBConfig
from .database.json_backend import JsonFileBackend
from .database.memory_backend import MemoryBackend
from .database.mysql_backend import MySQLBackend
from .database.state import Database
from .scanning.service import ScanService
from .scanning.session import ScanSession
from .students.memory_student_repository import InMemoryStudentRepository
from .students.service import StudentService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Container:
    db: Database
    calendar: CalendarPolicy

    students_repo: InMemoryStudentRepository
    attendance_repo: InMemoryAttendanceRepository

    student_service: StudentService
    attendance_service: AttendanceService
    scan_service: ScanService
    scan_session: ScanSession


def build_backend(
    *,
    storage_backend: str,
    data_file: str | Path | None = None,
    db_config: Optional[dict] = None,
    auto_init_db: bool = False,
    schema_path: str | Path | None = None,
) -> StateBackend:
    kind = (storage_backend or "json").lower()

    if kind == "memory":
        return MemoryBackend()

    if kind == "json":
        if not data_file:
            raise ValueError("DATA_FILE is required for the json storage backend")
        return JsonFileBackend(data_file)

    if kind == "mysql":
        conn = DatabaseConnection(DBConfig.from_dict(db_config or {}))
        if auto_init_db and schema_path:
            apply_schema(conn, schema_path=schema_path)
            logger.info("MySQL schema ready (%s)", conn.config.database)
        return MySQLBackend(conn)

    raise ValueError(f"Unknown STORAGE_BACKEND: {storage_backend!r}")


def build_container(
    *,
    backend: StateBackend,
    match_threshold: float = DEFAULT_MATCH_THRESHOLD,
    timezone: str | None = "local",
    clock: Callable[[], datetime] = now_utc,
) -> Container:
    # Loads once here; CorruptStateError propagates and stops startup.
    db = Database(backend)
    calendar = CalendarPolicy(resolve_timezone(timezone))

    students_repo = InMemoryStudentRepository(db)
    attendance_repo = InMemoryAttendanceRepository(db, calendar)

    student_service = StudentService(students_repo, db, match_threshold=match_threshold, clock=clock)
    attendance_service = AttendanceService(attendance_repo, students_repo, db, calendar=calendar, clock=clock)
    scan_service = ScanService(student_service, attendance_service, db, clock=clock)

    return Container(
        db=db,
        calendar=calendar,
        students_repo=students_repo,
        attendance_repo=attendance_repo,
        student_service=student_service,
        attendance_service=attendance_service,
        scan_service=scan_service,
        scan_session=ScanSession(scan_service, student_service),
    )
