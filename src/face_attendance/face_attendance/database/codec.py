"""Record codec shared by the storage backends.

Persisted layout (two logical tables keyed by id)::

    identities: {id: {display_name, external_code, signature: [float...], enrolled_at}}
    events:     {id: {identity_id, identity_name, timestamp}}

Loading validates every record; anything off raises CorruptStateError rather
than being coerced, so a bad file never silently wipes enrollments.
"""
from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Any, Mapping

from ..attendance.model import AttendanceEvent
from ..core.exceptions import CorruptStateError
from ..students.model import Student
from .state import AttendanceState


def format_timestamp(ts: datetime) -> str:
    return ts.astimezone(timezone.utc).isoformat()


def parse_timestamp(value: Any, *, where: str) -> datetime:
    if not isinstance(value, str):
        raise CorruptStateError(f"{where}: timestamp must be a string")
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        ts = datetime.fromisoformat(text)
    except ValueError:
        raise CorruptStateError(f"{where}: invalid timestamp {value!r}")
    if ts.tzinfo is None:
        raise CorruptStateError(f"{where}: timestamp {value!r} has no UTC offset")
    return ts


def _require_str(record: Mapping, key: str, *, where: str) -> str:
    value = record.get(key)
    if not isinstance(value, str) or not value.strip():
        raise CorruptStateError(f"{where}: '{key}' must be a non-empty string")
    return value


def _decode_signature(value: Any, *, where: str) -> tuple[float, ...]:
    if not isinstance(value, list) or not value:
        raise CorruptStateError(f"{where}: signature must be a non-empty numeric array")
    out: list[float] = []
    for v in value:
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            raise CorruptStateError(f"{where}: signature contains a non-numeric element")
        f = float(v)
        if not math.isfinite(f):
            raise CorruptStateError(f"{where}: signature contains a non-finite element")
        out.append(f)
    return tuple(out)


def encode_student(s: Student) -> dict:
    return {
        "display_name": s.full_name,
        "external_code": s.student_code,
        "signature": list(s.signature),
        "enrolled_at": format_timestamp(s.enrolled_at),
    }


def encode_event(e: AttendanceEvent) -> dict:
    return {
        "identity_id": e.student_id,
        "identity_name": e.student_name,
        "timestamp": format_timestamp(e.timestamp),
    }


def encode_state(state: AttendanceState) -> tuple[dict[str, dict], dict[str, dict]]:
    identities = {s.student_id: encode_student(s) for s in state.students}
    events = {e.event_id: encode_event(e) for e in state.events}
    return identities, events


def decode_state(identities: Any, events: Any) -> AttendanceState:
    if not isinstance(identities, Mapping):
        raise CorruptStateError("identities must be an object keyed by id")
    if not isinstance(events, Mapping):
        raise CorruptStateError("events must be an object keyed by id")

    students: list[Student] = []
    codes: set[str] = set()
    dim: int | None = None
    for student_id, r in identities.items():
        where = f"identity {student_id!r}"
        if not isinstance(student_id, str) or not student_id or not isinstance(r, Mapping):
            raise CorruptStateError(f"{where}: malformed record")
        signature = _decode_signature(r.get("signature"), where=where)
        if dim is None:
            dim = len(signature)
        elif len(signature) != dim:
            raise CorruptStateError(f"{where}: signature length {len(signature)} != {dim}")
        code = _require_str(r, "external_code", where=where)
        if code in codes:
            raise CorruptStateError(f"{where}: duplicate external code {code!r}")
        codes.add(code)
        students.append(
            Student(
                student_id=student_id,
                full_name=_require_str(r, "display_name", where=where),
                student_code=code,
                signature=signature,
                enrolled_at=parse_timestamp(r.get("enrolled_at"), where=where),
            )
        )

    out_events: list[AttendanceEvent] = []
    for event_id, r in events.items():
        where = f"event {event_id!r}"
        if not isinstance(event_id, str) or not event_id or not isinstance(r, Mapping):
            raise CorruptStateError(f"{where}: malformed record")
        # identity_id may point at a deleted student; that is expected.
        out_events.append(
            AttendanceEvent(
                event_id=event_id,
                student_id=_require_str(r, "identity_id", where=where),
                student_name=_require_str(r, "identity_name", where=where),
                timestamp=parse_timestamp(r.get("timestamp"), where=where),
            )
        )

    return AttendanceState(students=tuple(students), events=tuple(out_events))
