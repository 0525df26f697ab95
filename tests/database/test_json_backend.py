from __future__ import annotations

import json
import os
import random

import pytest

from face_attendance.container import build_container
from face_attendance.core.exceptions import CorruptStateError, PersistenceError
from face_attendance.database.json_backend import JsonFileBackend
from face_attendance.database.memory_backend import MemoryBackend


def _container(path, clock):
    return build_container(backend=JsonFileBackend(path), timezone="UTC", clock=clock)


def test_missing_file_loads_empty_state(tmp_path, clock):
    c = _container(tmp_path / "data.json", clock)

    assert c.student_service.list_students() == []
    assert not (tmp_path / "data.json").exists()


def test_state_round_trips_exactly_across_restart(tmp_path, clock):
    path = tmp_path / "data.json"
    rng = random.Random(7)
    signature = [rng.uniform(-1, 1) for _ in range(128)]
    signature[0] = 0.1 + 0.2  # not representable in short decimal form

    c1 = _container(path, clock)
    ada = c1.student_service.enroll(full_name="Ada", student_code="S001", signature=signature)
    bob = c1.student_service.enroll(full_name="Bob", student_code="S002", signature=[x / 3 for x in signature])
    c1.scan_service.submit_signature(signature)
    clock.advance(minutes=3, microseconds=17)
    c1.attendance_service.mark(bob.student_id, bob.full_name)

    c2 = _container(path, clock)

    assert c2.db.snapshot() == c1.db.snapshot()
    assert c2.student_service.get_student(ada.student_id).signature == tuple(signature)
    assert [e.student_name for e in c2.attendance_service.all_events()] == ["Ada", "Bob"]


def test_every_mutation_is_written_through(tmp_path, clock):
    path = tmp_path / "data.json"
    c = _container(path, clock)

    ada = c.student_service.enroll(full_name="Ada", student_code="S001", signature=[0.1, 0.2])
    assert ada.student_id in json.loads(path.read_text())["identities"]

    c.student_service.update_student(ada.student_id, full_name="Ada L", student_code="S001")
    assert json.loads(path.read_text())["identities"][ada.student_id]["display_name"] == "Ada L"

    c.scan_service.submit_signature([0.1, 0.2])
    assert len(json.loads(path.read_text())["events"]) == 1

    c.student_service.delete_student(ada.student_id)
    doc = json.loads(path.read_text())
    assert doc["identities"] == {}
    assert len(doc["events"]) == 1


def _write(path, doc):
    path.write_text(json.dumps(doc), encoding="utf-8")


def _valid_doc():
    return {
        "version": 1,
        "identities": {
            "id-1": {
                "display_name": "Ada",
                "external_code": "S001",
                "signature": [0.1, 0.2, 0.3],
                "enrolled_at": "2026-03-01T08:00:00+00:00",
            }
        },
        "events": {
            "ev-1": {
                "identity_id": "gone",
                "identity_name": "Old Student",
                "timestamp": "2026-03-01T09:00:00Z",
            }
        },
    }


def test_valid_document_with_dangling_event_loads(tmp_path):
    path = tmp_path / "data.json"
    _write(path, _valid_doc())

    state = JsonFileBackend(path).load()

    assert state.students[0].signature == (0.1, 0.2, 0.3)
    assert state.events[0].student_id == "gone"
    assert state.events[0].timestamp.utcoffset().total_seconds() == 0


def _mutations():
    def sig_strings(d):
        d["identities"]["id-1"]["signature"] = ["0.1", "0.2", "0.3"]

    def sig_empty(d):
        d["identities"]["id-1"]["signature"] = []

    def sig_object(d):
        d["identities"]["id-1"]["signature"] = {"0": 0.1}

    def sig_length(d):
        d["identities"]["id-2"] = dict(d["identities"]["id-1"], external_code="S002", signature=[0.1, 0.2])

    def dup_code(d):
        d["identities"]["id-2"] = dict(d["identities"]["id-1"])

    def naive_ts(d):
        d["events"]["ev-1"]["timestamp"] = "2026-03-01T09:00:00"

    def bad_ts(d):
        d["identities"]["id-1"]["enrolled_at"] = "yesterday"

    def missing_name(d):
        del d["identities"]["id-1"]["display_name"]

    def wrong_version(d):
        d["version"] = 99

    def events_list(d):
        d["events"] = []

    return [sig_strings, sig_empty, sig_object, sig_length, dup_code, naive_ts, bad_ts, missing_name, wrong_version, events_list]


@pytest.mark.parametrize("mutate", _mutations(), ids=lambda f: f.__name__)
def test_corrupt_document_fails_loudly(tmp_path, mutate):
    path = tmp_path / "data.json"
    doc = _valid_doc()
    mutate(doc)
    _write(path, doc)

    with pytest.raises(CorruptStateError):
        JsonFileBackend(path).load()


def test_unparseable_file_stops_startup(tmp_path, clock):
    path = tmp_path / "data.json"
    path.write_text('{"version": 1, "identities": {', encoding="utf-8")

    with pytest.raises(CorruptStateError):
        _container(path, clock)
    assert path.read_text(encoding="utf-8") == '{"version": 1, "identities": {'


class FailingBackend(MemoryBackend):
    def __init__(self):
        super().__init__()
        self.fail = False

    def save(self, state):
        if self.fail:
            raise OSError("disk full")
        super().save(state)


def test_failed_save_rolls_back_mutation(clock):
    backend = FailingBackend()
    c = build_container(backend=backend, timezone="UTC", clock=clock)
    ada = c.student_service.enroll(full_name="Ada", student_code="S001", signature=[0.1])

    backend.fail = True
    with pytest.raises(PersistenceError):
        c.student_service.enroll(full_name="Bob", student_code="S002", signature=[0.2])
    with pytest.raises(PersistenceError):
        c.scan_service.submit_signature([0.1])
    with pytest.raises(PersistenceError):
        c.student_service.delete_student(ada.student_id)

    assert c.student_service.list_students() == [ada]
    assert c.attendance_service.all_events() == []
    assert c.db.snapshot() == backend.state


def test_interrupted_save_leaves_previous_file_and_no_temp(tmp_path, clock, monkeypatch):
    path = tmp_path / "data.json"
    c = _container(path, clock)
    c.student_service.enroll(full_name="Ada", student_code="S001", signature=[0.1])
    before = path.read_text(encoding="utf-8")

    def fail_fsync(fd):
        raise OSError("disk full")

    monkeypatch.setattr(os, "fsync", fail_fsync)
    with pytest.raises(PersistenceError):
        c.student_service.enroll(full_name="Bob", student_code="S002", signature=[0.2])

    assert path.read_text(encoding="utf-8") == before
    assert not (tmp_path / "data.json.tmp").exists()
    assert [s.full_name for s in c.student_service.list_students()] == ["Ada"]
