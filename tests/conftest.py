from __future__ import annotations

import os
import time
from datetime import datetime, timedelta, timezone

import pytest

os.environ["APP_ENV"] = "testing"

from face_attendance.container import build_container
from face_attendance.database.memory_backend import MemoryBackend


class FixedClock:
    """Callable clock that tests move forward by hand."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 3, 2, 8, 30, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock(fixed_now) -> FixedClock:
    return FixedClock(fixed_now)


@pytest.fixture
def new_york_local_time():
    """Run the test with the process-local zone set to America/New_York."""

    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is not available on this platform")
    previous = os.environ.get("TZ")
    os.environ["TZ"] = "America/New_York"
    time.tzset()
    yield
    if previous is None:
        os.environ.pop("TZ", None)
    else:
        os.environ["TZ"] = previous
    time.tzset()


@pytest.fixture
def backend() -> MemoryBackend:
    return MemoryBackend()


@pytest.fixture
def container(backend, clock):
    return build_container(backend=backend, timezone="UTC", clock=clock)


@pytest.fixture
def app(container):
    from face_attendance.main import create_app

    return create_app(container)


@pytest.fixture
def client(app):
    return app.test_client()
