from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone, tzinfo
from zoneinfo import ZoneInfo

from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid date: {value!r} (expected YYYY-MM-DD)")


def now_utc() -> datetime:
    """Current instant as an aware UTC datetime.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(timezone.utc)


def resolve_timezone(name: str | None) -> tzinfo | None:
    """Map the ATTENDANCE_TIMEZONE setting to a tzinfo.

    "local" (or empty) gives None: the system zone, looked up per instant so
    DST changes apply to past and present timestamps alike.
    """

    if not name or name.lower() == "local":
        return None
    if name.upper() == "UTC":
        return timezone.utc
    return ZoneInfo(name)


@dataclass(frozen=True)
class CalendarPolicy:
    """Single source of truth for turning an instant into a calendar day.

    The dedup check, day filters, summaries and reports all go through the
    same policy so events near midnight land on the same day everywhere.
    """

    tz: tzinfo | None = timezone.utc

    def day_of(self, ts: datetime) -> date:
        if ts.tzinfo is None:
            raise ValueError("Naive timestamps are not supported")
        return ts.astimezone(self.tz).date()

    def today(self, now: datetime | None = None) -> date:
        return self.day_of(now or now_utc())

    def format_time(self, ts: datetime) -> str:
        if ts.tzinfo is None:
            raise ValueError("Naive timestamps are not supported")
        return ts.astimezone(self.tz).strftime("%H:%M:%S")

    @property
    def zone_name(self) -> str:
        return "local" if self.tz is None else str(self.tz)
