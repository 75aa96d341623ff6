"""Timezone-aware date helpers.

Storage compares against UTC instants; callers speak in local calendar
dates. A local day [00:00:00, 23:59:59.999999] is resolved in the
configured zone and then converted to UTC, so the window is correct for
any zone offset rather than a hard-coded "-8 hours".
"""

import re
from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from functools import lru_cache
from zoneinfo import ZoneInfo

from src.pl_common.errors import InvalidDateError

DISPLAY_FORMAT = "%Y-%m-%d %H:%M:%S"

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def utc_now() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(timezone.utc)


@lru_cache
def get_zone(name: str) -> ZoneInfo:
    return ZoneInfo(name)


def parse_calendar_date(field: str, value: str | None) -> date:
    """Parse a strict YYYY-MM-DD string, raising InvalidDateError otherwise."""
    if value is None or not _DATE_RE.fullmatch(value):
        raise InvalidDateError(field, value)
    try:
        return date.fromisoformat(value)
    except ValueError:
        # e.g. 2024-02-30
        raise InvalidDateError(field, value) from None


def format_local(dt: datetime, zone: ZoneInfo) -> str:
    """Render an aware datetime as local 'YYYY-MM-DD HH:MM:SS'."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(zone).strftime(DISPLAY_FORMAT)


@dataclass(frozen=True)
class TimeWindow:
    """Inclusive [start, end] window; both bounds are aware datetimes."""

    start: datetime
    end: datetime

    @property
    def start_utc(self) -> datetime:
        return self.start.astimezone(timezone.utc)

    @property
    def end_utc(self) -> datetime:
        return self.end.astimezone(timezone.utc)

    def local_bounds(self) -> tuple[str, str]:
        return self.start.strftime(DISPLAY_FORMAT), self.end.strftime(DISPLAY_FORMAT)


def resolve_local_day_window(start_at: str, end_at: str, zone: ZoneInfo) -> TimeWindow:
    """Start of `start_at` through end of `end_at`, both local to `zone`."""
    start_day = parse_calendar_date("start_at", start_at)
    end_day = parse_calendar_date("end_at", end_at)
    return TimeWindow(
        start=datetime.combine(start_day, time.min, tzinfo=zone),
        end=datetime.combine(end_day, time.max, tzinfo=zone),
    )
