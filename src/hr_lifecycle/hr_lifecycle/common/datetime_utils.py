from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Optional

from ..core.constants import DEFAULT_ORG_UTC_OFFSET_HOURS


def org_timezone(offset_hours: int = DEFAULT_ORG_UTC_OFFSET_HOURS) -> timezone:
    """Fixed-offset organisation timezone (no DST)."""
    return timezone(timedelta(hours=int(offset_hours)))


def to_org_time(value: datetime, tz: timezone) -> datetime:
    """Express an instant in the organisation timezone.

    Naive values are taken as already being org-local wall-clock time.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=tz)
    return value.astimezone(tz)


def now_in(tz: timezone) -> datetime:
    """Current time in the given timezone.

    Note: Wrapped so tests can patch it.
    """
    return datetime.now(tz)


def to_utc_naive(value: Optional[datetime]) -> Optional[datetime]:
    """Convert an aware instant into the naive UTC form stored in DATETIME columns."""
    if value is None:
        return None
    if value.tzinfo is None:
        raise ValueError("Refusing to store a naive datetime; attach a timezone first")
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def from_utc_naive(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    return value.replace(tzinfo=timezone.utc)


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def format_day(value: date) -> str:
    """Short display form, e.g. 'Nov 14'."""
    return f"{value.strftime('%b')} {value.day}"


def format_date_range(start: date, end: date) -> str:
    if start == end:
        return format_day(start)
    return f"{format_day(start)} to {format_day(end)}"
