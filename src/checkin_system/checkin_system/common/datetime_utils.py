from __future__ import annotations

import re
from datetime import date, datetime, timedelta, timezone
from typing import Iterator, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

DATE_KEY_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
MONTH_KEY_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_utc() -> datetime:
    """Current instant (UTC, timezone-aware).

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(timezone.utc)


def as_utc(instant: datetime) -> datetime:
    """Naive datetimes coming from the database are UTC."""
    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(timezone.utc)


def today_key(now: Optional[datetime] = None) -> str:
    """Calendar day of the server clock (UTC) as YYYY-MM-DD."""
    return as_utc(now or now_utc()).strftime("%Y-%m-%d")


def month_key(now: Optional[datetime] = None) -> str:
    return as_utc(now or now_utc()).strftime("%Y-%m")


def is_valid_date_key(value: object) -> bool:
    if not isinstance(value, str) or not DATE_KEY_PATTERN.fullmatch(value):
        return False
    try:
        parse_iso_date(value)
    except ValueError:
        return False
    return True


def is_valid_month_key(value: object) -> bool:
    if not isinstance(value, str) or not MONTH_KEY_PATTERN.fullmatch(value):
        return False
    return 1 <= int(value[5:7]) <= 12


def iter_date_keys(start: str, end: str) -> Iterator[str]:
    """Every day from start to end (inclusive) as YYYY-MM-DD."""
    current = parse_iso_date(start)
    last = parse_iso_date(end)
    while current <= last:
        yield current.strftime("%Y-%m-%d")
        current += timedelta(days=1)


def to_local(instant: datetime, timezone_id: Optional[str] = None) -> datetime:
    """Convert an instant to wall-clock time in `timezone_id`.

    An absent or unknown zone falls back to the host's local zone instead of
    raising.
    """

    instant = as_utc(instant)
    if timezone_id:
        try:
            return instant.astimezone(ZoneInfo(timezone_id))
        except (ZoneInfoNotFoundError, ValueError, TypeError, OSError):
            pass
    return instant.astimezone()


def local_time_parts(instant: datetime, timezone_id: Optional[str] = None) -> tuple[int, int]:
    local = to_local(instant, timezone_id)
    return local.hour, local.minute


def format_local_time(instant: datetime, timezone_id: Optional[str] = None) -> str:
    return to_local(instant, timezone_id).strftime("%H:%M")


def format_local_date(instant: datetime, timezone_id: Optional[str] = None) -> str:
    return to_local(instant, timezone_id).strftime("%Y-%m-%d")


def to_iso(instant: Optional[datetime]) -> Optional[str]:
    """ISO-8601 UTC with millisecond precision and a trailing Z."""
    if instant is None:
        return None
    return as_utc(instant).isoformat(timespec="milliseconds").replace("+00:00", "Z")
