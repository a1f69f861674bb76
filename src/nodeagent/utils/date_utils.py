import re
from datetime import datetime, timedelta, timezone
from typing import Optional, Union

_DURATION_RE = re.compile(r"^(\d+)([smh])$")
_DURATION_UNITS = {"s": "seconds", "m": "minutes", "h": "hours"}


def parse_iso_date(date_str: str) -> Optional[datetime]:
    """
    Parses an ISO 8601 date string into a datetime object.
    Handles the 'Z' suffix by replacing it with '+00:00' for compatibility
    with datetime.fromisoformat() in older Python versions (pre-3.11).

    Returns:
        A datetime object or None if parsing fails.
    """
    if not date_str:
        return None

    try:
        if date_str.endswith("Z"):
            date_str = date_str.replace("Z", "+00:00")

        return datetime.fromisoformat(date_str)
    except ValueError:
        return None


def ensure_utc(dt: Union[datetime, str]) -> datetime:
    """
    Ensures a datetime object is timezone-aware and in UTC.
    If input is a string, it parses it first.
    If input is naive, it assumes UTC.
    """
    if isinstance(dt, str):
        parsed = parse_iso_date(dt)
        if not parsed:
            raise ValueError(f"Invalid date string: {dt}")
        dt = parsed

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    else:
        dt = dt.astimezone(timezone.utc)

    return dt


def parse_duration(value: str) -> timedelta:
    """Parses a duration string like '10s', '40m' or '1h' into a timedelta."""
    match = _DURATION_RE.match(str(value).strip().lower())
    if not match:
        raise ValueError(f"Invalid duration format: '{value}'. Use 's', 'm', or 'h'.")

    amount, unit = int(match.group(1)), match.group(2)
    return timedelta(**{_DURATION_UNITS[unit]: amount})
