"""
Date parsing, formatting and calendar-day utilities.

All streak and rate logic is day-granular. Timestamps are reduced to a
calendar day with ``to_calendar_day`` under an explicit timezone policy:

- ``tz=None`` means the host's local timezone.
- Aware datetimes are converted to ``tz`` before the date is taken.
- Naive datetimes are wall-clock times already expressed in ``tz``.
"""

from datetime import date, datetime, time, timedelta, tzinfo
from typing import Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..core.exceptions import ConfigurationError


ONE_DAY = timedelta(days=1)
LOCAL_TIMEZONE_NAMES = ("", "local", "system")

DateLike = Union[date, datetime]


def resolve_timezone(name: Optional[str]) -> Optional[tzinfo]:
    """
    Resolve a configured timezone name.

    Args:
        name: "local" (or empty) for host local time, otherwise an IANA name

    Returns:
        tzinfo for the zone, or None for host local time

    Raises:
        ConfigurationError: if the zone name is unknown
    """
    if name is None or name.strip().lower() in LOCAL_TIMEZONE_NAMES:
        return None
    try:
        return ZoneInfo(name.strip())
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ConfigurationError(f"Unknown timezone: {name!r}") from exc


def as_aware(value: datetime, tz: Optional[tzinfo] = None) -> datetime:
    """Attach ``tz`` to a naive datetime (local time when tz is None)."""
    if value.tzinfo is not None:
        return value
    if tz is None:
        return value.astimezone()
    return value.replace(tzinfo=tz)


def to_calendar_day(value: DateLike, tz: Optional[tzinfo] = None) -> date:
    """Strip the time of day from a timestamp under the timezone policy."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(tz)
        return value.date()
    if isinstance(value, date):
        return value
    raise TypeError(f"Expected date or datetime, got {type(value).__name__}")


def today(tz: Optional[tzinfo] = None) -> date:
    """Current calendar day in ``tz`` (local time when None)."""
    if tz is None:
        return date.today()
    return datetime.now(tz).date()


def start_of_day(value: DateLike, tz: Optional[tzinfo] = None) -> datetime:
    """Aware datetime at 00:00 of the value's calendar day."""
    if isinstance(value, datetime):
        return as_aware(value, tz)
    return as_aware(datetime.combine(value, time.min), tz)


def end_of_day(value: DateLike, tz: Optional[tzinfo] = None) -> datetime:
    """Aware datetime at the last microsecond of a date, or the datetime itself."""
    if isinstance(value, datetime):
        return as_aware(value, tz)
    return as_aware(datetime.combine(value, time.max), tz)


def parse_date(date_str: Optional[str]) -> Optional[date]:
    """
    Parse a date string into a date object.

    Handles various formats:
    - ISO format (YYYY-MM-DD)
    - ISO datetime (YYYY-MM-DDTHH:MM:SS)

    Args:
        date_str: Date string to parse

    Returns:
        Parsed date object or None if invalid
    """
    if not date_str:
        return None

    # Take only date part if it's a datetime string
    if 'T' in date_str:
        date_str = date_str.split('T')[0]

    try:
        return datetime.strptime(date_str, '%Y-%m-%d').date()
    except ValueError:
        pass

    try:
        # Try with single digit month/day
        parts = date_str.split('-')
        if len(parts) == 3:
            return date(int(parts[0]), int(parts[1]), int(parts[2]))
    except (ValueError, IndexError):
        pass

    return None


def format_date(d: Optional[date]) -> Optional[str]:
    """
    Format a date object as ISO string (YYYY-MM-DD).

    Args:
        d: Date object to format

    Returns:
        ISO formatted date string or None
    """
    if not d:
        return None

    return d.strftime('%Y-%m-%d')
