import datetime as dt
from zoneinfo import ZoneInfo

from loguru import logger

from clinicportal.domain.models import DayOfWeek

_WEEKDAYS = list(DayOfWeek)


def parse_hhmm(value: str) -> dt.time:
    """Parse a 24-hour ``HH:MM`` string such as ``"09:30"``."""
    hours, sep, minutes = value.strip().partition(":")
    if not sep or not hours.isdigit() or not minutes.isdigit() or len(minutes) != 2:
        raise ValueError(f"Expected HH:MM, got '{value}'")
    return dt.time(int(hours), int(minutes))


def format_hhmm(time: dt.time) -> str:
    """Convert ``time(9, 0)`` → ``09:00``."""
    return time.strftime("%H:%M")


def day_of_week(date: dt.date) -> DayOfWeek:
    return _WEEKDAYS[date.weekday()]


def is_weekend(date: dt.date) -> bool:
    return date.weekday() >= 5


def resolve_timezone(name: str) -> dt.tzinfo:
    """Resolve a timezone name, falling back to UTC if invalid."""
    try:
        return ZoneInfo(name)
    except Exception:
        logger.warning("Invalid clinic timezone '{}'; defaulting to UTC", name)
        return dt.timezone.utc


def clinic_today(timezone_name: str, now: dt.datetime | None = None) -> dt.date:
    """Return the current calendar date in the clinic's timezone.

    This is the only place the system clock is read; the result is passed
    explicitly to the availability and transition functions.
    """
    tz = resolve_timezone(timezone_name)
    current = now or dt.datetime.now(dt.timezone.utc)
    return current.astimezone(tz).date()
