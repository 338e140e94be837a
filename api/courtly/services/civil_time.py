"""Conversion between absolute instants and a timezone's wall clock.

"HH:MM" strings only exist at the configuration boundary. They are turned into
aware datetimes here, once, and everything downstream works on instants.
"""

import re
from datetime import date, datetime, time
from zoneinfo import ZoneInfo

_CLOCK_RE = re.compile(r"\d{2}:\d{2}", re.ASCII)

END_OF_DAY = time(23, 59, 59, 999000)


class MalformedTimeString(ValueError):
    """Raised when an "HH:MM" configuration value cannot be parsed."""

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"Malformed time string {value!r}: expected zero-padded 24-hour HH:MM")


def parse_clock(clock: str) -> time:
    """Parse "HH:MM" (00:00-23:59) into a time."""
    if not isinstance(clock, str) or not _CLOCK_RE.fullmatch(clock):
        raise MalformedTimeString(clock)
    hours, minutes = int(clock[:2]), int(clock[3:])
    if hours > 23 or minutes > 59:
        raise MalformedTimeString(clock)
    return time(hours, minutes)


def to_local(timestamp: datetime, timezone: str) -> datetime:
    """Project an aware instant onto the wall clock of `timezone`."""
    if timestamp.tzinfo is None:
        raise ValueError(f"Timestamp {timestamp.isoformat()} is naive; an aware datetime is required")
    return timestamp.astimezone(ZoneInfo(timezone))


def combine_date_and_clock(day: date, clock: str, timezone: str) -> datetime:
    """Pair a calendar date with an "HH:MM" string in `timezone`. Seconds are zero."""
    return datetime.combine(day, parse_clock(clock), tzinfo=ZoneInfo(timezone))


def format_clock(timestamp: datetime, timezone: str) -> str:
    """Format an instant as zero-padded 24-hour "HH:MM" in `timezone`."""
    return to_local(timestamp, timezone).strftime("%H:%M")


def end_of_day(day: date, timezone: str) -> datetime:
    """23:59:59.999 local on `day`."""
    return datetime.combine(day, END_OF_DAY, tzinfo=ZoneInfo(timezone))
