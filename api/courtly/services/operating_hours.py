"""Operating hours, daylight cutoff and slot generation for a court.

Pure calculation module: no database, no async, no FastAPI dependencies.
Weekly hours are "HH:MM" strings in the organisation's timezone and are
converted to aware datetimes on the day being asked about.
"""

from collections.abc import Iterator
from datetime import UTC, date, datetime, timedelta
from zoneinfo import ZoneInfo

from courtly.models.booking import TimeInterval
from courtly.models.organisation import OrgLocation, ResourceConfig
from courtly.services.civil_time import combine_date_and_clock, to_local
from courtly.services.sunset import SunsetEstimator, estimate_sunset


def opening_window(day: date, resource: ResourceConfig, timezone: str) -> TimeInterval | None:
    """The court's open-to-close interval on `day`, or None if it is closed that day."""
    hours = resource.open_hours_on(day)
    if hours is None:
        return None
    return TimeInterval(
        start=combine_date_and_clock(day, hours.open, timezone),
        end=combine_date_and_clock(day, hours.close, timezone),
    )


def is_within_open_hours(instant: datetime, resource: ResourceConfig, timezone: str) -> bool:
    """True if `instant` lies within opening hours of its own local day, bounds included."""
    window = opening_window(to_local(instant, timezone).date(), resource, timezone)
    if window is None:
        return False
    return window.start.astimezone(UTC) <= instant.astimezone(UTC) <= window.end.astimezone(UTC)


def resolve_cutoff(
    day: date,
    resource: ResourceConfig,
    override: str | None,
    location: OrgLocation,
    sunset_estimator: SunsetEstimator = estimate_sunset,
) -> datetime | None:
    """Return the latest permissible booking end on `day`, or None for no cutoff.

    Floodlit courts: no cutoff.
    Otherwise the override "HH:MM" if one is configured, else sunset.
    """
    if resource.has_lighting:
        return None
    if override:
        return combine_date_and_clock(day, override, location.timezone)
    return sunset_estimator(day, location.latitude, location.longitude, location.timezone)


def generate_slots(
    day: date,
    interval_minutes: int,
    resource: ResourceConfig,
    timezone: str,
) -> Iterator[TimeInterval]:
    """Yield back-to-back slots of `interval_minutes` from opening to closing on `day`.

    A trailing slot that would run past closing is not yielded. Yields nothing
    when the court is closed that weekday.
    """
    if interval_minutes <= 0:
        raise ValueError(f"Slot length must be positive, got {interval_minutes}")

    window = opening_window(day, resource, timezone)
    if window is None:
        return

    # Step in UTC so slots stay fixed-width across a DST change
    zone = ZoneInfo(timezone)
    step = timedelta(minutes=interval_minutes)
    current = window.start.astimezone(UTC)
    close = window.end.astimezone(UTC)
    while current + step <= close:
        yield TimeInterval(start=current.astimezone(zone), end=(current + step).astimezone(zone))
        current += step


def duration_minutes(interval: TimeInterval) -> int:
    """Whole minutes elapsed between start and end, DST transitions included."""
    elapsed = interval.end.astimezone(UTC) - interval.start.astimezone(UTC)
    return int(elapsed.total_seconds() // 60)


def format_duration(minutes: int) -> str:
    """Format a duration for display.

    90 -> "1h 30m", 120 -> "2h", 45 -> "45m", 0 -> "0m"
    """
    hours, mins = divmod(minutes, 60)
    if hours == 0:
        return f"{mins}m"
    if mins == 0:
        return f"{hours}h"
    return f"{hours}h {mins}m"
