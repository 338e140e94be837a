"""Sunset estimation for courts without floodlights.

Pure calculation module: no I/O, no settings. Two estimators share one signature
(day, latitude, longitude, timezone) -> aware datetime:

- estimate_sunset: the simplified solar-declination formula the booking rules
  have always used. Good to roughly ten minutes around the equinoxes; it treats
  the solar-time result as a local wall-clock time, so it runs early by the DST
  offset in summer.
- precise_sunset: the astral library's solar position calculation.

Both return the end of the local day when the sun does not set (polar day or
polar night), which means "no cutoff" to the caller.
"""

import math
from collections.abc import Callable
from datetime import date, datetime, time, timedelta
from zoneinfo import ZoneInfo

from astral import LocationInfo
from astral.sun import sunset

from courtly.services.civil_time import end_of_day

SunsetEstimator = Callable[[date, float, float, str], datetime]


def _solar_hour_angle(day_of_year: int, latitude: float) -> float | None:
    """Sunset hour angle in radians, or None when the sun never sets or never rises."""
    declination = 0.409 * math.sin(2 * math.pi * day_of_year / 365 - 1.39)
    cos_hour_angle = -math.tan(math.radians(latitude)) * math.tan(declination)
    if cos_hour_angle < -1 or cos_hour_angle > 1:
        return None
    return math.acos(cos_hour_angle)


def estimate_sunset(day: date, latitude: float, longitude: float, timezone: str) -> datetime:
    """Approximate local sunset on `day` using the simplified declination formula."""
    hour_angle = _solar_hour_angle(day.timetuple().tm_yday, latitude)
    if hour_angle is None:
        return end_of_day(day, timezone)

    sunset_hour = 12 + hour_angle * 12 / math.pi - longitude / 15
    hours = math.floor(sunset_hour)
    # Round half up, not to even
    minutes = math.floor((sunset_hour - hours) * 60 + 0.5)

    # Wall-clock arithmetic on an aware datetime; minute 60 carries into the hour
    midnight = datetime.combine(day, time(0, 0), tzinfo=ZoneInfo(timezone))
    return midnight + timedelta(hours=hours, minutes=minutes)


def precise_sunset(day: date, latitude: float, longitude: float, timezone: str) -> datetime:
    """Local sunset on `day` from astral's solar position model."""
    site = LocationInfo("court", "", timezone, latitude=latitude, longitude=longitude)
    try:
        return sunset(site.observer, date=day, tzinfo=ZoneInfo(timezone))
    except ValueError:
        # astral raises when the sun stays above or below the horizon all day
        return end_of_day(day, timezone)


SUNSET_MODELS: dict[str, SunsetEstimator] = {
    "simplified": estimate_sunset,
    "astral": precise_sunset,
}
