"""Organisation and court models.

OrgLocation = where an organisation's courts are (for sunset) and which timezone
its "HH:MM" configuration strings are written in.
ResourceConfig = an individual bookable court with its weekly hours.
OrgPolicies / CourtPolicyOverrides = booking policy, org-wide and per court.
"""

import enum
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date


class Weekday(enum.IntEnum):
    """Days of the week, numbered as date.weekday() (0=Mon)."""

    MON = 0
    TUE = 1
    WED = 2
    THU = 3
    FRI = 4
    SAT = 5
    SUN = 6

    @classmethod
    def of(cls, day: date) -> "Weekday":
        return cls(day.weekday())


@dataclass(frozen=True)
class OpenHours:
    open: str  # "HH:MM"
    close: str  # "HH:MM"


@dataclass(frozen=True)
class OrgLocation:
    latitude: float
    longitude: float
    timezone: str  # IANA name, e.g. "Europe/London"


@dataclass(frozen=True)
class OrgPolicies:
    booking_window_days: int = 14
    buffer_minutes: int = 0
    booking_intervals: int = 60
    sunset_cutoff_override: str | None = None


@dataclass(frozen=True)
class CourtPolicyOverrides:
    """Per-court policy. Any field left as None falls back to the organisation's."""

    booking_window_days: int | None = None
    buffer_minutes: int | None = None
    booking_intervals: int | None = None
    sunset_cutoff_override: str | None = None


@dataclass(frozen=True)
class ResourceConfig:
    """A bookable resource, typically a tennis court.

    weekly_open_hours may omit days; a missing day means the court is closed.
    """

    id: str
    has_lighting: bool = False
    weekly_open_hours: Mapping[Weekday, OpenHours] = field(default_factory=dict)
    sunset_cutoff_override: str | None = None
    policy_overrides: CourtPolicyOverrides | None = None

    def open_hours_on(self, day: date) -> OpenHours | None:
        """Opening hours for the weekday of `day`, or None when closed."""
        return self.weekly_open_hours.get(Weekday.of(day))

    def __repr__(self) -> str:
        return f"<ResourceConfig {self.id} lit={self.has_lighting}>"
