"""Pydantic schemas for API serialisation.

Request bodies carry everything the engine needs (court, location, policies and
the candidate bookings/blocks), and convert to the engine's models with
to_domain().
"""

from datetime import date
from typing import Literal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import AwareDatetime, BaseModel, Field, field_validator

from courtly.core.config import settings
from courtly.models import (
    BookingStatus,
    CourtPolicyOverrides,
    ExistingBooking,
    MaintenanceBlock,
    OpenHours,
    OrgLocation,
    OrgPolicies,
    ResourceConfig,
    TimeInterval,
    Weekday,
)

CLOCK_PATTERN = r"^\d{2}:\d{2}$"

DayKey = Literal["mon", "tue", "wed", "thu", "fri", "sat", "sun"]

_WEEKDAYS: dict[str, Weekday] = {
    "mon": Weekday.MON,
    "tue": Weekday.TUE,
    "wed": Weekday.WED,
    "thu": Weekday.THU,
    "fri": Weekday.FRI,
    "sat": Weekday.SAT,
    "sun": Weekday.SUN,
}

# --- Organisation ---


class LocationIn(BaseModel):
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    timezone: str

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown timezone {value!r}") from exc
        return value

    def to_domain(self) -> OrgLocation:
        return OrgLocation(latitude=self.latitude, longitude=self.longitude, timezone=self.timezone)


class PoliciesIn(BaseModel):
    booking_window_days: int = Field(default_factory=lambda: settings.default_booking_window_days, ge=0)
    buffer_minutes: int = Field(default_factory=lambda: settings.default_buffer_minutes, ge=0)
    booking_intervals: int = Field(default_factory=lambda: settings.default_slot_minutes, gt=0)
    sunset_cutoff_override: str | None = Field(default=None, pattern=CLOCK_PATTERN)

    def to_domain(self) -> OrgPolicies:
        return OrgPolicies(**self.model_dump())


# --- Court ---


class OpenHoursIn(BaseModel):
    open: str = Field(pattern=CLOCK_PATTERN)
    close: str = Field(pattern=CLOCK_PATTERN)


class CourtPolicyOverridesIn(BaseModel):
    booking_window_days: int | None = Field(default=None, ge=0)
    buffer_minutes: int | None = Field(default=None, ge=0)
    booking_intervals: int | None = Field(default=None, gt=0)
    sunset_cutoff_override: str | None = Field(default=None, pattern=CLOCK_PATTERN)


class ResourceIn(BaseModel):
    id: str
    has_lighting: bool = False
    open_hours: dict[DayKey, OpenHoursIn] = Field(default_factory=dict)
    sunset_cutoff_override: str | None = Field(default=None, pattern=CLOCK_PATTERN)
    policy_overrides: CourtPolicyOverridesIn | None = None

    def to_domain(self) -> ResourceConfig:
        overrides = None
        if self.policy_overrides is not None:
            overrides = CourtPolicyOverrides(**self.policy_overrides.model_dump())
        return ResourceConfig(
            id=self.id,
            has_lighting=self.has_lighting,
            weekly_open_hours={_WEEKDAYS[day]: OpenHours(h.open, h.close) for day, h in self.open_hours.items()},
            sunset_cutoff_override=self.sunset_cutoff_override,
            policy_overrides=overrides,
        )


# --- Booking ---


class ExistingBookingIn(BaseModel):
    id: str
    resource_id: str
    start: AwareDatetime
    end: AwareDatetime
    status: BookingStatus
    coach_id: str | None = None

    def to_domain(self) -> ExistingBooking:
        return ExistingBooking(
            id=self.id,
            resource_id=self.resource_id,
            interval=TimeInterval(self.start, self.end),
            status=self.status,
            coach_id=self.coach_id,
        )


class BlockIn(BaseModel):
    resource_ids: list[str]
    start: AwareDatetime
    end: AwareDatetime
    reason: str = ""
    id: str | None = None

    def to_domain(self) -> MaintenanceBlock:
        return MaintenanceBlock(
            resource_ids=frozenset(self.resource_ids),
            interval=TimeInterval(self.start, self.end),
            reason=self.reason,
            id=self.id,
        )


class _CourtContext(BaseModel):
    resource: ResourceIn
    location: LocationIn
    policies: PoliciesIn = Field(default_factory=PoliciesIn)
    coach_id: str | None = None
    existing_bookings: list[ExistingBookingIn] = Field(default_factory=list)
    blocks: list[BlockIn] = Field(default_factory=list)

    def bookings_domain(self) -> list[ExistingBooking]:
        return [b.to_domain() for b in self.existing_bookings]

    def blocks_domain(self) -> list[MaintenanceBlock]:
        return [b.to_domain() for b in self.blocks]


class BookingCheckRequest(_CourtContext):
    start: AwareDatetime
    end: AwareDatetime
    exclude_id: str | None = None

    def interval(self) -> TimeInterval:
        return TimeInterval(self.start, self.end)


class ViolationOut(BaseModel):
    rule: str
    message: str


class ValidationOut(BaseModel):
    valid: bool
    errors: list[str]
    violations: list[ViolationOut]


class ValidationFailedOut(BaseModel):
    success: bool = False
    error: str
    errorCode: str = "VALIDATION_FAILED"
    details: list[ViolationOut]


# --- Availability ---


class AvailabilityRequest(_CourtContext):
    date: date


class SlotOut(BaseModel):
    start_time: str  # "HH:MM"
    end_time: str  # "HH:MM"
    is_available: bool


class AvailabilityOut(BaseModel):
    court_id: str
    date: date
    slot_minutes: int
    cutoff: str | None  # "HH:MM", None for floodlit courts
    slots: list[SlotOut]
