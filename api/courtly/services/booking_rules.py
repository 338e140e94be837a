"""Booking rules enforcement.

All booking validation logic lives here, separate from the route handlers.
Each rule returns a BookingViolation or None if the rule passes.
validate_booking() runs every rule in a fixed order and collects the violations,
so one call reports every reason a booking is refused.

Nothing here touches storage. Callers load the court, its bookings and blocks,
and must re-run validate_booking inside the transaction that writes the booking.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from zoneinfo import ZoneInfo

from courtly.models.booking import ExistingBooking, MaintenanceBlock, TimeInterval
from courtly.models.organisation import OrgLocation, ResourceConfig
from courtly.services.civil_time import format_clock, to_local
from courtly.services.conflicts import (
    has_block_conflict,
    has_booking_conflict,
    has_coach_conflict,
    respects_buffer,
)
from courtly.services.operating_hours import is_within_open_hours, resolve_cutoff
from courtly.services.sunset import SunsetEstimator, estimate_sunset

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BookingViolation:
    """A broken booking rule: a stable code plus the message shown to the member."""

    rule: str
    message: str


@dataclass(frozen=True)
class ValidationResult:
    violations: tuple[BookingViolation, ...] = field(default_factory=tuple)

    @property
    def valid(self) -> bool:
        return not self.violations

    @property
    def errors(self) -> list[str]:
        return [v.message for v in self.violations]


def validate_booking(
    resource_id: str,
    interval: TimeInterval,
    resource: ResourceConfig,
    booking_window_days: int,
    buffer_minutes: int,
    sunset_override: str | None,
    existing_bookings: Sequence[ExistingBooking],
    blocks: Sequence[MaintenanceBlock],
    location: OrgLocation,
    coach_id: str | None = None,
    exclude_id: str | None = None,
    *,
    now: datetime | None = None,
    sunset_estimator: SunsetEstimator = estimate_sunset,
) -> ValidationResult:
    """Run all booking rules and return the result (no violations = valid).

    `now` defaults to the current time in the organisation's timezone.
    """
    if now is None:
        now = datetime.now(ZoneInfo(location.timezone))

    checks = (
        check_interval_order(interval),
        check_advance_window(interval, booking_window_days, now),
        check_operating_hours(interval, resource, location),
        check_lighting_cutoff(interval, resource, sunset_override, location, sunset_estimator),
        check_court_conflict(resource_id, interval, existing_bookings, exclude_id),
        check_block_conflict(resource_id, interval, blocks),
        check_buffer(resource_id, interval, buffer_minutes, existing_bookings, exclude_id),
        check_coach_conflict(coach_id, interval, existing_bookings, exclude_id),
    )
    violations = tuple(v for v in checks if v is not None)

    if violations:
        logger.debug(
            "Booking on %s from %s to %s refused: %s",
            resource_id,
            interval.start.isoformat(),
            interval.end.isoformat(),
            ", ".join(v.rule for v in violations),
        )
    return ValidationResult(violations=violations)


def check_interval_order(interval: TimeInterval) -> BookingViolation | None:
    """End must come strictly after start."""
    if interval.end.astimezone(UTC) <= interval.start.astimezone(UTC):
        return BookingViolation("invalid_interval", "End time must be after start time")
    return None


def check_advance_window(interval: TimeInterval, booking_window_days: int, now: datetime) -> BookingViolation | None:
    """Booking cannot start more than booking_window_days from now."""
    if interval.start > now + timedelta(days=booking_window_days):
        return BookingViolation("advance_window", f"Cannot book more than {booking_window_days} days in advance")
    return None


def check_operating_hours(
    interval: TimeInterval, resource: ResourceConfig, location: OrgLocation
) -> BookingViolation | None:
    """Start and end must both fall within the court's opening hours. A closed day always fails."""
    tz = location.timezone
    if not (is_within_open_hours(interval.start, resource, tz) and is_within_open_hours(interval.end, resource, tz)):
        return BookingViolation("operating_hours", "Booking time is outside court operating hours")
    return None


def check_lighting_cutoff(
    interval: TimeInterval,
    resource: ResourceConfig,
    sunset_override: str | None,
    location: OrgLocation,
    sunset_estimator: SunsetEstimator = estimate_sunset,
) -> BookingViolation | None:
    """A court without lights cannot be booked past the cutoff on the start's local day."""
    day = to_local(interval.start, location.timezone).date()
    cutoff = resolve_cutoff(day, resource, sunset_override, location, sunset_estimator)
    if cutoff is not None and interval.end.astimezone(UTC) > cutoff.astimezone(UTC):
        return BookingViolation(
            "lighting_cutoff",
            f"Court without lights cannot be booked past {format_clock(cutoff, location.timezone)}",
        )
    return None


def check_court_conflict(
    resource_id: str,
    interval: TimeInterval,
    existing_bookings: Sequence[ExistingBooking],
    exclude_id: str | None = None,
) -> BookingViolation | None:
    """No two active bookings can overlap on the same court."""
    if has_booking_conflict(resource_id, interval, existing_bookings, exclude_id):
        return BookingViolation("court_conflict", "Time slot conflicts with an existing booking")
    return None


def check_block_conflict(
    resource_id: str, interval: TimeInterval, blocks: Sequence[MaintenanceBlock]
) -> BookingViolation | None:
    if has_block_conflict(resource_id, interval, blocks):
        return BookingViolation("block_conflict", "Time slot conflicts with a blocked period")
    return None


def check_buffer(
    resource_id: str,
    interval: TimeInterval,
    buffer_minutes: int,
    existing_bookings: Sequence[ExistingBooking],
    exclude_id: str | None = None,
) -> BookingViolation | None:
    if not respects_buffer(interval, resource_id, buffer_minutes, existing_bookings, exclude_id):
        return BookingViolation("buffer", f"Booking must respect {buffer_minutes}-minute buffer between slots")
    return None


def check_coach_conflict(
    coach_id: str | None,
    interval: TimeInterval,
    existing_bookings: Sequence[ExistingBooking],
    exclude_id: str | None = None,
) -> BookingViolation | None:
    """A coach cannot be on two courts at once."""
    if has_coach_conflict(coach_id, interval, existing_bookings, exclude_id):
        return BookingViolation("coach_conflict", "Coach is not available during this time")
    return None
