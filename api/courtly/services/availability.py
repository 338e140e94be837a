"""Availability grid for one court on one day.

Generates the day's slots and runs each through the booking rules, so a slot
is shown as available exactly when booking it would be accepted right now.
"""

from collections.abc import Sequence
from datetime import date, datetime
from zoneinfo import ZoneInfo

from courtly.models.booking import ExistingBooking, MaintenanceBlock
from courtly.models.organisation import OrgLocation, ResourceConfig
from courtly.services.booking_rules import validate_booking
from courtly.services.civil_time import format_clock
from courtly.services.operating_hours import generate_slots
from courtly.services.policy import EffectivePolicy
from courtly.services.sunset import SunsetEstimator, estimate_sunset


def build_availability(
    day: date,
    resource: ResourceConfig,
    policy: EffectivePolicy,
    existing_bookings: Sequence[ExistingBooking],
    blocks: Sequence[MaintenanceBlock],
    location: OrgLocation,
    coach_id: str | None = None,
    *,
    now: datetime | None = None,
    sunset_estimator: SunsetEstimator = estimate_sunset,
) -> list[dict]:
    """Return every slot on `day` with keys start_time, end_time, is_available.

    Slots that have already started are unavailable.
    """
    tz = location.timezone
    if now is None:
        now = datetime.now(ZoneInfo(tz))

    slots: list[dict] = []
    for slot in generate_slots(day, policy.booking_intervals, resource, tz):
        result = validate_booking(
            resource.id,
            slot,
            resource,
            policy.booking_window_days,
            policy.buffer_minutes,
            policy.sunset_cutoff_override,
            existing_bookings,
            blocks,
            location,
            coach_id,
            now=now,
            sunset_estimator=sunset_estimator,
        )
        slots.append(
            {
                "start_time": format_clock(slot.start, tz),
                "end_time": format_clock(slot.end, tz),
                "is_available": slot.start > now and result.valid,
            }
        )
    return slots
