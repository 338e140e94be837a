"""Interval overlap and conflict detection.

Every check here is a scan of a caller-supplied candidate list against one
proposed interval using half-open [start, end) semantics, so a booking ending
at 11:00 and another starting at 11:00 do not collide.
"""

from collections.abc import Iterable
from datetime import UTC, datetime, timedelta

from courtly.models.booking import (
    ExistingBooking,
    MaintenanceBlock,
    TimeInterval,
    is_active_for_conflict_check,
    is_confirmed,
)


def _utc(instant: datetime) -> datetime:
    return instant.astimezone(UTC)


def overlaps(a: TimeInterval, b: TimeInterval) -> bool:
    """True if two half-open intervals intersect."""
    return _utc(a.start) < _utc(b.end) and _utc(a.end) > _utc(b.start)


def _others(bookings: Iterable[ExistingBooking], exclude_id: str | None) -> Iterable[ExistingBooking]:
    """Skip the booking being edited when updating in place."""
    return (b for b in bookings if exclude_id is None or b.id != exclude_id)


def has_booking_conflict(
    resource_id: str,
    interval: TimeInterval,
    existing_bookings: Iterable[ExistingBooking],
    exclude_id: str | None = None,
) -> bool:
    """Any active booking on the same court overlapping the interval."""
    return any(
        overlaps(interval, b.interval)
        for b in _others(existing_bookings, exclude_id)
        if b.resource_id == resource_id and is_active_for_conflict_check(b.status)
    )


def has_block_conflict(resource_id: str, interval: TimeInterval, blocks: Iterable[MaintenanceBlock]) -> bool:
    """Any maintenance block covering this court and overlapping the interval."""
    return any(overlaps(interval, block.interval) for block in blocks if resource_id in block.resource_ids)


def has_coach_conflict(
    coach_id: str | None,
    interval: TimeInterval,
    existing_bookings: Iterable[ExistingBooking],
    exclude_id: str | None = None,
) -> bool:
    """Any active booking with the same coach overlapping the interval, on any court."""
    if coach_id is None:
        return False
    return any(
        overlaps(interval, b.interval)
        for b in _others(existing_bookings, exclude_id)
        if b.coach_id == coach_id and is_active_for_conflict_check(b.status)
    )


def respects_buffer(
    interval: TimeInterval,
    resource_id: str,
    buffer_minutes: int,
    existing_bookings: Iterable[ExistingBooking],
    exclude_id: str | None = None,
) -> bool:
    """Check the proposed interval keeps `buffer_minutes` clear of confirmed bookings on the court.

    Violated when the proposed start lands in [existing end, existing end + buffer)
    or the proposed end lands in (existing start - buffer, existing start].
    Pending bookings are not considered.
    """
    if buffer_minutes == 0:
        return True
    buffer = timedelta(minutes=buffer_minutes)
    start, end = _utc(interval.start), _utc(interval.end)

    for b in _others(existing_bookings, exclude_id):
        if b.resource_id != resource_id or not is_confirmed(b.status):
            continue
        # Buffer bounds in UTC: elapsed minutes, not wall-clock, across a DST change
        booked_start, booked_end = _utc(b.interval.start), _utc(b.interval.end)
        if booked_end <= start < booked_end + buffer:
            return False
        if booked_start - buffer < end <= booked_start:
            return False
    return True
