"""Booking-side models consumed by the validation engine.

A booking reserves a resource (court) for an interval. A maintenance block takes
one or more courts out of service for an interval. Both are loaded by the calling
layer and handed to the engine read-only.
"""

import enum
from dataclasses import dataclass
from datetime import datetime


class BookingStatus(enum.StrEnum):
    PENDING_PAYMENT = "pending_payment"
    CONFIRMED = "confirmed"
    CANCELED = "canceled"
    REFUNDED = "refunded"


@dataclass(frozen=True)
class TimeInterval:
    """A half-open [start, end) range of timezone-aware instants.

    start < end is not enforced here; validate_booking reports reversed intervals.
    """

    start: datetime
    end: datetime


@dataclass(frozen=True)
class ExistingBooking:
    id: str
    resource_id: str
    interval: TimeInterval
    status: BookingStatus
    coach_id: str | None = None

    def __repr__(self) -> str:
        return f"<ExistingBooking {self.id} {self.interval.start}-{self.interval.end} resource={self.resource_id}>"


@dataclass(frozen=True)
class MaintenanceBlock:
    """A closure of one or more courts. Blocks have no status: always active."""

    resource_ids: frozenset[str]
    interval: TimeInterval
    reason: str = ""
    id: str | None = None


def is_active_for_conflict_check(status: BookingStatus) -> bool:
    """Bookings that hold their slot: paid, or awaiting payment."""
    return status in (BookingStatus.CONFIRMED, BookingStatus.PENDING_PAYMENT)


def is_confirmed(status: BookingStatus) -> bool:
    """Only confirmed bookings take part in buffer spacing."""
    return status == BookingStatus.CONFIRMED
