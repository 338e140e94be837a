"""All engine models, re-exported for callers."""

from courtly.models.booking import (
    BookingStatus,
    ExistingBooking,
    MaintenanceBlock,
    TimeInterval,
    is_active_for_conflict_check,
    is_confirmed,
)
from courtly.models.organisation import (
    CourtPolicyOverrides,
    OpenHours,
    OrgLocation,
    OrgPolicies,
    ResourceConfig,
    Weekday,
)

__all__ = [
    "TimeInterval",
    "BookingStatus",
    "ExistingBooking",
    "MaintenanceBlock",
    "is_active_for_conflict_check",
    "is_confirmed",
    "Weekday",
    "OpenHours",
    "OrgLocation",
    "OrgPolicies",
    "CourtPolicyOverrides",
    "ResourceConfig",
]
