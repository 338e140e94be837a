"""Effective booking policy for a court.

Organisation policies set the defaults; a court can override any of them through
its policy_overrides. A sunset cutoff set directly on the court wins over both.
"""

from dataclasses import dataclass

from courtly.models.organisation import CourtPolicyOverrides, OrgPolicies, ResourceConfig


@dataclass(frozen=True)
class EffectivePolicy:
    booking_window_days: int
    buffer_minutes: int
    booking_intervals: int
    sunset_cutoff_override: str | None


def _pick(override, default):
    return default if override is None else override


def resolve_policy(org_policies: OrgPolicies, resource: ResourceConfig) -> EffectivePolicy:
    """Merge court-level overrides over the organisation's policies."""
    overrides = resource.policy_overrides or CourtPolicyOverrides()
    cutoff = (
        resource.sunset_cutoff_override
        or overrides.sunset_cutoff_override
        or org_policies.sunset_cutoff_override
    )
    return EffectivePolicy(
        booking_window_days=_pick(overrides.booking_window_days, org_policies.booking_window_days),
        buffer_minutes=_pick(overrides.buffer_minutes, org_policies.buffer_minutes),
        booking_intervals=_pick(overrides.booking_intervals, org_policies.booking_intervals),
        sunset_cutoff_override=cutoff,
    )
