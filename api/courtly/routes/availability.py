"""Availability route: the day's slots for one court, each marked bookable or not."""

from fastapi import APIRouter, HTTPException, status

from courtly.core.config import settings
from courtly.schemas import AvailabilityOut, AvailabilityRequest, SlotOut
from courtly.services.availability import build_availability
from courtly.services.civil_time import MalformedTimeString, format_clock
from courtly.services.operating_hours import resolve_cutoff
from courtly.services.policy import resolve_policy
from courtly.services.sunset import SUNSET_MODELS

router = APIRouter(prefix="/availability", tags=["availability"])


@router.post("", response_model=AvailabilityOut)
async def get_availability(body: AvailabilityRequest):
    resource = body.resource.to_domain()
    location = body.location.to_domain()
    policy = resolve_policy(body.policies.to_domain(), resource)
    estimator = SUNSET_MODELS[settings.sunset_model]

    try:
        slots = build_availability(
            body.date,
            resource,
            policy,
            body.bookings_domain(),
            body.blocks_domain(),
            location,
            body.coach_id,
            sunset_estimator=estimator,
        )
        cutoff = resolve_cutoff(body.date, resource, policy.sunset_cutoff_override, location, estimator)
    except MalformedTimeString as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    return AvailabilityOut(
        court_id=resource.id,
        date=body.date,
        slot_minutes=policy.booking_intervals,
        cutoff=format_clock(cutoff, location.timezone) if cutoff is not None else None,
        slots=[SlotOut(**s) for s in slots],
    )
