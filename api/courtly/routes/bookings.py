"""Booking validation routes.

Stateless: the caller posts the court, its policies and the bookings/blocks it
has already loaded, and gets the engine's verdict back. Persisting a booking
(and re-checking inside that transaction) stays with the caller.
"""

import logging

from fastapi import APIRouter, HTTPException, Response, status
from fastapi.responses import JSONResponse

from courtly.core.config import settings
from courtly.schemas import BookingCheckRequest, ValidationFailedOut, ValidationOut, ViolationOut
from courtly.services.booking_rules import ValidationResult, validate_booking
from courtly.services.civil_time import MalformedTimeString
from courtly.services.policy import resolve_policy
from courtly.services.sunset import SUNSET_MODELS

router = APIRouter(prefix="/bookings", tags=["bookings"])

logger = logging.getLogger(__name__)


def _run_validation(body: BookingCheckRequest) -> ValidationResult:
    resource = body.resource.to_domain()
    policy = resolve_policy(body.policies.to_domain(), resource)
    try:
        return validate_booking(
            resource.id,
            body.interval(),
            resource,
            policy.booking_window_days,
            policy.buffer_minutes,
            policy.sunset_cutoff_override,
            body.bookings_domain(),
            body.blocks_domain(),
            body.location.to_domain(),
            body.coach_id,
            body.exclude_id,
            sunset_estimator=SUNSET_MODELS[settings.sunset_model],
        )
    except MalformedTimeString as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


def _violations_out(result: ValidationResult) -> list[ViolationOut]:
    return [ViolationOut(rule=v.rule, message=v.message) for v in result.violations]


@router.post("/validate", response_model=ValidationOut)
async def validate(body: BookingCheckRequest):
    """Report every rule the proposed booking breaks. Always 200."""
    result = _run_validation(body)
    return ValidationOut(valid=result.valid, errors=result.errors, violations=_violations_out(result))


@router.post(
    "/check",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={422: {"model": ValidationFailedOut}},
)
async def check(body: BookingCheckRequest):
    """204 when the booking may be written, 422 with the reasons otherwise."""
    result = _run_validation(body)
    if result.valid:
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    logger.info("Rejected booking on court %s: %s", body.resource.id, "; ".join(result.errors))
    out = ValidationFailedOut(error="; ".join(result.errors), details=_violations_out(result))
    return JSONResponse(status_code=422, content=out.model_dump())
