"""API tests: health, booking validation, booking check, availability."""

from datetime import date, datetime, time, timedelta
from unittest.mock import patch
from zoneinfo import ZoneInfo

import pytest

from courtly.core.config import settings

LONDON_TZ = ZoneInfo("Europe/London")

ALL_WEEK = {day: {"open": "07:00", "close": "21:00"} for day in ("mon", "tue", "wed", "thu", "fri", "sat", "sun")}


def _future_day(days_ahead: int = 3) -> date:
    return date.today() + timedelta(days=days_ahead)


def _iso(day: date, hour: int, minute: int = 0) -> str:
    return datetime.combine(day, time(hour, minute), tzinfo=LONDON_TZ).isoformat()


def _body(day: date, start_hour: int = 10, end_hour: int = 11, **overrides) -> dict:
    body = {
        "resource": {"id": "court-1", "has_lighting": True, "open_hours": ALL_WEEK},
        "location": {"latitude": 51.545, "longitude": -0.056, "timezone": "Europe/London"},
        "policies": {"booking_window_days": 14, "buffer_minutes": 0},
        "start": _iso(day, start_hour),
        "end": _iso(day, end_hour),
    }
    body.update(overrides)
    return body


def _existing(day: date, start_hour: int, end_hour: int, **fields) -> dict:
    booking = {
        "id": "b1",
        "resource_id": "court-1",
        "start": _iso(day, start_hour),
        "end": _iso(day, end_hour),
        "status": "confirmed",
    }
    booking.update(fields)
    return booking


@pytest.mark.asyncio
async def test_health(client):
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


# ---------------------------------------------------------------------------
# POST /bookings/validate
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_validate_ok(client):
    resp = await client.post("/api/v1/bookings/validate", json=_body(_future_day()))
    assert resp.status_code == 200
    assert resp.json() == {"valid": True, "errors": [], "violations": []}


@pytest.mark.asyncio
async def test_validate_conflict(client):
    day = _future_day()
    body = _body(day, existing_bookings=[_existing(day, 10, 11)])
    resp = await client.post("/api/v1/bookings/validate", json=body)
    assert resp.status_code == 200
    data = resp.json()
    assert data["valid"] is False
    assert data["errors"] == ["Time slot conflicts with an existing booking"]
    assert data["violations"] == [{"rule": "court_conflict", "message": "Time slot conflicts with an existing booking"}]


@pytest.mark.asyncio
async def test_validate_canceled_booking_does_not_conflict(client):
    day = _future_day()
    body = _body(day, existing_bookings=[_existing(day, 10, 11, status="canceled")])
    resp = await client.post("/api/v1/bookings/validate", json=body)
    assert resp.json()["valid"] is True


@pytest.mark.asyncio
async def test_validate_block(client):
    day = _future_day()
    block = {"resource_ids": ["court-1", "court-2"], "start": _iso(day, 9), "end": _iso(day, 12), "reason": "Event"}
    resp = await client.post("/api/v1/bookings/validate", json=_body(day, blocks=[block]))
    assert resp.json()["errors"] == ["Time slot conflicts with a blocked period"]


@pytest.mark.asyncio
async def test_validate_court_policy_override_applies(client):
    day = _future_day()
    body = _body(day, start_hour=9, end_hour=10, existing_bookings=[_existing(day, 10, 11)])
    body["resource"]["policy_overrides"] = {"buffer_minutes": 30}
    resp = await client.post("/api/v1/bookings/validate", json=body)
    assert resp.json()["errors"] == ["Booking must respect 30-minute buffer between slots"]


@pytest.mark.asyncio
async def test_validate_dark_court_override(client):
    day = _future_day()
    body = _body(day, start_hour=17, end_hour=19)
    body["resource"] = {"id": "court-1", "has_lighting": False, "open_hours": ALL_WEEK}
    body["policies"]["sunset_cutoff_override"] = "18:00"
    resp = await client.post("/api/v1/bookings/validate", json=body)
    assert resp.json()["errors"] == ["Court without lights cannot be booked past 18:00"]


@pytest.mark.asyncio
async def test_validate_closed_day(client):
    day = _future_day()
    body = _body(day)
    body["resource"]["open_hours"] = {}
    resp = await client.post("/api/v1/bookings/validate", json=body)
    assert resp.json()["errors"] == ["Booking time is outside court operating hours"]


@pytest.mark.asyncio
async def test_validate_coach_conflict_other_court(client):
    day = _future_day()
    other = _existing(day, 10, 11, resource_id="court-9", coach_id="coach-1")
    body = _body(day, coach_id="coach-1", existing_bookings=[other])
    resp = await client.post("/api/v1/bookings/validate", json=body)
    assert resp.json()["errors"] == ["Coach is not available during this time"]


@pytest.mark.asyncio
async def test_validate_uses_configured_sunset_model(client):
    day = _future_day()
    body = _body(day, start_hour=10, end_hour=11)
    body["resource"]["has_lighting"] = False
    sentinel = datetime.combine(day, time(10, 30), tzinfo=LONDON_TZ)
    with (
        patch.object(settings, "sunset_model", "astral"),
        patch.dict("courtly.services.sunset.SUNSET_MODELS", {"astral": lambda *args: sentinel}),
    ):
        resp = await client.post("/api/v1/bookings/validate", json=body)
    assert resp.json()["errors"] == ["Court without lights cannot be booked past 10:30"]


@pytest.mark.asyncio
async def test_validate_malformed_config_time(client):
    day = _future_day()
    body = _body(day)
    body["resource"]["open_hours"] = {key: {"open": "25:00", "close": "26:00"} for key in ALL_WEEK}
    resp = await client.post("/api/v1/bookings/validate", json=body)
    assert resp.status_code == 400
    assert "Malformed time string" in resp.json()["detail"]


@pytest.mark.asyncio
async def test_validate_rejects_bad_input(client):
    day = _future_day()

    body = _body(day)
    body["location"]["timezone"] = "Mars/Olympus_Mons"
    resp = await client.post("/api/v1/bookings/validate", json=body)
    assert resp.status_code == 422

    body = _body(day)
    body["location"]["latitude"] = 123
    resp = await client.post("/api/v1/bookings/validate", json=body)
    assert resp.status_code == 422

    body = _body(day)
    body["start"] = datetime.combine(day, time(10, 0)).isoformat()  # naive
    resp = await client.post("/api/v1/bookings/validate", json=body)
    assert resp.status_code == 422

    body = _body(day)
    body["resource"]["sunset_cutoff_override"] = "6pm"
    resp = await client.post("/api/v1/bookings/validate", json=body)
    assert resp.status_code == 422

    body = _body(day)
    body["policies"]["buffer_minutes"] = -5
    resp = await client.post("/api/v1/bookings/validate", json=body)
    assert resp.status_code == 422


# ---------------------------------------------------------------------------
# POST /bookings/check
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_check_ok_returns_204(client):
    resp = await client.post("/api/v1/bookings/check", json=_body(_future_day()))
    assert resp.status_code == 204


@pytest.mark.asyncio
async def test_check_failure_body(client):
    day = _future_day()
    body = _body(day, start_hour=11, end_hour=10, existing_bookings=[_existing(day, 9, 12)])
    resp = await client.post("/api/v1/bookings/check", json=body)
    assert resp.status_code == 422
    data = resp.json()
    assert data["success"] is False
    assert data["errorCode"] == "VALIDATION_FAILED"
    assert data["error"] == "End time must be after start time; Time slot conflicts with an existing booking"
    assert [d["rule"] for d in data["details"]] == ["invalid_interval", "court_conflict"]


@pytest.mark.asyncio
async def test_check_edit_in_place(client):
    day = _future_day()
    body = _body(day, start_hour=10, end_hour=12, existing_bookings=[_existing(day, 10, 11)], exclude_id="b1")
    resp = await client.post("/api/v1/bookings/check", json=body)
    assert resp.status_code == 204


# ---------------------------------------------------------------------------
# POST /availability
# ---------------------------------------------------------------------------


def _availability_body(day: date, **overrides) -> dict:
    body = _body(day, **overrides)
    del body["start"], body["end"]
    body["date"] = day.isoformat()
    return body


@pytest.mark.asyncio
async def test_availability_lit_court(client):
    day = _future_day(30)
    resp = await client.post("/api/v1/availability", json=_availability_body(day, policies={"booking_window_days": 60}))
    assert resp.status_code == 200
    data = resp.json()
    assert data["court_id"] == "court-1"
    assert data["date"] == day.isoformat()
    assert data["cutoff"] is None
    assert data["slot_minutes"] == 60
    assert len(data["slots"]) == 14
    assert all(s["is_available"] for s in data["slots"])


@pytest.mark.asyncio
async def test_availability_beyond_window(client):
    day = _future_day(30)
    resp = await client.post("/api/v1/availability", json=_availability_body(day))
    assert len(resp.json()["slots"]) == 14
    assert not any(s["is_available"] for s in resp.json()["slots"])


@pytest.mark.asyncio
async def test_availability_with_booking(client):
    day = _future_day()
    body = _availability_body(day, existing_bookings=[_existing(day, 14, 16)])
    resp = await client.post("/api/v1/availability", json=body)
    slot_map = {s["start_time"]: s["is_available"] for s in resp.json()["slots"]}
    assert slot_map["14:00"] is False
    assert slot_map["15:00"] is False
    assert slot_map["13:00"] is True
    assert slot_map["16:00"] is True


@pytest.mark.asyncio
async def test_availability_half_hour_slots(client):
    day = _future_day()
    body = _availability_body(day)
    body["resource"]["policy_overrides"] = {"booking_intervals": 30}
    resp = await client.post("/api/v1/availability", json=body)
    data = resp.json()
    assert data["slot_minutes"] == 30
    assert len(data["slots"]) == 28


@pytest.mark.asyncio
async def test_availability_dark_court_cutoff(client):
    day = _future_day()
    body = _availability_body(day)
    body["resource"]["has_lighting"] = False
    body["resource"]["sunset_cutoff_override"] = "18:00"
    resp = await client.post("/api/v1/availability", json=body)
    data = resp.json()
    assert data["cutoff"] == "18:00"
    slot_map = {s["start_time"]: s["is_available"] for s in data["slots"]}
    assert slot_map["17:00"] is True
    assert slot_map["18:00"] is False


@pytest.mark.asyncio
async def test_availability_closed_day(client):
    day = _future_day()
    body = _availability_body(day)
    body["resource"]["open_hours"] = {}
    resp = await client.post("/api/v1/availability", json=body)
    assert resp.status_code == 200
    assert resp.json()["slots"] == []


@pytest.mark.asyncio
async def test_validate_zero_day_window_accepted(client):
    body = _body(_future_day(), policies={"booking_window_days": 0})
    resp = await client.post("/api/v1/bookings/validate", json=body)
    assert resp.status_code == 200
    assert resp.json()["errors"] == ["Cannot book more than 0 days in advance"]


@pytest.mark.asyncio
async def test_validate_negative_window_rejected(client):
    body = _body(_future_day(), policies={"booking_window_days": -1})
    resp = await client.post("/api/v1/bookings/validate", json=body)
    assert resp.status_code == 422
