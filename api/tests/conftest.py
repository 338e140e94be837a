"""Shared test fixtures."""

import pytest
from httpx import ASGITransport, AsyncClient

from courtly.main import app
from courtly.models import OpenHours, OrgLocation, ResourceConfig, Weekday


@pytest.fixture
async def client():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def london():
    return OrgLocation(latitude=51.545, longitude=-0.056, timezone="Europe/London")


@pytest.fixture
def dark_court():
    """Unlit court, open 08:00-20:00 on Mondays only."""
    return ResourceConfig(
        id="court-1",
        has_lighting=False,
        weekly_open_hours={Weekday.MON: OpenHours("08:00", "20:00")},
    )


@pytest.fixture
def lit_court():
    """Floodlit court, open 07:00-21:00 every day."""
    return ResourceConfig(
        id="court-2",
        has_lighting=True,
        weekly_open_hours={day: OpenHours("07:00", "21:00") for day in Weekday},
    )
