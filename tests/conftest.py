"""Pytest fixtures for route weather tests.

This module provides test fixtures that ensure:
1. No external API calls are made (every provider gets an httpx.MockTransport)
2. No wall-clock waiting (request pacing runs on a virtual clock)
3. Isolated test environment with controlled configuration
"""

import os
from datetime import datetime, timedelta, timezone
from typing import Any, Callable

import httpx
import pytest

# Set test environment BEFORE importing application modules
os.environ["OPENROUTE_API_KEY"] = "test-openroute-key"
os.environ["OPENWEATHER_API_KEY"] = "test-openweather-key"
os.environ.setdefault("NOMINATIM_USER_AGENT", "route-weather-tests/1.0")
os.environ.setdefault("LOG_LEVEL", "DEBUG")

from route_weather.models.location import Coordinates, Location
from route_weather.models.weather import (
    ForecastEntry,
    WaypointWeather,
    WeatherCondition,
    WeatherObservation,
    Wind,
)


# =============================================================================
# Test Isolation Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache():
    """Reset settings cache before each test to ensure clean state."""
    from route_weather.config import get_settings
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def anyio_backend():
    return "asyncio"


class VirtualClock:
    """Clock that advances instantly and records every wake-up."""

    def __init__(self, start: float = 0.0):
        self.current = start
        self.wakeups: list[float] = []

    def now(self) -> float:
        return self.current

    async def sleep_until(self, deadline: float) -> None:
        self.wakeups.append(deadline)
        self.current = max(self.current, deadline)


@pytest.fixture
def clock() -> VirtualClock:
    return VirtualClock()


Handler = Callable[[httpx.Request], httpx.Response]


def mock_client(handler: Handler) -> httpx.AsyncClient:
    """An AsyncClient whose requests are answered by `handler`."""
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


# =============================================================================
# Upstream payload builders
# =============================================================================


def owm_payload(
    main: str = "Clear",
    description: str = "clear sky",
    wind_speed: float = 3.0,
    visibility: float | None = 10000,
    dt: int = 1717243200,
    **extra: Any,
) -> dict[str, Any]:
    """An OpenWeatherMap current-conditions style payload."""
    payload: dict[str, Any] = {
        "weather": [{"id": 800, "main": main, "description": description, "icon": "01d"}],
        "main": {"temp": 295.15, "feels_like": 295.0, "pressure": 1012, "humidity": 50},
        "wind": {"speed": wind_speed, "deg": 180},
        "dt": dt,
        "name": "Somewhere",
    }
    if visibility is not None:
        payload["visibility"] = visibility
    payload.update(extra)
    return payload


def owm_forecast_payload(start: datetime, steps: int = 40, pop: float = 0.1) -> dict[str, Any]:
    """A 5 day / 3 hour forecast payload starting at `start`."""
    items = []
    for i in range(steps):
        item = owm_payload(dt=int((start + timedelta(hours=3 * i)).timestamp()))
        item["pop"] = pop
        items.append(item)
    return {"list": items}


# =============================================================================
# Model builders
# =============================================================================


def make_observation(
    main: str = "Clear",
    description: str = "clear sky",
    wind_speed_ms: float = 3.0,
    visibility_m: float | None = 10000.0,
    time: datetime | None = None,
) -> WeatherObservation:
    return WeatherObservation(
        time=time or datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc),
        conditions=[WeatherCondition(id=800, main=main, description=description, icon="01d")],
        temperature_k=295.15,
        wind=Wind(speed_ms=wind_speed_ms, direction_deg=180),
        visibility_m=visibility_m,
    )


def make_forecast_entry(
    time: datetime,
    main: str = "Clear",
    description: str = "clear sky",
    pop: float = 0.0,
    wind_speed_ms: float = 3.0,
    visibility_m: float | None = 10000.0,
) -> ForecastEntry:
    return ForecastEntry(
        time=time,
        conditions=[WeatherCondition(main=main, description=description)],
        wind=Wind(speed_ms=wind_speed_ms),
        visibility_m=visibility_m,
        precipitation_probability=pop,
    )


def make_waypoint(
    name: str | None = "Chicago",
    forecast: list[ForecastEntry] | None = None,
    **observation: Any,
) -> WaypointWeather:
    return WaypointWeather(
        location=Location(
            coordinates=Coordinates(latitude=41.8781, longitude=-87.6298), name=name
        ),
        current=make_observation(**observation),
        forecast=forecast or [],
    )


@pytest.fixture
def sample_coordinates() -> Coordinates:
    """Sample coordinates for Chicago."""
    return Coordinates(latitude=41.8781, longitude=-87.6298)


@pytest.fixture
def sample_location(sample_coordinates: Coordinates) -> Location:
    return Location(coordinates=sample_coordinates, name="Chicago")


@pytest.fixture
def forecast_series() -> list[ForecastEntry]:
    """Forty 3-hour forecast steps starting 2024-06-01 00:00 UTC."""
    start = datetime(2024, 6, 1, 0, 0, tzinfo=timezone.utc)
    return [make_forecast_entry(start + timedelta(hours=3 * i)) for i in range(40)]
