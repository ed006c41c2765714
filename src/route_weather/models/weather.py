"""Weather observation and forecast models.

Units follow the OpenWeatherMap "standard" unit system, which is what the
provider returns when no `units` parameter is sent:

- Temperature: Kelvin
- Wind speed: meters per second (m/s)
- Pressure: hectopascals (hPa)
- Visibility: meters (m), capped at 10 km by the provider
- Humidity: percentage (0-100)
- Precipitation probability: fraction (0-1)
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from route_weather.formatting import MPS_TO_MPH
from route_weather.models.location import Location

# Visibility assumed when the provider omits it
DEFAULT_VISIBILITY_M = 10000.0


class WeatherCondition(BaseModel):
    """A provider weather condition (e.g. main="Rain", description="light rain")."""

    id: int | None = Field(default=None, description="Provider condition code")
    main: str = Field(default="", description="Condition group, e.g. 'Thunderstorm'")
    description: str = Field(default="", description="Condition within the group")
    icon: str | None = Field(default=None, description="Provider icon code, e.g. '10d'")


class Wind(BaseModel):
    """Wind information."""

    speed_ms: float = Field(default=0.0, ge=0, description="Wind speed in meters per second")
    direction_deg: float | None = Field(
        default=None, ge=0, le=360, description="Wind direction in degrees (0=N, 90=E)"
    )
    gust_ms: float | None = Field(
        default=None, ge=0, description="Wind gust speed in meters per second"
    )

    @property
    def speed_mph(self) -> float:
        """Wind speed in miles per hour."""
        return self.speed_ms * MPS_TO_MPH

    def direction_cardinal(self) -> str | None:
        """Get cardinal direction (N, NE, E, etc.)."""
        if self.direction_deg is None:
            return None
        directions = ["N", "NNE", "NE", "ENE", "E", "ESE", "SE", "SSE",
                      "S", "SSW", "SW", "WSW", "W", "WNW", "NW", "NNW"]
        index = round(self.direction_deg / 22.5) % 16
        return directions[index]


class WeatherObservation(BaseModel):
    """Weather conditions at a single point in time."""

    time: datetime = Field(..., description="Observation time (UTC)")
    conditions: list[WeatherCondition] = Field(default_factory=list)

    temperature_k: float | None = Field(default=None, description="Temperature in Kelvin")
    feels_like_k: float | None = Field(default=None, description="Feels-like temperature in Kelvin")
    humidity_percent: float | None = Field(
        default=None, ge=0, le=100, description="Relative humidity percentage"
    )
    pressure_hpa: float | None = Field(
        default=None, description="Atmospheric pressure in hPa"
    )
    wind: Wind = Field(default_factory=Wind)
    visibility_m: float | None = Field(
        default=None, ge=0, description="Visibility in meters"
    )

    @property
    def primary_condition(self) -> WeatherCondition | None:
        """The first (most significant) condition reported."""
        return self.conditions[0] if self.conditions else None

    @property
    def condition_main(self) -> str:
        condition = self.primary_condition
        return condition.main if condition else ""

    @property
    def condition_description(self) -> str:
        condition = self.primary_condition
        return condition.description if condition else ""

    @property
    def effective_visibility_m(self) -> float:
        """Visibility with missing or zero readings treated as unrestricted."""
        return self.visibility_m or DEFAULT_VISIBILITY_M


class ForecastEntry(WeatherObservation):
    """A single step of the multi-day forecast (typically 3 hours)."""

    precipitation_probability: float = Field(
        default=0.0, ge=0, le=1, description="Probability of precipitation (0-1)"
    )


class WaypointWeather(BaseModel):
    """Current conditions and windowed forecast for one named waypoint."""

    location: Location
    current: WeatherObservation
    forecast: list[ForecastEntry] = Field(default_factory=list)
