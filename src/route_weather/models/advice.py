"""Advisory and pipeline result models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

from route_weather.models.location import RouteData
from route_weather.models.weather import WaypointWeather


class AdviceSeverity(str, Enum):
    """Severity tier of a route advisory, ordered clear < minor < moderate < severe.

    MINOR is part of the scale but no current rule produces it.
    """

    CLEAR = "clear"
    MINOR = "minor"
    MODERATE = "moderate"
    SEVERE = "severe"


class WeatherAdvice(BaseModel):
    """A shipment-facing weather advisory for a route."""

    severity: AdviceSeverity = Field(..., description="Overall severity tier")
    message: str = Field(..., description="Human-readable advisory")
    details: list[str] = Field(
        default_factory=list, description="One line per triggering current observation"
    )


class RouteWeatherReport(BaseModel):
    """Route plus per-waypoint weather, as produced by the pipeline."""

    route: RouteData
    waypoints: list[WaypointWeather] = Field(default_factory=list)
