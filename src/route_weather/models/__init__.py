"""Domain models for route weather advisories."""

from route_weather.models.location import Coordinates, Location, RoutePoint, RouteData
from route_weather.models.weather import (
    WeatherCondition,
    Wind,
    WeatherObservation,
    ForecastEntry,
    WaypointWeather,
)
from route_weather.models.advice import (
    AdviceSeverity,
    WeatherAdvice,
    RouteWeatherReport,
)

__all__ = [
    # Location
    "Coordinates",
    "Location",
    "RoutePoint",
    "RouteData",
    # Weather
    "WeatherCondition",
    "Wind",
    "WeatherObservation",
    "ForecastEntry",
    "WaypointWeather",
    # Advice
    "AdviceSeverity",
    "WeatherAdvice",
    "RouteWeatherReport",
]
