"""Upstream routing, geocoding and weather providers."""

from route_weather.providers.base import Provider
from route_weather.providers.nominatim import NominatimProvider
from route_weather.providers.openroute import DirectionsResult, OpenRouteServiceProvider
from route_weather.providers.openweather import OpenWeatherProvider

__all__ = [
    "Provider",
    "NominatimProvider",
    "DirectionsResult",
    "OpenRouteServiceProvider",
    "OpenWeatherProvider",
]
