"""Route weather exposure and shipment risk advisories."""

from route_weather.advisory.synthesizer import generate_advice
from route_weather.exceptions import (
    AddressNotFound,
    MissingCredentials,
    NetworkError,
    NoRouteFound,
    ProviderError,
    RouteProviderError,
    RouteWeatherError,
    WeatherFetchFailed,
)
from route_weather.pipeline import RouteWeatherPipeline, plan_route_weather

__version__ = "0.1.0"

__all__ = [
    "generate_advice",
    "plan_route_weather",
    "RouteWeatherPipeline",
    "AddressNotFound",
    "MissingCredentials",
    "NetworkError",
    "NoRouteFound",
    "ProviderError",
    "RouteProviderError",
    "RouteWeatherError",
    "WeatherFetchFailed",
]
