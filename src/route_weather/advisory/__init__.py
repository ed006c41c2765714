"""Severity classification and advisory synthesis."""

from route_weather.advisory.severity import (
    has_severe_conditions,
    is_severe_visibility,
    is_severe_weather,
    is_severe_wind,
)
from route_weather.advisory.synthesizer import (
    RouteExposure,
    assess_exposure,
    generate_advice,
)

__all__ = [
    "has_severe_conditions",
    "is_severe_visibility",
    "is_severe_weather",
    "is_severe_wind",
    "RouteExposure",
    "assess_exposure",
    "generate_advice",
]
