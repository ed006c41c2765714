"""Driving hazard predicates over a single weather observation.

Thresholds are tuned for loaded trucks:

- wind of 30 mph or more (at one-decimal precision),
- visibility under 1 mile,
- thunderstorm/snow/sleet/extreme condition groups, or descriptions
  mentioning heavy, freezing, ice, blizzard, hail or torrential weather.
"""

from __future__ import annotations

from route_weather.formatting import METERS_TO_MILES, MPS_TO_MPH
from route_weather.models.weather import DEFAULT_VISIBILITY_M, WaypointWeather

SEVERE_MAIN_KEYWORDS = ("thunderstorm", "snow", "sleet", "extreme")
SEVERE_DESCRIPTION_KEYWORDS = ("heavy", "freezing", "ice", "blizzard", "hail", "torrential")

SEVERE_WIND_MPH = 30.0
SEVERE_VISIBILITY_MILES = 1.0


def is_severe_weather(main: str, description: str) -> bool:
    """Check a condition group and description for hazardous weather."""
    main = (main or "").lower()
    description = (description or "").lower()
    return any(keyword in main for keyword in SEVERE_MAIN_KEYWORDS) or any(
        keyword in description for keyword in SEVERE_DESCRIPTION_KEYWORDS
    )


def wind_mph(speed_ms: float) -> float:
    return speed_ms * MPS_TO_MPH


def visibility_miles(visibility_m: float | None) -> float:
    """Visibility in miles; missing or zero readings count as 10 km."""
    return (visibility_m or DEFAULT_VISIBILITY_M) * METERS_TO_MILES


def is_severe_wind(speed_ms: float) -> bool:
    """Check if wind speed reaches 30 mph at one-decimal precision.

    13.41 m/s converts to 29.998 mph, which reads as 30.0 mph and counts.
    """
    return round(wind_mph(speed_ms), 1) >= SEVERE_WIND_MPH


def is_severe_visibility(visibility_m: float | None) -> bool:
    """Check if visibility is below 1 mile."""
    return visibility_miles(visibility_m) < SEVERE_VISIBILITY_MILES


def has_severe_conditions(waypoint: WaypointWeather) -> bool:
    """Check a waypoint's current conditions (forecast is not considered)."""
    current = waypoint.current
    return (
        is_severe_weather(current.condition_main, current.condition_description)
        or is_severe_wind(current.wind.speed_ms)
        or is_severe_visibility(current.visibility_m)
    )
