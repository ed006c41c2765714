"""Display helpers for route and weather values.

Inputs are in the units the providers deliver (Kelvin, meters, m/s,
seconds); outputs are short strings for US-facing summaries.
"""

from __future__ import annotations

import math
from datetime import date
from typing import Literal

MPS_TO_MPH = 2.237
METERS_TO_MILES = 0.000621371
KM_TO_MILES = 0.621371
FEET_PER_MILE = 5280

ICON_URL = "https://openweathermap.org/img/wn/{icon}@2x.png"


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from negative infinity."""
    return math.floor(value + 0.5)


def format_temperature(kelvin: float, unit: Literal["F", "C"] = "F") -> str:
    """Format a Kelvin temperature, e.g. '72°F'."""
    celsius = kelvin - 273.15
    if unit == "F":
        return f"{round_half_up(celsius * 9 / 5 + 32)}°F"
    return f"{round_half_up(celsius)}°C"


def _format_miles(miles: float) -> str:
    if miles < 1:
        return f"{round_half_up(miles * FEET_PER_MILE)} ft"
    return f"{miles:.1f} mi"


def format_distance(km: float) -> str:
    """Format a distance in kilometers as miles, or feet under one mile."""
    return _format_miles(km * KM_TO_MILES)


def format_visibility(meters: float) -> str:
    """Format a visibility in meters as miles, or feet under one mile."""
    return _format_miles(meters * METERS_TO_MILES)


def format_duration(seconds: float) -> str:
    """Format a duration, e.g. '5h 12m' or '45m'."""
    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"


def format_wind_speed(mps: float) -> str:
    """Format a wind speed in m/s as mph."""
    return f"{round_half_up(mps * MPS_TO_MPH)} mph"


def format_short_date(value: date) -> str:
    """Format a date as 'Jun 1'."""
    return f"{value:%b} {value.day}"


def weather_icon_url(icon: str) -> str:
    """URL of the OpenWeatherMap icon image for an icon code."""
    return ICON_URL.format(icon=icon)


def capitalize_first(text: str) -> str:
    return text[:1].upper() + text[1:]
