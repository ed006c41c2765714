"""Route-level weather advisory synthesis.

`generate_advice` folds per-waypoint weather into a single tiered message
for the shipment's customer. It performs no I/O and is deterministic for a
given input.

## Tier Rules (first match wins)

| Tier | Trigger |
|------|---------|
| severe | any severe weather, OR max wind > 50 mph, OR min visibility < 0.25 mi |
| moderate | any severe wind (>= 30.0 mph) or severe visibility (< 1 mi) |
| clear | otherwise |

`minor` exists on the severity scale but is never produced.

## Inputs Considered
- Current conditions at every waypoint feed all three categories, the
  running maximum wind and the running minimum visibility.
- The first eight forecast entries (about 24 hours) can add a location to
  the severe weather list when precipitation probability exceeds 60%.
  Forecast entries never affect wind or visibility aggregates.

## Ties
The worst wind and worst visibility locations are the first waypoint, in
route order, holding the extreme value.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date

from route_weather.advisory.severity import (
    is_severe_visibility,
    is_severe_weather,
    is_severe_wind,
    visibility_miles,
    wind_mph,
)
from route_weather.formatting import format_short_date, round_half_up
from route_weather.models.advice import AdviceSeverity, WeatherAdvice
from route_weather.models.weather import WaypointWeather

FORECAST_LOOKAHEAD_ENTRIES = 8
FORECAST_PROBABILITY_THRESHOLD = 0.6
EXTREME_WIND_MPH = 50.0
EXTREME_VISIBILITY_MILES = 0.25

SEVERE_PREFIX = "SEVERE WEATHER ALERT: "
SEVERE_RECOMMENDATION = (
    "We recommend delaying departure or rerouting. "
    "Please contact us to discuss alternative arrangements."
)
MODERATE_PREFIX = "MODERATE WEATHER CONDITIONS: "
MODERATE_STATEMENT = (
    "Delays may be possible. We will monitor conditions and update you if needed."
)
CLEAR_MESSAGE = (
    "CLEAR CONDITIONS: No severe weather conditions detected along the route. "
    "Safe driving conditions expected with on-time delivery likely."
)


@dataclass
class RouteExposure:
    """Hazards collected across all waypoints of a route."""

    details: list[str] = field(default_factory=list)
    weather_locations: list[tuple[str, str]] = field(default_factory=list)
    wind_locations: list[tuple[str, float]] = field(default_factory=list)
    visibility_locations: list[tuple[str, float]] = field(default_factory=list)
    max_wind_mph: float = 0.0
    min_visibility_miles: float = math.inf

    @property
    def has_severe_weather(self) -> bool:
        return bool(self.weather_locations)

    @property
    def has_high_winds(self) -> bool:
        return bool(self.wind_locations)

    @property
    def has_low_visibility(self) -> bool:
        return bool(self.visibility_locations)

    def worst_wind(self) -> tuple[str, float]:
        # max() keeps the first of equal values
        return max(self.wind_locations, key=lambda item: item[1])

    def worst_visibility(self) -> tuple[str, float]:
        return min(self.visibility_locations, key=lambda item: item[1])

    def is_severe(self) -> bool:
        return (
            self.has_severe_weather
            or (self.has_high_winds and self.max_wind_mph > EXTREME_WIND_MPH)
            or (self.has_low_visibility and self.min_visibility_miles < EXTREME_VISIBILITY_MILES)
        )

    def is_moderate(self) -> bool:
        return self.has_severe_weather or self.has_high_winds or self.has_low_visibility


def assess_exposure(waypoints: Sequence[WaypointWeather]) -> RouteExposure:
    """Classify every waypoint and collect the hazards found."""
    exposure = RouteExposure()

    for waypoint in waypoints:
        name = waypoint.location.name or "location"
        current = waypoint.current
        description = current.condition_description

        if is_severe_weather(current.condition_main, description):
            exposure.weather_locations.append((name, description))
            exposure.details.append(f"Severe weather: {description} at {name}")

        speed_mph = wind_mph(current.wind.speed_ms)
        exposure.max_wind_mph = max(exposure.max_wind_mph, speed_mph)
        if is_severe_wind(current.wind.speed_ms):
            exposure.wind_locations.append((name, speed_mph))
            exposure.details.append(f"High winds: {round_half_up(speed_mph)} mph at {name}")

        miles = visibility_miles(current.visibility_m)
        exposure.min_visibility_miles = min(exposure.min_visibility_miles, miles)
        if is_severe_visibility(current.visibility_m):
            exposure.visibility_locations.append((name, miles))
            exposure.details.append(f"Low visibility: {miles:.1f} mi at {name}")

        for entry in waypoint.forecast[:FORECAST_LOOKAHEAD_ENTRIES]:
            if entry.precipitation_probability <= FORECAST_PROBABILITY_THRESHOLD:
                continue
            if not is_severe_weather(entry.condition_main, entry.condition_description):
                continue
            if any(listed == name for listed, _ in exposure.weather_locations):
                continue
            exposure.weather_locations.append((name, entry.condition_description))

    return exposure


def _severe_message(exposure: RouteExposure) -> str:
    alerts: list[str] = []
    if exposure.has_severe_weather:
        locations = ", ".join(
            f"{name} ({condition})" for name, condition in exposure.weather_locations[:3]
        )
        alerts.append(f"Severe weather conditions at {locations}")
    if exposure.max_wind_mph > EXTREME_WIND_MPH:
        name, _ = exposure.worst_wind()
        alerts.append(
            f"Extremely high winds ({round_half_up(exposure.max_wind_mph)} mph) at {name}"
        )
    if exposure.min_visibility_miles < EXTREME_VISIBILITY_MILES:
        name, _ = exposure.worst_visibility()
        alerts.append(
            f"Very low visibility ({exposure.min_visibility_miles:.1f} mi) at {name}"
        )
    return SEVERE_PREFIX + ". ".join(alerts) + ". " + SEVERE_RECOMMENDATION


def _moderate_message(exposure: RouteExposure) -> str:
    conditions: list[str] = []
    if exposure.has_severe_weather:
        names = " and ".join(name for name, _ in exposure.weather_locations[:2])
        conditions.append(f"severe weather conditions at {names}")
    if exposure.has_high_winds:
        name, speed = exposure.worst_wind()
        conditions.append(f"high winds ({round_half_up(speed)} mph) at {name}")
    if exposure.has_low_visibility:
        name, miles = exposure.worst_visibility()
        conditions.append(f"reduced visibility ({miles:.1f} mi) at {name}")
    return MODERATE_PREFIX + ", ".join(conditions) + ". " + MODERATE_STATEMENT


def generate_advice(
    waypoints: Sequence[WaypointWeather],
    pickup_date: date | None = None,
    delivery_date: date | None = None,
) -> WeatherAdvice:
    """Build the customer advisory for a route's waypoint weather."""
    if not waypoints:
        date_context = ""
        if pickup_date and delivery_date:
            date_context = (
                f" from {format_short_date(pickup_date)} to {format_short_date(delivery_date)}"
            )
        return WeatherAdvice(
            severity=AdviceSeverity.CLEAR,
            message=(
                f"No severe weather conditions detected along the route{date_context}. "
                "Safe driving conditions expected."
            ),
            details=[],
        )

    exposure = assess_exposure(waypoints)

    if exposure.is_severe():
        severity = AdviceSeverity.SEVERE
        message = _severe_message(exposure)
    elif exposure.is_moderate():
        severity = AdviceSeverity.MODERATE
        message = _moderate_message(exposure)
    else:
        severity = AdviceSeverity.CLEAR
        message = CLEAR_MESSAGE

    return WeatherAdvice(severity=severity, message=message, details=list(exposure.details))
