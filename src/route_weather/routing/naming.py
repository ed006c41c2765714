"""Reverse geocoding of sampled waypoints.

Nominatim tolerates about one request per second per client, so lookups go
through a `StaggeredBatchGate` (groups of 3, 200 ms stagger, 1200 ms between
groups by default). A failed lookup leaves the point unnamed; unnamed points
and repeated place names are dropped before the waypoints reach the route.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from route_weather.exceptions import RouteWeatherError
from route_weather.models.location import RoutePoint
from route_weather.providers.nominatim import NominatimProvider
from route_weather.throttle import StaggeredBatchGate

logger = logging.getLogger(__name__)


def place_name_from_address(address: dict[str, Any] | None) -> str | None:
    """Pick a display name from Nominatim address components.

    Preference: city, town, municipality, "county, state" (or county alone),
    then state.
    """
    if not address:
        return None

    for key in ("city", "town", "municipality"):
        if address.get(key):
            return address[key]

    county = address.get("county")
    state = address.get("state")
    if county and state:
        return f"{county}, {state}"
    if county:
        return county
    return state or None


def dedupe_named(results: Sequence[tuple[RoutePoint, str | None]]) -> list[RoutePoint]:
    """Keep the first point for each place name (case-insensitive), dropping unnamed points."""
    seen: set[str] = set()
    named: list[RoutePoint] = []
    for point, name in results:
        if not name:
            continue
        key = name.lower()
        if key in seen:
            continue
        seen.add(key)
        named.append(RoutePoint(coordinates=point.coordinates, name=name))
    return named


class ReverseGeocodingBatcher:
    """Names route samples via rate-limited reverse geocoding."""

    def __init__(self, geocoder: NominatimProvider, gate: StaggeredBatchGate | None = None):
        self.geocoder = geocoder
        self.gate = gate or StaggeredBatchGate(
            batch_size=3, stagger_seconds=0.2, pause_seconds=1.2
        )

    async def lookup(self, point: RoutePoint) -> tuple[RoutePoint, str | None]:
        """Resolve one point to a place name; failures yield no name."""
        try:
            address = await self.geocoder.reverse(point.coordinates)
        except RouteWeatherError as e:
            logger.warning(f"Reverse geocoding failed for {point.coordinates}: {e}")
            return point, None
        return point, place_name_from_address(address)

    async def lookup_all(
        self, points: Sequence[RoutePoint]
    ) -> list[tuple[RoutePoint, str | None]]:
        """Resolve every point, preserving input order."""
        return await self.gate.run(points, self.lookup)

    async def name_points(self, points: Sequence[RoutePoint]) -> list[RoutePoint]:
        """Return the named, deduplicated points in travel order."""
        results = await self.lookup_all(points)
        named = dedupe_named(results)
        logger.info(f"Named {len(named)} of {len(points)} sampled waypoints")
        return named
