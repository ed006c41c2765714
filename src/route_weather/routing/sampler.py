"""Route retrieval and waypoint sampling.

The driving route's polyline is walked by cumulative great-circle distance
and a sample is taken each time the next threshold (every 120 km by default)
is crossed. At most ten intermediate samples survive; they are reverse
geocoded and, together with "Start" and "End", become the route's waypoints.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence

from route_weather.models.location import Coordinates, RouteData, RoutePoint
from route_weather.providers.openroute import DirectionsResult, OpenRouteServiceProvider
from route_weather.routing.geometry import LatLon, cumulative_distances_km
from route_weather.routing.naming import ReverseGeocodingBatcher

logger = logging.getLogger(__name__)

BASE_INTERVAL_KM = 80.0
DEFAULT_INTERVAL_KM = BASE_INTERVAL_KM * 1.5
MAX_INTERMEDIATE_WAYPOINTS = 10


def to_lat_lon(coordinates: Sequence[Sequence[float]]) -> list[LatLon]:
    """Convert GeoJSON [lon, lat] vertices to (lat, lon) pairs."""
    return [(vertex[1], vertex[0]) for vertex in coordinates]


def sample_by_distance(
    polyline: Sequence[LatLon],
    distances: Sequence[float],
    interval_km: float = DEFAULT_INTERVAL_KM,
) -> list[RoutePoint]:
    """Take a point each time the along-route distance crosses the next threshold.

    Only interior vertices are considered. The threshold advances by one
    interval per emitted sample, however far the vertex overshoots it.
    """
    samples: list[RoutePoint] = []
    next_threshold = interval_km
    for index in range(1, len(polyline) - 1):
        if distances[index] >= next_threshold:
            lat, lon = polyline[index]
            samples.append(RoutePoint(coordinates=Coordinates(latitude=lat, longitude=lon)))
            next_threshold += interval_km
    return samples


def cap_samples(
    samples: Sequence[RoutePoint],
    limit: int = MAX_INTERMEDIATE_WAYPOINTS,
) -> list[RoutePoint]:
    """Thin samples to at most `limit` by taking every ceil(n/limit)-th one."""
    if len(samples) <= limit:
        return list(samples)
    stride = math.ceil(len(samples) / limit)
    return list(samples[::stride])[:limit]


def sample_intermediate_points(
    polyline: Sequence[LatLon],
    interval_km: float = DEFAULT_INTERVAL_KM,
    limit: int = MAX_INTERMEDIATE_WAYPOINTS,
) -> list[RoutePoint]:
    """Sample and cap intermediate points along a (lat, lon) polyline."""
    distances = cumulative_distances_km(polyline)
    return cap_samples(sample_by_distance(polyline, distances, interval_km), limit)


class RouteRetriever:
    """Builds `RouteData` from a routing provider and a reverse geocoder."""

    def __init__(
        self,
        router: OpenRouteServiceProvider,
        batcher: ReverseGeocodingBatcher,
        interval_km: float = DEFAULT_INTERVAL_KM,
        max_waypoints: int = MAX_INTERMEDIATE_WAYPOINTS,
    ):
        self.router = router
        self.batcher = batcher
        self.interval_km = interval_km
        self.max_waypoints = max_waypoints

    async def retrieve(self, start: Coordinates, end: Coordinates) -> RouteData:
        """Fetch the driving route and attach named waypoints.

        Raises:
            NoRouteFound: If the provider returns no route
            RouteProviderError: If the provider rejects the request
            NetworkError: If the provider cannot be reached
        """
        directions = await self.router.get_directions(start, end)
        polyline = to_lat_lon(directions.coordinates)
        logger.info(
            f"Route retrieved: {len(polyline)} vertices, "
            f"{directions.distance_m / 1000:.1f} km"
        )

        samples = sample_intermediate_points(polyline, self.interval_km, self.max_waypoints)
        named = await self.batcher.name_points(samples)
        return self.assemble(directions, polyline, named)

    @staticmethod
    def assemble(
        directions: DirectionsResult,
        polyline: list[LatLon],
        named: list[RoutePoint],
    ) -> RouteData:
        """Combine Start, named intermediates and End into `RouteData`."""
        first_lat, first_lon = polyline[0]
        last_lat, last_lon = polyline[-1]
        waypoints = [
            RoutePoint(
                coordinates=Coordinates(latitude=first_lat, longitude=first_lon),
                name="Start",
            ),
            *named,
            RoutePoint(
                coordinates=Coordinates(latitude=last_lat, longitude=last_lon),
                name="End",
            ),
        ]
        return RouteData(
            waypoints=waypoints,
            polyline=polyline,
            distance_km=directions.distance_m / 1000,
            duration_s=directions.duration_s,
        )
