"""Great-circle distance helpers for route polylines."""

from __future__ import annotations

import math
from collections.abc import Sequence

EARTH_RADIUS_KM = 6371.0

LatLon = tuple[float, float]


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two points in kilometers."""
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def cumulative_distances_km(polyline: Sequence[LatLon]) -> list[float]:
    """Along-route distance from the first vertex to each vertex.

    The result has one entry per vertex, starts at 0.0 and never decreases.
    """
    if not polyline:
        return []
    distances = [0.0]
    for (lat1, lon1), (lat2, lon2) in zip(polyline, polyline[1:]):
        distances.append(distances[-1] + haversine_km(lat1, lon1, lat2, lon2))
    return distances
