"""Geocoding, route retrieval and waypoint sampling."""

from route_weather.routing.geocoding import GeocodingResolver
from route_weather.routing.geometry import cumulative_distances_km, haversine_km
from route_weather.routing.naming import (
    ReverseGeocodingBatcher,
    dedupe_named,
    place_name_from_address,
)
from route_weather.routing.sampler import (
    RouteRetriever,
    cap_samples,
    sample_by_distance,
    sample_intermediate_points,
)

__all__ = [
    "GeocodingResolver",
    "cumulative_distances_km",
    "haversine_km",
    "ReverseGeocodingBatcher",
    "dedupe_named",
    "place_name_from_address",
    "RouteRetriever",
    "cap_samples",
    "sample_by_distance",
    "sample_intermediate_points",
]
