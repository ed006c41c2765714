"""Location and route models."""

from __future__ import annotations

import re
from typing import Self

from pydantic import BaseModel, ConfigDict, Field

from route_weather.formatting import KM_TO_MILES, format_distance, format_duration


# Regex for parsing lat/long coordinates: "latitude,longitude"
# Supports optional +/- prefix for both values
COORDINATE_PATTERN = re.compile(
    r"^(?P<lat>[-+]?\d*\.?\d+)\s*,\s*(?P<lon>[-+]?\d*\.?\d+)$"
)


class Coordinates(BaseModel):
    """Geographic coordinates (WGS84 latitude/longitude).

    Latitude:
        - Negative (-) = south of equator
        - Positive (+) = north of equator
        - Range: -90 to +90

    Longitude:
        - Negative (-) = west of prime meridian
        - Positive (+) = east of prime meridian
        - Range: -180 to +180
    """

    model_config = ConfigDict(frozen=True)

    latitude: float = Field(..., ge=-90, le=90, description="Latitude in decimal degrees")
    longitude: float = Field(..., ge=-180, le=180, description="Longitude in decimal degrees")

    @classmethod
    def from_string(cls, value: str) -> Self:
        """Parse coordinates from string format 'latitude,longitude'.

        Examples:
            '41.8781,-87.6298' -> Chicago
            '-33.8688,151.2093' -> Sydney
            '+51.5074,-0.1278' -> London
        """
        match = COORDINATE_PATTERN.match(value.strip())
        if not match:
            raise ValueError(
                f"Invalid coordinate format: '{value}'. "
                "Expected format: 'latitude,longitude' (e.g., '41.8781,-87.6298')"
            )
        return cls(
            latitude=float(match.group("lat")),
            longitude=float(match.group("lon")),
        )

    @classmethod
    def try_from_string(cls, value: str) -> Self | None:
        """Parse coordinates if the string looks like 'lat,lon', else None."""
        try:
            return cls.from_string(value)
        except ValueError:
            return None

    @classmethod
    def from_lon_lat(cls, pair: list[float] | tuple[float, ...]) -> Self:
        """Build from a GeoJSON-ordered [longitude, latitude(, altitude)] pair."""
        return cls(latitude=pair[1], longitude=pair[0])

    def __str__(self) -> str:
        return f"{self.latitude},{self.longitude}"

    def to_tuple(self) -> tuple[float, float]:
        """Return coordinates as (latitude, longitude) tuple."""
        return (self.latitude, self.longitude)


class Location(BaseModel):
    """A named point used for weather lookups."""

    coordinates: Coordinates
    name: str | None = Field(
        default=None, description="Display name, absent until reverse-geocoded"
    )

    def display_name(self) -> str:
        """Get a display name for this location."""
        if self.name:
            return self.name
        return str(self.coordinates)


class RoutePoint(BaseModel):
    """A point sampled along a route."""

    coordinates: Coordinates
    name: str | None = None

    def to_location(self, default_name: str = "Location") -> Location:
        """Convert to a Location, substituting a placeholder for missing names."""
        return Location(coordinates=self.coordinates, name=self.name or default_name)


class RouteData(BaseModel):
    """A driving route with its sampled waypoints.

    `waypoints[0]` is the origin ("Start") and `waypoints[-1]` the destination
    ("End"); anything between is a named intermediate sample in travel order.
    """

    waypoints: list[RoutePoint] = Field(default_factory=list)
    polyline: list[tuple[float, float]] = Field(
        default_factory=list, description="(lat, lon) pairs in travel order"
    )
    distance_km: float = Field(..., ge=0, description="Route distance in kilometers")
    duration_s: float = Field(..., ge=0, description="Route duration in seconds")

    @property
    def distance_miles(self) -> float:
        """Route distance in miles."""
        return self.distance_km * KM_TO_MILES

    @property
    def intermediate_waypoints(self) -> list[RoutePoint]:
        """Named samples between the origin and destination."""
        return self.waypoints[1:-1]

    def locations(self) -> list[Location]:
        """All waypoints as Locations, in travel order."""
        return [point.to_location() for point in self.waypoints]

    def summary(self) -> str:
        """One-line description of the route."""
        names = " -> ".join(point.name or "?" for point in self.waypoints)
        return (
            f"{format_distance(self.distance_km)}, "
            f"{format_duration(self.duration_s)} via {names}"
        )
