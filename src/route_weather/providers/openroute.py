"""OpenRouteService provider (driving directions and forward geocoding).

## API Documentation Summary
Source: https://openrouteservice.org/dev/#/api-docs

## Endpoints
- Directions: GET https://api.openrouteservice.org/v2/directions/driving-car?start={lon},{lat}&end={lon},{lat}
- Geocoding: GET https://api.openrouteservice.org/geocode/search?text={address}

## Authentication
- API key required, sent in the `Authorization` header

## Directions Response Format (GeoJSON)
```json
{
  "type": "FeatureCollection",
  "features": [
    {
      "geometry": {"type": "LineString", "coordinates": [[lon, lat], ...]},
      "properties": {"summary": {"distance": 1234.5, "duration": 567.8}}
    }
  ]
}
```
`distance` is meters, `duration` seconds.

## Geocoding Response Format (GeoJSON)
```json
{"features": [{"geometry": {"coordinates": [lon, lat]}, "properties": {"label": "..."}}]}
```

## Errors
Error bodies look like `{"error": {"code": 2010, "message": "..."}}`; the
message is surfaced in `RouteProviderError`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from route_weather.exceptions import (
    AddressNotFound,
    MissingCredentials,
    NoRouteFound,
    RouteProviderError,
)
from route_weather.models.location import Coordinates
from route_weather.providers.base import Provider

logger = logging.getLogger(__name__)

GEOJSON_ACCEPT = (
    "application/json, application/geo+json, application/gpx+xml, img/png; charset=utf-8"
)


@dataclass
class DirectionsResult:
    """Raw driving route as returned by OpenRouteService.

    Attributes:
        coordinates: Route vertices as [lon, lat] pairs, in travel order
        distance_m: Route distance in meters
        duration_s: Route duration in seconds
    """

    coordinates: list[list[float]]
    distance_m: float
    duration_s: float


class OpenRouteServiceProvider(Provider):
    """OpenRouteService directions and geocoding client.

    Example:
        ```python
        async with OpenRouteServiceProvider(api_key="...") as ors:
            start = await ors.geocode("Chicago, IL")
        ```
    """

    name = "openrouteservice"
    base_url = "https://api.openrouteservice.org"
    requires_api_key = True
    error_class = RouteProviderError

    def __init__(
        self,
        api_key: str | None = None,
        user_agent: str | None = None,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
        profile: str = "driving-car",
    ):
        super().__init__(api_key=api_key, user_agent=user_agent, timeout=timeout, client=client)
        self.profile = profile

    def _get_default_headers(self) -> dict[str, str]:
        if not self.api_key:
            raise MissingCredentials("openroute_api_key")
        headers = super()._get_default_headers()
        headers["Accept"] = GEOJSON_ACCEPT
        headers["Authorization"] = self.api_key
        return headers

    async def get_directions(self, start: Coordinates, end: Coordinates) -> DirectionsResult:
        """Get the driving route between two points.

        Raises:
            NoRouteFound: If the response contains no route features
            RouteProviderError: If the provider rejects the request
            NetworkError: If the provider cannot be reached
        """
        url = f"{self.base_url}/v2/directions/{self.profile}"
        params = {
            "start": f"{start.longitude},{start.latitude}",
            "end": f"{end.longitude},{end.latitude}",
        }
        logger.debug(f"Requesting {self.profile} route {start} -> {end}")
        data = await self._fetch(url, params=params)
        return self._translate_directions(data)

    def _translate_directions(self, response_data: dict[str, Any]) -> DirectionsResult:
        features = response_data.get("features") or []
        if not features:
            raise NoRouteFound()

        feature = features[0]
        coordinates = (feature.get("geometry") or {}).get("coordinates") or []
        if not coordinates:
            raise NoRouteFound("No route found: route has no geometry")

        summary = (feature.get("properties") or {}).get("summary") or {}
        return DirectionsResult(
            coordinates=coordinates,
            distance_m=summary.get("distance", 0.0),
            duration_s=summary.get("duration", 0.0),
        )

    async def geocode(self, address: str) -> Coordinates:
        """Resolve an address to coordinates.

        Raises:
            AddressNotFound: If the provider has no match
            RouteProviderError: If the match has no usable coordinates
        """
        url = f"{self.base_url}/geocode/search"
        data = await self._fetch(url, params={"text": address, "size": 1})

        features = data.get("features") or []
        if not features:
            raise AddressNotFound(address)
        try:
            return Coordinates.from_lon_lat(features[0]["geometry"]["coordinates"])
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise RouteProviderError(
                f"Malformed geocoding result for '{address}'",
                provider=self.name,
            ) from e
