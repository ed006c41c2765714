"""Nominatim (OpenStreetMap) geocoding provider.

## API Documentation Summary
Source: https://nominatim.org/release-docs/latest/api/Overview/
Source: https://operations.osmfoundation.org/policies/nominatim/

## Endpoints
- Search: GET https://nominatim.openstreetmap.org/search?q={text}&format=json&limit=1
- Reverse: GET https://nominatim.openstreetmap.org/reverse?lat={lat}&lon={lon}&format=json&addressdetails=1

## Authentication
- No API key
- MUST send a User-Agent identifying the application

## Rate Limiting
- Absolute maximum of 1 request per second per client

## Response Format
Search returns a JSON array of matches with string `lat`/`lon` fields.
Reverse returns an object whose `address` holds components such as
`city`, `town`, `municipality`, `county`, `state`, `country`.
"""

from __future__ import annotations

from typing import Any

import httpx

from route_weather.exceptions import RouteProviderError
from route_weather.models.location import Coordinates
from route_weather.providers.base import Provider


class NominatimProvider(Provider):
    """Keyless forward and reverse geocoding via Nominatim.

    Example:
        ```python
        async with NominatimProvider(user_agent="my-app/1.0 ops@example.com") as osm:
            address = await osm.reverse(Coordinates(latitude=41.88, longitude=-87.63))
        ```
    """

    name = "nominatim"
    base_url = "https://nominatim.openstreetmap.org"
    requires_api_key = False
    error_class = RouteProviderError

    def __init__(
        self,
        user_agent: str | None = None,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ):
        """Initialize Nominatim provider.

        Args:
            user_agent: User-Agent string (REQUIRED by the usage policy)
            timeout: Request timeout in seconds
            client: Shared HTTP client
        """
        super().__init__(user_agent=user_agent, timeout=timeout, client=client)

    async def search(self, query: str) -> Coordinates | None:
        """Return the best match for a free-text query, or None."""
        results = await self._fetch(
            f"{self.base_url}/search",
            params={"q": query, "format": "json", "limit": 1},
        )
        if not results:
            return None
        try:
            best = results[0]
            return Coordinates(latitude=float(best["lat"]), longitude=float(best["lon"]))
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise RouteProviderError(
                f"Malformed search result for '{query}'",
                provider=self.name,
            ) from e

    async def reverse(self, coordinates: Coordinates) -> dict[str, Any] | None:
        """Return the address components at a point, or None."""
        data = await self._fetch(
            f"{self.base_url}/reverse",
            params={
                "lat": coordinates.latitude,
                "lon": coordinates.longitude,
                "format": "json",
                "addressdetails": 1,
            },
        )
        address = data.get("address") if isinstance(data, dict) else None
        return address if isinstance(address, dict) and address else None
