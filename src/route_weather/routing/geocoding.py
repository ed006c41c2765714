"""Address resolution with a keyless fallback provider."""

from __future__ import annotations

import logging

from route_weather.exceptions import (
    AddressNotFound,
    NetworkError,
    ProviderError,
    RouteProviderError,
    RouteWeatherError,
    looks_like_network_failure,
)
from route_weather.models.location import Coordinates
from route_weather.providers.nominatim import NominatimProvider
from route_weather.providers.openroute import OpenRouteServiceProvider

logger = logging.getLogger(__name__)


class GeocodingResolver:
    """Resolves free-text addresses to coordinates.

    OpenRouteService is tried first; on any failure (including no match) the
    query is repeated against Nominatim with a result limit of one. Text
    already in 'lat,lon' form is parsed without any request.
    """

    def __init__(self, primary: OpenRouteServiceProvider, fallback: NominatimProvider):
        self.primary = primary
        self.fallback = fallback

    async def resolve(self, address: str) -> Coordinates:
        """Resolve an address.

        Raises:
            AddressNotFound: If neither provider finds a match
            NetworkError: If the fallback provider cannot be reached
            RouteProviderError: If the fallback provider fails otherwise
        """
        coordinates = Coordinates.try_from_string(address)
        if coordinates is not None:
            logger.debug(f"Using literal coordinates {coordinates}")
            return coordinates

        try:
            coordinates = await self.primary.geocode(address)
        except RouteWeatherError as e:
            logger.warning(
                f"{self.primary.name} geocoding failed for '{address}', "
                f"trying {self.fallback.name}: {e}"
            )
        else:
            logger.info(f"Geocoded '{address}' to {coordinates}")
            return coordinates

        try:
            coordinates = await self.fallback.search(address)
        except NetworkError:
            raise
        except ProviderError as e:
            if looks_like_network_failure(str(e)):
                raise NetworkError(self.fallback.name, detail=str(e)) from e
            raise RouteProviderError(
                f"Geocoding failed: {e}",
                provider=e.provider,
                status_code=e.status_code,
                response_body=e.response_body,
            ) from e

        if coordinates is None:
            raise AddressNotFound(address)
        logger.info(f"Geocoded '{address}' to {coordinates} via {self.fallback.name}")
        return coordinates
