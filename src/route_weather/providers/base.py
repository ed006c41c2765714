"""Base upstream provider abstraction.

Every upstream service (routing, geocoding, weather) is reached through a
`Provider` subclass that owns an `httpx.AsyncClient` and translates raw
responses into the models in `route_weather.models`.

## Supported Providers

### OpenRouteService (api.openrouteservice.org)
- Endpoints: /v2/directions/driving-car, /geocode/search
- Auth: API key in the Authorization header
- Coordinate order: [longitude, latitude]

### Nominatim (nominatim.openstreetmap.org)
- Endpoints: /search, /reverse
- Auth: None, but a User-Agent identifying the application is required
- Rate limit: 1 request/second per client (usage policy)

### OpenWeatherMap (api.openweathermap.org)
- Endpoints: /data/2.5/weather, /data/2.5/forecast
- Auth: API key as `appid` query parameter
- Rate limit: 60 requests/minute on the free tier

## Failure Semantics
Requests are made exactly once. Transport failures become `NetworkError`,
HTTP 429 becomes `RateLimitError` and any other status >= 400 becomes the
provider's `error_class` carrying the upstream message.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from route_weather.exceptions import NetworkError, ProviderError, RateLimitError

logger = logging.getLogger(__name__)


class Provider:
    """Base class for upstream HTTP providers.

    Attributes:
        name: Short provider identifier used in errors and logs
        base_url: Base URL for the API
        requires_api_key: Whether this provider requires an API key
        error_class: Exception raised for HTTP error responses

    Example:
        ```python
        async with OpenWeatherProvider(api_key="...") as provider:
            current = await provider.get_current(coords)
        ```
    """

    name: str
    base_url: str
    requires_api_key: bool = False
    error_class: type[ProviderError] = ProviderError

    def __init__(
        self,
        api_key: str | None = None,
        user_agent: str | None = None,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ):
        """Initialize the provider.

        Args:
            api_key: API key if required by the provider
            user_agent: User-Agent string for requests
            timeout: Request timeout in seconds
            client: Shared HTTP client; the caller keeps ownership
        """
        self.api_key = api_key
        self.user_agent = user_agent or "route-weather/0.1.0"
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None

    async def __aenter__(self) -> Provider:
        """Enter async context manager."""
        self._get_client()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Exit async context manager."""
        await self.aclose()

    async def aclose(self) -> None:
        """Close the HTTP client if this provider created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
            self._owns_client = True
        return self._client

    def _get_default_headers(self) -> dict[str, str]:
        """Get default headers for requests."""
        return {
            "User-Agent": self.user_agent,
            "Accept": "application/json",
        }

    def _extract_error_message(self, response: httpx.Response) -> str:
        """Pull a human-readable message out of an error response.

        Handles both `{"error": {"message": ...}}` and `{"message": ...}` bodies.
        """
        try:
            body = response.json()
        except ValueError:
            return f"API request failed: {response.status_code}"
        if isinstance(body, dict):
            error = body.get("error")
            if isinstance(error, dict) and error.get("message"):
                return str(error["message"])
            if isinstance(error, str) and error:
                return error
            if body.get("message"):
                return str(body["message"])
        return f"API request failed: {response.status_code}"

    async def _fetch(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """Fetch JSON from the API.

        Args:
            url: Full URL to fetch
            params: Query parameters
            headers: Additional headers

        Returns:
            Decoded JSON body

        Raises:
            NetworkError: If the request could not be delivered
            RateLimitError: If rate limit is exceeded
            ProviderError: If the provider answered with an error
        """
        client = self._get_client()
        request_headers = self._get_default_headers()
        if headers:
            request_headers.update(headers)

        try:
            response = await client.get(url, params=params, headers=request_headers)
        except httpx.TransportError as e:
            logger.debug(f"{self.name} request to {url} failed: {e!r}")
            raise NetworkError(self.name, detail=str(e)) from e

        # Handle rate limiting
        if response.status_code == 429:
            retry_after = response.headers.get("Retry-After")
            raise RateLimitError(
                self.name,
                retry_after=int(retry_after) if retry_after and retry_after.isdigit() else None,
                status_code=429,
            )

        # Handle other errors
        if response.status_code >= 400:
            raise self.error_class(
                self._extract_error_message(response),
                provider=self.name,
                status_code=response.status_code,
                response_body=response.text,
            )

        try:
            return response.json()
        except ValueError as e:
            raise self.error_class(
                f"Failed to parse response: {e}",
                provider=self.name,
                response_body=response.text,
            ) from e
