"""Error taxonomy for the route weather pipeline.

Geocoding and routing failures abort a pipeline run. Weather failures are
raised as `WeatherFetchFailed`, which carries the already computed route so
callers can still present it. Reverse geocoding failures never surface here;
the affected waypoint is simply left unnamed.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from route_weather.models.location import Location, RouteData


NETWORK_HINT = (
    "Network error: Please check your internet connection. If the problem "
    "persists, try using coordinates (latitude, longitude) instead of addresses."
)


class RouteWeatherError(Exception):
    """Base exception for all route weather errors."""


class MissingCredentials(RouteWeatherError):
    """Raised when a provider credential is not configured."""

    def __init__(self, credential: str):
        super().__init__(f"Missing API key: {credential}")
        self.credential = credential


class AddressNotFound(RouteWeatherError):
    """Raised when no geocoding provider can resolve an address."""

    def __init__(self, address: str):
        super().__init__(
            f"Address not found: '{address}'. "
            "Please try a more specific address or city name."
        )
        self.address = address


class NoRouteFound(RouteWeatherError):
    """Raised when the routing provider returns no route."""

    def __init__(self, message: str = "No route found"):
        super().__init__(message)


class ProviderError(RouteWeatherError):
    """Base exception for upstream provider errors."""

    def __init__(
        self,
        message: str,
        provider: str,
        status_code: int | None = None,
        response_body: str | None = None,
    ):
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code
        self.response_body = response_body


class RateLimitError(ProviderError):
    """Raised when provider rate limit is exceeded."""

    def __init__(
        self,
        provider: str,
        retry_after: int | None = None,
        status_code: int | None = None,
    ):
        super().__init__(
            f"Rate limit exceeded for {provider}",
            provider=provider,
            status_code=status_code,
        )
        self.retry_after = retry_after


class NetworkError(ProviderError):
    """Raised on connectivity failures (DNS, connect, timeout, CORS-class)."""

    def __init__(self, provider: str, detail: str | None = None):
        super().__init__(NETWORK_HINT, provider=provider)
        self.detail = detail


class RouteProviderError(ProviderError):
    """Raised when routing or geocoding fails for a non-network reason."""


class WeatherFetchFailed(ProviderError):
    """Raised when current conditions or forecast cannot be fetched.

    Attributes:
        location: The waypoint whose fetch failed
        route: The route computed before the weather stage, when raised by
            the pipeline
    """

    def __init__(
        self,
        message: str,
        provider: str,
        location: Location | None = None,
        status_code: int | None = None,
    ):
        super().__init__(message, provider=provider, status_code=status_code)
        self.location = location
        self.route: RouteData | None = None


def looks_like_network_failure(message: str) -> bool:
    """Check an error message for connectivity indicators."""
    lowered = message.lower()
    return "network" in lowered or "cors" in lowered
