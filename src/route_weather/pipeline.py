"""Route weather pipeline.

Turns two addresses and a pickup/delivery window into a sampled route with
per-waypoint weather:

1. Resolve origin and destination (concurrently) to coordinates
2. Retrieve the driving route and sample intermediate points
3. Reverse geocode samples, keeping unique named places
4. Fetch current conditions and forecast for Start, named places and End
5. Trim each forecast to the shipment window

Steps 1-3 are fatal on failure. Step 4 failures raise `WeatherFetchFailed`
with `route` attached, so callers can still show the route.

## Usage

```python
report = await plan_route_weather(
    "Chicago, IL",
    "Denver, CO",
    pickup_date=date(2024, 6, 1),
    delivery_date=date(2024, 6, 2),
    openroute_api_key="...",
    openweather_api_key="...",
)
advice = generate_advice(report.waypoints, date(2024, 6, 1), date(2024, 6, 2))
```
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date, datetime
from typing import Any

import httpx

from route_weather.config import Settings, get_settings
from route_weather.exceptions import MissingCredentials, WeatherFetchFailed
from route_weather.models.advice import RouteWeatherReport
from route_weather.models.location import Coordinates, RouteData
from route_weather.models.weather import WaypointWeather
from route_weather.providers.nominatim import NominatimProvider
from route_weather.providers.openroute import OpenRouteServiceProvider
from route_weather.providers.openweather import OpenWeatherProvider
from route_weather.routing.geocoding import GeocodingResolver
from route_weather.routing.naming import ReverseGeocodingBatcher
from route_weather.routing.sampler import RouteRetriever
from route_weather.throttle import Clock, StaggeredBatchGate
from route_weather.weather.fetcher import WeatherFetcher

logger = logging.getLogger(__name__)


class RouteWeatherPipeline:
    """Wires providers and stages together for one or more pipeline runs.

    Credentials must be passed explicitly or configured via settings; there
    are no built-in keys. Each run keeps no state beyond its own result.
    """

    def __init__(
        self,
        openroute_api_key: str | None = None,
        openweather_api_key: str | None = None,
        settings: Settings | None = None,
        client: httpx.AsyncClient | None = None,
        clock: Clock | None = None,
    ):
        """Initialize the pipeline.

        Args:
            openroute_api_key: Routing credential (falls back to settings)
            openweather_api_key: Weather credential (falls back to settings)
            settings: Configuration (defaults to `get_settings()`)
            client: Shared HTTP client for all providers
            clock: Time source for request pacing
        """
        self.settings = settings or get_settings()
        openroute_api_key = openroute_api_key or self.settings.openroute_api_key
        openweather_api_key = openweather_api_key or self.settings.openweather_api_key
        if not openroute_api_key:
            raise MissingCredentials("openroute_api_key")
        if not openweather_api_key:
            raise MissingCredentials("openweather_api_key")

        timeout = self.settings.http_timeout_seconds
        self.router = OpenRouteServiceProvider(
            api_key=openroute_api_key, timeout=timeout, client=client
        )
        self.nominatim = NominatimProvider(
            user_agent=self.settings.nominatim_user_agent, timeout=timeout, client=client
        )
        self.weather = OpenWeatherProvider(
            api_key=openweather_api_key, timeout=timeout, client=client
        )

        self.resolver = GeocodingResolver(self.router, self.nominatim)
        self.retriever = RouteRetriever(
            self.router,
            ReverseGeocodingBatcher(
                self.nominatim,
                StaggeredBatchGate(
                    batch_size=self.settings.reverse_geocode_batch_size,
                    stagger_seconds=self.settings.reverse_geocode_stagger_seconds,
                    pause_seconds=self.settings.reverse_geocode_batch_pause_seconds,
                    clock=clock,
                ),
            ),
            interval_km=self.settings.waypoint_interval_km,
            max_waypoints=self.settings.max_intermediate_waypoints,
        )
        self.fetcher = WeatherFetcher(
            self.weather,
            StaggeredBatchGate(
                batch_size=self.settings.weather_batch_size,
                pause_seconds=self.settings.weather_batch_pause_seconds,
                clock=clock,
            ),
        )

    async def __aenter__(self) -> RouteWeatherPipeline:
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close any HTTP clients the providers created."""
        for provider in (self.router, self.nominatim, self.weather):
            await provider.aclose()

    async def resolve(self, origin: str, destination: str) -> tuple[Coordinates, Coordinates]:
        """Geocode origin and destination concurrently."""
        start, end = await asyncio.gather(
            self.resolver.resolve(origin),
            self.resolver.resolve(destination),
        )
        return start, end

    async def plan_route(self, origin: str, destination: str) -> RouteData:
        """Resolve both addresses and build the sampled, named route."""
        start, end = await self.resolve(origin, destination)
        return await self.retriever.retrieve(start, end)

    async def fetch_weather(
        self,
        route: RouteData,
        pickup_date: date | datetime,
        delivery_date: date | datetime,
    ) -> list[WaypointWeather]:
        """Fetch windowed weather for every route waypoint.

        Raises:
            WeatherFetchFailed: With `route` attached
        """
        try:
            return await self.fetcher.fetch_all(route.locations(), pickup_date, delivery_date)
        except WeatherFetchFailed as e:
            e.route = route
            raise

    async def run(
        self,
        origin: str,
        destination: str,
        pickup_date: date | datetime,
        delivery_date: date | datetime,
    ) -> RouteWeatherReport:
        """Run the full pipeline."""
        route = await self.plan_route(origin, destination)
        waypoints = await self.fetch_weather(route, pickup_date, delivery_date)
        return RouteWeatherReport(route=route, waypoints=waypoints)


async def plan_route_weather(
    origin: str,
    destination: str,
    pickup_date: date | datetime,
    delivery_date: date | datetime,
    openroute_api_key: str | None = None,
    openweather_api_key: str | None = None,
    settings: Settings | None = None,
    client: httpx.AsyncClient | None = None,
    clock: Clock | None = None,
) -> RouteWeatherReport:
    """Plan a route and fetch its waypoint weather in one call.

    Raises:
        MissingCredentials: If a credential is neither passed nor configured
        AddressNotFound: If an address cannot be geocoded
        NetworkError: If a geocoding or routing provider is unreachable
        NoRouteFound: If no driving route exists
        RouteProviderError: If routing or geocoding fails otherwise
        WeatherFetchFailed: If weather is unavailable (route attached)
    """
    async with RouteWeatherPipeline(
        openroute_api_key=openroute_api_key,
        openweather_api_key=openweather_api_key,
        settings=settings,
        client=client,
        clock=clock,
    ) as pipeline:
        return await pipeline.run(origin, destination, pickup_date, delivery_date)
