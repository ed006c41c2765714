"""Batched weather acquisition for route waypoints."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from datetime import date, datetime

from route_weather.exceptions import ProviderError, WeatherFetchFailed
from route_weather.models.location import Location
from route_weather.models.weather import WaypointWeather
from route_weather.providers.openweather import OpenWeatherProvider
from route_weather.throttle import StaggeredBatchGate
from route_weather.weather.windowing import window_forecast

logger = logging.getLogger(__name__)


class WeatherFetcher:
    """Fetches current conditions and forecast for each waypoint.

    Locations are processed in groups of five with a short pause between
    groups to stay under the provider's per-minute quota. Current conditions
    and forecast for one location are fetched concurrently and must both
    succeed.
    """

    def __init__(self, provider: OpenWeatherProvider, gate: StaggeredBatchGate | None = None):
        self.provider = provider
        self.gate = gate or StaggeredBatchGate(batch_size=5, pause_seconds=0.2)

    async def fetch_waypoint(
        self,
        location: Location,
        pickup: date | datetime,
        delivery: date | datetime,
    ) -> WaypointWeather:
        """Fetch and window weather for a single location.

        Raises:
            WeatherFetchFailed: If either request fails
        """
        current, forecast = await asyncio.gather(
            self.provider.get_current(location.coordinates),
            self.provider.get_forecast(location.coordinates),
            return_exceptions=True,
        )
        for outcome in (current, forecast):
            if not isinstance(outcome, BaseException):
                continue
            if not isinstance(outcome, ProviderError):
                raise outcome
            raise WeatherFetchFailed(
                f"Weather fetch failed for {location.display_name()}: {outcome}",
                provider=outcome.provider,
                location=location,
                status_code=outcome.status_code,
            ) from outcome

        return WaypointWeather(
            location=location,
            current=current,
            forecast=window_forecast(forecast, pickup, delivery),
        )

    async def fetch_all(
        self,
        locations: Sequence[Location],
        pickup: date | datetime,
        delivery: date | datetime,
    ) -> list[WaypointWeather]:
        """Fetch weather for every location, in input order.

        Raises:
            WeatherFetchFailed: On the first failed location
        """

        async def fetch(location: Location) -> WaypointWeather:
            return await self.fetch_waypoint(location, pickup, delivery)

        results = await self.gate.run(locations, fetch)
        logger.info(f"Weather fetched for {len(results)} locations")
        return results
