"""OpenWeatherMap provider (current conditions and 5 day / 3 hour forecast).

## API Documentation Summary
Source: https://openweathermap.org/current
Source: https://openweathermap.org/forecast5

## Endpoints
- Current: GET https://api.openweathermap.org/data/2.5/weather?lat={lat}&lon={lon}&appid={key}
- Forecast: GET https://api.openweathermap.org/data/2.5/forecast?lat={lat}&lon={lon}&appid={key}

## Authentication
- API key required, sent as the `appid` query parameter

## Rate Limiting
- Free tier: 60 calls/minute

## Response Format (current)
```json
{
  "coord": {"lon": -87.65, "lat": 41.85},
  "weather": [{"id": 211, "main": "Thunderstorm", "description": "thunderstorm", "icon": "11d"}],
  "main": {"temp": 295.1, "feels_like": 295.6, "pressure": 1009, "humidity": 78},
  "visibility": 9000,
  "wind": {"speed": 5.1, "deg": 200, "gust": 9.3},
  "dt": 1717243200,
  "name": "Chicago"
}
```

## Response Format (forecast)
```json
{"list": [{"dt": 1717254000, "main": {...}, "weather": [...], "wind": {...},
           "visibility": 10000, "pop": 0.72, "dt_txt": "2024-06-01 15:00:00"}]}
```

## Variable Translation (OpenWeatherMap -> Canonical)
| OWM Field | Canonical Field | Unit | Notes |
|-----------|-----------------|------|-------|
| dt | time | Unix seconds | Convert to UTC datetime |
| weather[] | conditions[] | | Direct mapping |
| main.temp | temperature_k | K | Direct mapping |
| main.feels_like | feels_like_k | K | Direct mapping |
| main.humidity | humidity_percent | % | Direct mapping |
| main.pressure | pressure_hpa | hPa | Direct mapping |
| wind.speed | wind.speed_ms | m/s | Direct mapping |
| wind.deg | wind.direction_deg | degrees | Direct mapping |
| wind.gust | wind.gust_ms | m/s | Direct mapping |
| visibility | visibility_m | m | Absent in some responses |
| pop | precipitation_probability | 0-1 | Forecast only |
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import httpx

from route_weather.exceptions import MissingCredentials, ProviderError
from route_weather.models.location import Coordinates
from route_weather.models.weather import (
    ForecastEntry,
    WeatherCondition,
    WeatherObservation,
    Wind,
)
from route_weather.providers.base import Provider


def _unix_to_datetime(timestamp: int | float | None) -> datetime | None:
    """Convert Unix timestamp to UTC datetime."""
    if timestamp is None:
        return None
    return datetime.fromtimestamp(timestamp, tz=timezone.utc)


def _translate_conditions(raw: list[dict[str, Any]] | None) -> list[WeatherCondition]:
    return [
        WeatherCondition(
            id=item.get("id"),
            main=item.get("main") or "",
            description=item.get("description") or "",
            icon=item.get("icon"),
        )
        for item in raw or []
    ]


def _translate_observation_fields(data: dict[str, Any]) -> dict[str, Any]:
    """Fields shared by current and forecast payloads."""
    main = data.get("main") or {}
    wind = data.get("wind") or {}
    return {
        "time": _unix_to_datetime(data.get("dt")),
        "conditions": _translate_conditions(data.get("weather")),
        "temperature_k": main.get("temp"),
        "feels_like_k": main.get("feels_like"),
        "humidity_percent": main.get("humidity"),
        "pressure_hpa": main.get("pressure"),
        "wind": Wind(
            speed_ms=wind.get("speed") or 0.0,
            direction_deg=wind.get("deg"),
            gust_ms=wind.get("gust"),
        ),
        "visibility_m": data.get("visibility"),
    }


class OpenWeatherProvider(Provider):
    """OpenWeatherMap 2.5 client.

    Example:
        ```python
        async with OpenWeatherProvider(api_key="...") as owm:
            current = await owm.get_current(Coordinates(latitude=41.88, longitude=-87.63))
            forecast = await owm.get_forecast(Coordinates(latitude=41.88, longitude=-87.63))
        ```
    """

    name = "openweathermap"
    base_url = "https://api.openweathermap.org/data/2.5"
    requires_api_key = True

    def __init__(
        self,
        api_key: str | None = None,
        user_agent: str | None = None,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ):
        super().__init__(api_key=api_key, user_agent=user_agent, timeout=timeout, client=client)

    def _params(self, coordinates: Coordinates) -> dict[str, Any]:
        if not self.api_key:
            raise MissingCredentials("openweather_api_key")
        return {
            "lat": coordinates.latitude,
            "lon": coordinates.longitude,
            "appid": self.api_key,
        }

    async def get_current(self, coordinates: Coordinates) -> WeatherObservation:
        """Get current conditions.

        Raises:
            ProviderError: If request fails
        """
        data = await self._fetch(f"{self.base_url}/weather", params=self._params(coordinates))
        return self._translate_current(data)

    async def get_forecast(self, coordinates: Coordinates) -> list[ForecastEntry]:
        """Get the 5 day / 3 hour forecast, in time order.

        Raises:
            ProviderError: If request fails
        """
        data = await self._fetch(f"{self.base_url}/forecast", params=self._params(coordinates))
        return self._translate_forecast(data)

    def _translate_current(self, response_data: dict[str, Any]) -> WeatherObservation:
        try:
            fields = _translate_observation_fields(response_data)
            if fields["time"] is None:
                raise ProviderError(
                    "Current conditions response has no timestamp",
                    provider=self.name,
                )
            return WeatherObservation(**fields)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise self._malformed("current conditions", e) from e

    def _translate_forecast(self, response_data: dict[str, Any]) -> list[ForecastEntry]:
        entries: list[ForecastEntry] = []
        try:
            for item in response_data.get("list") or []:
                fields = _translate_observation_fields(item)
                if fields["time"] is None:
                    continue
                entries.append(
                    ForecastEntry(
                        **fields,
                        precipitation_probability=item.get("pop") or 0.0,
                    )
                )
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise self._malformed("forecast", e) from e
        return entries

    def _malformed(self, what: str, error: Exception) -> ProviderError:
        return ProviderError(f"Malformed {what} response: {error}", provider=self.name)
