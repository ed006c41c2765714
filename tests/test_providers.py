"""Tests for upstream providers against fake HTTP transports."""

from datetime import datetime, timezone

import httpx
import pytest

from conftest import mock_client, owm_forecast_payload, owm_payload
from route_weather.exceptions import (
    MissingCredentials,
    NetworkError,
    NoRouteFound,
    ProviderError,
    RateLimitError,
    RouteProviderError,
)
from route_weather.models.location import Coordinates
from route_weather.providers.nominatim import NominatimProvider
from route_weather.providers.openroute import OpenRouteServiceProvider
from route_weather.providers.openweather import OpenWeatherProvider

CHICAGO = Coordinates(latitude=41.8781, longitude=-87.6298)
DENVER = Coordinates(latitude=39.7392, longitude=-104.9903)


def directions_payload(coordinates, distance=1_600_000.0, duration=54_000.0):
    return {
        "type": "FeatureCollection",
        "features": [
            {
                "geometry": {"type": "LineString", "coordinates": coordinates},
                "properties": {"summary": {"distance": distance, "duration": duration}},
            }
        ],
    }


class TestOpenRouteServiceProvider:
    """Tests for directions and forward geocoding."""

    @pytest.mark.anyio
    async def test_get_directions(self):
        captured: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            return httpx.Response(
                200, json=directions_payload([[-87.6298, 41.8781], [-104.9903, 39.7392]])
            )

        provider = OpenRouteServiceProvider(api_key="ors-key", client=mock_client(handler))
        result = await provider.get_directions(CHICAGO, DENVER)

        request = captured[0]
        assert request.url.path == "/v2/directions/driving-car"
        assert request.url.params["start"] == "-87.6298,41.8781"
        assert request.url.params["end"] == "-104.9903,39.7392"
        assert request.headers["Authorization"] == "ors-key"
        assert "application/geo+json" in request.headers["Accept"]
        assert result.coordinates == [[-87.6298, 41.8781], [-104.9903, 39.7392]]
        assert result.distance_m == 1_600_000.0
        assert result.duration_s == 54_000.0

    @pytest.mark.anyio
    async def test_no_features(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"type": "FeatureCollection", "features": []})

        provider = OpenRouteServiceProvider(api_key="ors-key", client=mock_client(handler))
        with pytest.raises(NoRouteFound, match="No route found"):
            await provider.get_directions(CHICAGO, DENVER)

    @pytest.mark.anyio
    async def test_empty_geometry(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=directions_payload([]))

        provider = OpenRouteServiceProvider(api_key="ors-key", client=mock_client(handler))
        with pytest.raises(NoRouteFound):
            await provider.get_directions(CHICAGO, DENVER)

    @pytest.mark.anyio
    async def test_provider_message_is_surfaced(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                404,
                json={"error": {"code": 2010, "message": "Could not find routable point"}},
            )

        provider = OpenRouteServiceProvider(api_key="ors-key", client=mock_client(handler))
        with pytest.raises(RouteProviderError) as excinfo:
            await provider.get_directions(CHICAGO, DENVER)

        assert str(excinfo.value) == "Could not find routable point"
        assert excinfo.value.status_code == 404
        assert excinfo.value.provider == "openrouteservice"

    @pytest.mark.anyio
    async def test_unparseable_error_body(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, text="<html>oops</html>")

        provider = OpenRouteServiceProvider(api_key="ors-key", client=mock_client(handler))
        with pytest.raises(RouteProviderError, match="API request failed: 500"):
            await provider.get_directions(CHICAGO, DENVER)

    @pytest.mark.anyio
    async def test_missing_key(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("no request expected")

        provider = OpenRouteServiceProvider(api_key=None, client=mock_client(handler))
        with pytest.raises(MissingCredentials):
            await provider.get_directions(CHICAGO, DENVER)

    @pytest.mark.anyio
    async def test_transport_failure(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectTimeout("timed out", request=request)

        provider = OpenRouteServiceProvider(api_key="ors-key", client=mock_client(handler))
        with pytest.raises(NetworkError) as excinfo:
            await provider.get_directions(CHICAGO, DENVER)
        assert excinfo.value.detail == "timed out"

    @pytest.mark.anyio
    async def test_geocode(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.params["size"] == "1"
            return httpx.Response(
                200, json={"features": [{"geometry": {"coordinates": [-104.9903, 39.7392]}}]}
            )

        provider = OpenRouteServiceProvider(api_key="ors-key", client=mock_client(handler))
        assert await provider.geocode("Denver, CO") == DENVER

    @pytest.mark.anyio
    async def test_geocode_match_without_geometry(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"features": [{"properties": {}}]})

        provider = OpenRouteServiceProvider(api_key="ors-key", client=mock_client(handler))
        with pytest.raises(RouteProviderError, match="Malformed geocoding result"):
            await provider.geocode("Chicago")


class TestNominatimProvider:
    """Tests for the Nominatim client."""

    @pytest.mark.anyio
    async def test_search_no_match(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.params["format"] == "json"
            return httpx.Response(200, json=[])

        provider = NominatimProvider(user_agent="tests/1.0", client=mock_client(handler))
        assert await provider.search("nowhere") is None

    @pytest.mark.anyio
    async def test_search_result_without_coordinates(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=[{"lat": None, "lon": "-87.6298"}])

        provider = NominatimProvider(user_agent="tests/1.0", client=mock_client(handler))
        with pytest.raises(RouteProviderError, match="Malformed search result"):
            await provider.search("Chicago")

    @pytest.mark.anyio
    async def test_reverse(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/reverse"
            assert request.url.params["addressdetails"] == "1"
            return httpx.Response(200, json={"address": {"town": "Ogallala", "state": "Nebraska"}})

        provider = NominatimProvider(user_agent="tests/1.0", client=mock_client(handler))
        address = await provider.reverse(Coordinates(latitude=41.128, longitude=-101.719))
        assert address == {"town": "Ogallala", "state": "Nebraska"}


class TestOpenWeatherProvider:
    """Tests for the OpenWeatherMap client."""

    @pytest.mark.anyio
    async def test_get_current(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/data/2.5/weather"
            assert request.url.params["appid"] == "owm-key"
            assert float(request.url.params["lat"]) == pytest.approx(41.8781)
            return httpx.Response(
                200,
                json=owm_payload(
                    "Thunderstorm", "thunderstorm with heavy rain", wind_speed=5.1, visibility=9000
                ),
            )

        provider = OpenWeatherProvider(api_key="owm-key", client=mock_client(handler))
        current = await provider.get_current(CHICAGO)

        assert current.time == datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)
        assert current.condition_main == "Thunderstorm"
        assert current.condition_description == "thunderstorm with heavy rain"
        assert current.wind.speed_ms == 5.1
        assert current.wind.direction_deg == 180
        assert current.visibility_m == 9000
        assert current.temperature_k == 295.15

    @pytest.mark.anyio
    async def test_missing_visibility(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=owm_payload(visibility=None))

        provider = OpenWeatherProvider(api_key="owm-key", client=mock_client(handler))
        current = await provider.get_current(CHICAGO)

        assert current.visibility_m is None
        assert current.effective_visibility_m == 10000

    @pytest.mark.anyio
    async def test_get_forecast(self):
        start = datetime(2024, 6, 1, 0, 0, tzinfo=timezone.utc)

        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/data/2.5/forecast"
            return httpx.Response(200, json=owm_forecast_payload(start, steps=16, pop=0.72))

        provider = OpenWeatherProvider(api_key="owm-key", client=mock_client(handler))
        forecast = await provider.get_forecast(CHICAGO)

        assert len(forecast) == 16
        assert forecast[0].time == start
        assert forecast[1].time == datetime(2024, 6, 1, 3, 0, tzinfo=timezone.utc)
        assert all(entry.precipitation_probability == 0.72 for entry in forecast)

    @pytest.mark.anyio
    async def test_forecast_without_pop(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"list": [owm_payload()]})

        provider = OpenWeatherProvider(api_key="owm-key", client=mock_client(handler))
        forecast = await provider.get_forecast(CHICAGO)
        assert forecast[0].precipitation_probability == 0.0

    @pytest.mark.anyio
    async def test_rate_limited(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(429, headers={"Retry-After": "60"}, json={"cod": 429})

        provider = OpenWeatherProvider(api_key="owm-key", client=mock_client(handler))
        with pytest.raises(RateLimitError) as excinfo:
            await provider.get_current(CHICAGO)
        assert excinfo.value.retry_after == 60

    @pytest.mark.anyio
    async def test_invalid_key_message(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(401, json={"cod": 401, "message": "Invalid API key."})

        provider = OpenWeatherProvider(api_key="bad", client=mock_client(handler))
        with pytest.raises(ProviderError, match="Invalid API key"):
            await provider.get_current(CHICAGO)

    @pytest.mark.anyio
    async def test_missing_key(self):
        provider = OpenWeatherProvider(api_key="", client=mock_client(lambda r: httpx.Response(200)))
        with pytest.raises(MissingCredentials, match="openweather_api_key"):
            await provider.get_forecast(CHICAGO)

    @pytest.mark.anyio
    async def test_owned_client_closed(self):
        async with OpenWeatherProvider(api_key="owm-key") as provider:
            assert provider._client is not None
        assert provider._client is None

    @pytest.mark.anyio
    async def test_shared_client_not_closed(self):
        client = mock_client(lambda r: httpx.Response(200, json=owm_payload()))
        async with OpenWeatherProvider(api_key="owm-key", client=client):
            pass
        assert not client.is_closed
        await client.aclose()
