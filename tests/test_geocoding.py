"""Tests for address resolution."""

import httpx
import pytest

from conftest import mock_client
from route_weather.exceptions import AddressNotFound, NetworkError, RouteProviderError
from route_weather.models.location import Coordinates
from route_weather.providers.nominatim import NominatimProvider
from route_weather.providers.openroute import OpenRouteServiceProvider
from route_weather.routing.geocoding import GeocodingResolver

ORS_HOST = "api.openrouteservice.org"
NOMINATIM_HOST = "nominatim.openstreetmap.org"


def resolver_for(handler) -> GeocodingResolver:
    client = mock_client(handler)
    return GeocodingResolver(
        OpenRouteServiceProvider(api_key="ors-key", client=client),
        NominatimProvider(user_agent="tests/1.0", client=client),
    )


class TestGeocodingResolver:
    """Tests for GeocodingResolver."""

    @pytest.mark.anyio
    async def test_primary_provider(self):
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            assert request.url.host == ORS_HOST
            assert request.url.path == "/geocode/search"
            assert request.url.params["text"] == "Chicago, IL"
            assert request.headers["Authorization"] == "ors-key"
            return httpx.Response(
                200, json={"features": [{"geometry": {"coordinates": [-87.6298, 41.8781]}}]}
            )

        coords = await resolver_for(handler).resolve("Chicago, IL")

        assert coords == Coordinates(latitude=41.8781, longitude=-87.6298)
        assert len(requests) == 1

    @pytest.mark.anyio
    async def test_falls_back_when_primary_has_no_match(self):
        hosts: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            hosts.append(request.url.host)
            if request.url.host == ORS_HOST:
                return httpx.Response(200, json={"features": []})
            assert request.url.params["q"] == "Ogallala"
            assert request.url.params["limit"] == "1"
            assert request.headers["User-Agent"] == "tests/1.0"
            return httpx.Response(200, json=[{"lat": "41.128", "lon": "-101.719"}])

        coords = await resolver_for(handler).resolve("Ogallala")

        assert hosts == [ORS_HOST, NOMINATIM_HOST]
        assert coords == Coordinates(latitude=41.128, longitude=-101.719)

    @pytest.mark.anyio
    async def test_falls_back_when_primary_errors(self):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.host == ORS_HOST:
                return httpx.Response(403, json={"error": {"message": "Access denied"}})
            return httpx.Response(200, json=[{"lat": "39.7392", "lon": "-104.9903"}])

        coords = await resolver_for(handler).resolve("Denver")
        assert coords.latitude == pytest.approx(39.7392)

    @pytest.mark.anyio
    async def test_address_not_found(self):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.host == ORS_HOST:
                return httpx.Response(200, json={"features": []})
            return httpx.Response(200, json=[])

        with pytest.raises(AddressNotFound) as excinfo:
            await resolver_for(handler).resolve("Nowhere at all")
        assert excinfo.value.address == "Nowhere at all"

    @pytest.mark.anyio
    async def test_network_error_suggests_coordinates(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Network is unreachable", request=request)

        with pytest.raises(NetworkError, match="coordinates"):
            await resolver_for(handler).resolve("Chicago, IL")

    @pytest.mark.anyio
    async def test_fallback_provider_error_is_surfaced(self):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.host == ORS_HOST:
                return httpx.Response(200, json={"features": []})
            return httpx.Response(400, json={"error": {"message": "Nothing to search for"}})

        with pytest.raises(RouteProviderError, match="Geocoding failed: Nothing to search for"):
            await resolver_for(handler).resolve("?")

    @pytest.mark.anyio
    async def test_network_hint_in_provider_message(self):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.host == ORS_HOST:
                return httpx.Response(200, json={"features": []})
            return httpx.Response(502, json={"message": "Upstream network failure"})

        with pytest.raises(NetworkError):
            await resolver_for(handler).resolve("Chicago, IL")

    @pytest.mark.anyio
    async def test_literal_coordinates_skip_geocoding(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("no request expected")

        coords = await resolver_for(handler).resolve("41.8781, -87.6298")
        assert coords == Coordinates(latitude=41.8781, longitude=-87.6298)

    @pytest.mark.anyio
    async def test_falls_back_when_primary_match_has_no_geometry(self):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.host == ORS_HOST:
                return httpx.Response(200, json={"features": [{"properties": {}}]})
            return httpx.Response(200, json=[{"lat": "41.8781", "lon": "-87.6298"}])

        coords = await resolver_for(handler).resolve("Chicago")
        assert coords == Coordinates(latitude=41.8781, longitude=-87.6298)

    @pytest.mark.anyio
    async def test_malformed_fallback_result(self):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.host == ORS_HOST:
                return httpx.Response(200, json={"features": []})
            return httpx.Response(200, json=[{"display_name": "Chicago"}])

        with pytest.raises(RouteProviderError, match="Malformed search result"):
            await resolver_for(handler).resolve("Chicago")
