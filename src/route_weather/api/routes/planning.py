"""Route planning and advisory routes."""

from __future__ import annotations

import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field, model_validator

from route_weather import pipeline
from route_weather.advisory.synthesizer import generate_advice
from route_weather.config import Settings, get_settings
from route_weather.exceptions import (
    AddressNotFound,
    MissingCredentials,
    NetworkError,
    NoRouteFound,
    RouteWeatherError,
    WeatherFetchFailed,
)
from route_weather.models.advice import WeatherAdvice
from route_weather.models.location import RouteData
from route_weather.models.weather import WaypointWeather

logger = logging.getLogger(__name__)

router = APIRouter()


class RouteWeatherRequest(BaseModel):
    """Route weather request."""

    origin: str = Field(..., min_length=1, description="Origin address or 'lat,lon'")
    destination: str = Field(..., min_length=1, description="Destination address or 'lat,lon'")
    pickup_date: date
    delivery_date: date
    openroute_api_key: str | None = None
    openweather_api_key: str | None = None

    @model_validator(mode="after")
    def delivery_not_before_pickup(self) -> RouteWeatherRequest:
        if self.delivery_date < self.pickup_date:
            raise ValueError("delivery_date must not be before pickup_date")
        return self


class RouteWeatherResponse(BaseModel):
    """Route, waypoint weather and advisory.

    When weather could not be fetched, `waypoints` is empty, `advice` is
    null and `weather_error` explains why; the route is still returned.
    """

    route: RouteData
    waypoints: list[WaypointWeather]
    advice: WeatherAdvice | None = None
    weather_error: str | None = None


class AdviceRequest(BaseModel):
    """Advisory request for already fetched waypoint weather."""

    waypoints: list[WaypointWeather] = Field(default_factory=list)
    pickup_date: date | None = None
    delivery_date: date | None = None


def _status_for(error: RouteWeatherError) -> int:
    if isinstance(error, MissingCredentials):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(error, (AddressNotFound, NoRouteFound)):
        return status.HTTP_404_NOT_FOUND
    if isinstance(error, NetworkError):
        return status.HTTP_503_SERVICE_UNAVAILABLE
    return status.HTTP_502_BAD_GATEWAY


@router.post("/route-weather", response_model=RouteWeatherResponse)
async def route_weather(
    request: RouteWeatherRequest,
    settings: Settings = Depends(get_settings),
) -> RouteWeatherResponse:
    """Plan a route and report weather exposure along it."""
    try:
        report = await pipeline.plan_route_weather(
            request.origin,
            request.destination,
            request.pickup_date,
            request.delivery_date,
            openroute_api_key=request.openroute_api_key,
            openweather_api_key=request.openweather_api_key,
            settings=settings,
        )
    except WeatherFetchFailed as e:
        if e.route is None:
            raise HTTPException(status_code=_status_for(e), detail=str(e))
        logger.warning(f"Weather unavailable for planned route: {e}")
        return RouteWeatherResponse(
            route=e.route,
            waypoints=[],
            weather_error=(
                "Route calculated successfully, but weather data could not be "
                f"loaded: {e}"
            ),
        )
    except RouteWeatherError as e:
        raise HTTPException(status_code=_status_for(e), detail=str(e))

    return RouteWeatherResponse(
        route=report.route,
        waypoints=report.waypoints,
        advice=generate_advice(report.waypoints, request.pickup_date, request.delivery_date),
    )


@router.post("/advice", response_model=WeatherAdvice)
async def advice(request: AdviceRequest) -> WeatherAdvice:
    """Generate an advisory from waypoint weather (no upstream calls)."""
    return generate_advice(request.waypoints, request.pickup_date, request.delivery_date)
