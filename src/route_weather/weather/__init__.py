"""Weather acquisition and forecast windowing."""

from route_weather.weather.fetcher import WeatherFetcher
from route_weather.weather.windowing import forecast_window, window_forecast

__all__ = [
    "WeatherFetcher",
    "forecast_window",
    "window_forecast",
]
