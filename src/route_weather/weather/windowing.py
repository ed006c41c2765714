"""Forecast windowing for a shipment's pickup/delivery dates."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date, datetime, time, timedelta, timezone

from route_weather.models.weather import ForecastEntry

# Eight 3-hour steps, roughly the next 24 hours
FALLBACK_ENTRIES = 8


def as_utc_datetime(value: date | datetime) -> datetime:
    """Normalize a date (midnight UTC) or datetime (naive = UTC) to an aware UTC datetime."""
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    return datetime.combine(value, time.min, tzinfo=timezone.utc)


def forecast_window(
    pickup: date | datetime,
    delivery: date | datetime,
) -> tuple[datetime, datetime]:
    """The inclusive window from pickup through one day past delivery."""
    return as_utc_datetime(pickup), as_utc_datetime(delivery) + timedelta(days=1)


def window_forecast(
    entries: Sequence[ForecastEntry],
    pickup: date | datetime,
    delivery: date | datetime,
) -> list[ForecastEntry]:
    """Keep forecast entries inside [pickup, delivery + 1 day].

    When nothing falls inside the window, the first eight raw entries are
    returned instead so callers always have near-term context.
    """
    start, end = forecast_window(pickup, delivery)
    windowed = [entry for entry in entries if start <= entry.time <= end]
    if windowed:
        return windowed
    return list(entries[:FALLBACK_ENTRIES])
