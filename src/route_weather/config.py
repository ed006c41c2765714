"""Application configuration.

Configuration is loaded from environment variables using pydantic-settings.
Provider credentials have no built-in defaults and must be supplied via
environment variables (or passed explicitly to the entry points).

## Provider Credentials

- OPENROUTE_API_KEY: OpenRouteService key (routing + forward geocoding)
- OPENWEATHER_API_KEY: OpenWeatherMap key (current conditions + forecast)

## Optional Environment Variables

- NOMINATIM_USER_AGENT: Client identifier sent to Nominatim (required by its usage policy)
- HTTP_TIMEOUT_SECONDS: Timeout applied to every upstream request (default: 30)
- LOG_LEVEL: Logging level for the CLI and server (default: INFO)
- DEBUG: Enable debug mode (default: false)

## Example .env file

```
OPENROUTE_API_KEY=your-openrouteservice-key
OPENWEATHER_API_KEY=your-openweathermap-key
NOMINATIM_USER_AGENT=acme-dispatch/1.0 ops@example.com
```
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Route Weather"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    # Server
    host: str = "127.0.0.1"
    port: int = 8000
    allowed_origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:8000"],
        description="CORS allowed origins",
    )

    # Provider credentials
    openroute_api_key: str | None = None
    openweather_api_key: str | None = None
    nominatim_user_agent: str = Field(
        default="route-weather/0.1.0",
        description="User-Agent for Nominatim (required)",
    )
    http_timeout_seconds: float = Field(default=30.0, gt=0)

    # Waypoint sampling
    waypoint_base_interval_km: float = Field(default=80.0, gt=0)
    waypoint_interval_factor: float = Field(default=1.5, gt=0)
    max_intermediate_waypoints: int = Field(default=10, ge=1)

    # Nominatim tolerates ~1 request/second per client
    reverse_geocode_batch_size: int = Field(default=3, ge=1)
    reverse_geocode_stagger_seconds: float = Field(default=0.2, ge=0)
    reverse_geocode_batch_pause_seconds: float = Field(default=1.2, ge=0)

    # OpenWeatherMap free tier allows ~60 calls/minute
    weather_batch_size: int = Field(default=5, ge=1)
    weather_batch_pause_seconds: float = Field(default=0.2, ge=0)

    @field_validator("openroute_api_key", "openweather_api_key", mode="before")
    @classmethod
    def blank_key_is_missing(cls, v: str | None) -> str | None:
        """Treat empty or whitespace-only keys as not configured."""
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v

    @property
    def waypoint_interval_km(self) -> float:
        """Along-route distance between intermediate samples."""
        return self.waypoint_base_interval_km * self.waypoint_interval_factor

    @property
    def credentials_configured(self) -> bool:
        """Check if both provider credentials are configured."""
        return bool(self.openroute_api_key and self.openweather_api_key)


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Settings are loaded once and cached. To reload, clear the cache:
    ```python
    get_settings.cache_clear()
    ```
    """
    return Settings()


def get_settings_uncached() -> Settings:
    """Get fresh settings without caching.

    Useful for testing when environment variables change.
    """
    return Settings()
