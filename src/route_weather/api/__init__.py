"""FastAPI application and routes.

## API Structure

- /health - Liveness check
- /api/route-weather - Plan a route and fetch waypoint weather
- /api/advice - Advisory for already fetched waypoint weather

There is no authentication; provider API keys come from configuration or
the request body.
"""

from route_weather.api.app import create_app

__all__ = ["create_app"]
