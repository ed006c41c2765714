"""Command-line interface for route weather advisories."""

import argparse
import asyncio
import json
import logging
import sys
from datetime import date

from route_weather.advisory.severity import has_severe_conditions
from route_weather.advisory.synthesizer import generate_advice
from route_weather.config import get_settings
from route_weather.exceptions import RouteWeatherError, WeatherFetchFailed
from route_weather.formatting import (
    capitalize_first,
    format_temperature,
    format_visibility,
    format_wind_speed,
)
from route_weather.models.advice import RouteWeatherReport
from route_weather.pipeline import plan_route_weather

logger = logging.getLogger("route_weather")

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_WEATHER_UNAVAILABLE = 2


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid date '{value}', expected YYYY-MM-DD")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="route-weather",
        description="Route Weather - Weather exposure and risk advisories for driving routes",
    )
    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s 0.1.0",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Plan command
    plan_parser = subparsers.add_parser(
        "plan", help="Plan a route and report weather along it"
    )
    plan_parser.add_argument("origin", help="Origin (address or lat,lon coordinates)")
    plan_parser.add_argument("destination", help="Destination (address or lat,lon coordinates)")
    plan_parser.add_argument(
        "--pickup", type=_parse_date, default=None, help="Pickup date (YYYY-MM-DD, default today)"
    )
    plan_parser.add_argument(
        "--delivery", type=_parse_date, default=None, help="Delivery date (YYYY-MM-DD, default pickup)"
    )
    plan_parser.add_argument(
        "--json", action="store_true", help="Print the report and advice as JSON"
    )

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default=None, help="Bind address")
    serve_parser.add_argument("--port", type=int, default=None, help="Bind port")

    return parser


def render_report(report: RouteWeatherReport, pickup: date, delivery: date) -> str:
    """Render a plain-text summary of a route weather report."""
    lines = [f"Route: {report.route.summary()}", ""]
    for waypoint in report.waypoints:
        current = waypoint.current
        flag = " [!]" if has_severe_conditions(waypoint) else ""
        temperature = (
            format_temperature(current.temperature_k) if current.temperature_k is not None else "n/a"
        )
        wind = format_wind_speed(current.wind.speed_ms)
        direction = current.wind.direction_cardinal()
        if direction:
            wind = f"{wind} {direction}"
        lines.append(
            f"  {waypoint.location.display_name()}{flag}: "
            f"{capitalize_first(current.condition_description or current.condition_main or 'unknown')}, "
            f"{temperature}, wind {wind}, "
            f"visibility {format_visibility(current.effective_visibility_m)}, "
            f"{len(waypoint.forecast)} forecast steps"
        )
    advice = generate_advice(report.waypoints, pickup, delivery)
    lines.extend(["", f"[{advice.severity.value.upper()}] {advice.message}"])
    lines.extend(f"  - {detail}" for detail in advice.details)
    return "\n".join(lines)


def _run_plan(args: argparse.Namespace) -> int:
    pickup = args.pickup or date.today()
    delivery = args.delivery or pickup
    if delivery < pickup:
        logger.error(f"Delivery date {delivery} is before pickup date {pickup}")
        return EXIT_FAILED

    try:
        report = asyncio.run(
            plan_route_weather(args.origin, args.destination, pickup, delivery)
        )
    except WeatherFetchFailed as e:
        logger.error(f"Weather data could not be loaded: {e}")
        if e.route is not None:
            print(f"Route: {e.route.summary()}")
            print("Route calculated successfully, but weather data could not be loaded.")
            return EXIT_WEATHER_UNAVAILABLE
        return EXIT_FAILED
    except RouteWeatherError as e:
        logger.error(str(e))
        return EXIT_FAILED

    if args.json:
        advice = generate_advice(report.waypoints, pickup, delivery)
        payload = {
            "report": report.model_dump(mode="json"),
            "advice": advice.model_dump(mode="json"),
        }
        print(json.dumps(payload, indent=2))
    else:
        print(render_report(report, pickup, delivery))
    return EXIT_OK


def _run_serve(args: argparse.Namespace) -> int:
    import uvicorn

    from route_weather.api import create_app

    settings = get_settings()
    uvicorn.run(
        create_app(),
        host=args.host or settings.host,
        port=args.port or settings.port,
        log_level=settings.log_level.lower(),
    )
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_OK

    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "plan":
        return _run_plan(args)
    return _run_serve(args)


if __name__ == "__main__":
    sys.exit(main())
