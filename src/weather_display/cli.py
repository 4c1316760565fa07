"""Terminal front-end: run one fetch cycle and print the resulting state."""

from __future__ import annotations

import argparse
import logging
import sys

from rich.console import Console
from rich.table import Table

from .config import Settings, load_settings
from .exceptions import ConfigError
from .log_setup import setup_logger
from .manager import RefreshResult, WeatherManager
from .state import WeatherState, WeatherStateSnapshot
from .weather.openweathermap import OpenWeatherMapProvider


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse weather display CLI arguments."""
    parser = argparse.ArgumentParser(
        description="Fetch current weather and a daily forecast from OpenWeatherMap."
    )
    parser.add_argument(
        "--city",
        type=str,
        default=None,
        help="City to query (defaults to WEATHER_DEFAULT_CITY).",
    )
    parser.add_argument(
        "--days",
        type=int,
        default=None,
        help="Number of forecast rows to show (defaults to FORECAST_DAY_COUNT).",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the state snapshot as JSON instead of tables.",
    )
    return parser.parse_args(argv)


def _print_snapshot(console: Console, snapshot: WeatherStateSnapshot, units: str) -> None:
    degree = {"metric": "°C", "imperial": "°F"}.get(units, "K")
    console.print(f"Location={snapshot.location_name or '-'}")

    current = snapshot.current
    if current is None:
        console.print("No current conditions available.")
    else:
        condition = current.condition.value
        if current.description:
            condition = f"{condition} ({current.description})"
        console.print(
            f"{current.temperature}{degree} {condition} | "
            f"湿度 {current.humidity}% | 风速 {current.wind_speed_kmh}km/h | "
            f"能见度 {current.visibility_km}km"
        )

    table = Table(title="每日预报")
    table.add_column("Day")
    table.add_column("Condition")
    table.add_column("High")
    table.add_column("Low")
    table.add_column("Icon")
    table.add_column("Source")
    for summary in snapshot.forecast:
        table.add_row(
            summary.day,
            summary.condition.value,
            f"{summary.high_temp}{degree}",
            f"{summary.low_temp}{degree}",
            summary.icon.value,
            "placeholder" if summary.is_placeholder else "provider",
        )
    console.print(table)

    if snapshot.error_message:
        console.print(f"[red]Error:[/red] {snapshot.error_message}")


def _exit_code(result: RefreshResult) -> int:
    if result.decision_code == "api_key_not_configured":
        return 3
    if result.decision_code in {"failed", "partial_failure"}:
        return 4
    return 0


def run(args: argparse.Namespace, settings: Settings, logger: logging.Logger) -> int:
    console = Console()
    if args.days is not None and args.days <= 0:
        logger.error("--days must be > 0 when provided.")
        return 2
    if args.days is not None:
        settings = settings.model_copy(update={"forecast_day_count": args.days})

    state = WeatherState(forecast_day_count=settings.forecast_day_count)
    logger.debug("Settings: %s", settings.safe_summary())
    with OpenWeatherMapProvider(settings=settings, logger=logger) as provider:
        manager = WeatherManager(settings=settings, provider=provider, state=state, logger=logger)
        result = manager.refresh(args.city)

    snapshot = state.snapshot()
    if args.json:
        console.print_json(snapshot.model_dump_json())
    else:
        _print_snapshot(console, snapshot, settings.temperature_units)
    return _exit_code(result)


def main(argv: list[str] | None = None) -> int:
    """Run the weather display CLI."""
    args = parse_args(argv)
    logger = setup_logger()

    try:
        settings = load_settings()
    except ConfigError as exc:
        logger.error("Configuration failure: %s", exc)
        return 2
    logger = setup_logger(level=settings.log_level)

    try:
        return run(args, settings, logger)
    except Exception as exc:  # pragma: no cover - last-resort catch for CLI runtime
        logger.exception("Unexpected weather CLI failure: %s", exc)
        return 99


if __name__ == "__main__":
    sys.exit(main())
