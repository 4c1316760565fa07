"""Fetch cycle: provider requests in, state slots out."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from datetime import UTC, datetime, timedelta, timezone, tzinfo
from typing import Literal

from pydantic import BaseModel, Field

from .config import Settings
from .exceptions import WeatherDecodeError, WeatherProviderError, WeatherTransportError
from .forecast.aggregator import aggregate
from .forecast.current import current_from_observation
from .state import WeatherState
from .weather.base import WeatherProvider

DecisionCode = Literal[
    "refreshed",
    "partial_failure",
    "failed",
    "api_key_not_configured",
    "refresh_in_flight",
]


class RefreshResult(BaseModel):
    """Outcome of one `WeatherManager.refresh` call."""

    city: str
    started: bool
    decision_code: DecisionCode
    current_updated: bool = False
    forecast_updated: bool = False
    errors: list[str] = Field(default_factory=list)


def describe_error(exc: WeatherProviderError) -> str:
    """User-facing message for a provider failure."""
    if isinstance(exc, WeatherTransportError):
        return f"Network error: {exc}"
    if isinstance(exc, WeatherDecodeError):
        return f"Failed to decode weather data: {exc}"
    return str(exc)


class WeatherManager:
    """Run fetch cycles against a provider and publish results into `WeatherState`.

    Current conditions and the forecast are fetched one after the other; each
    success replaces only its own slot and each failure leaves the previous
    value in place. A refresh requested while another is running is ignored.
    """

    def __init__(
        self,
        settings: Settings,
        provider: WeatherProvider,
        state: WeatherState,
        logger: logging.Logger,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.settings = settings
        self.provider = provider
        self.state = state
        self.logger = logger
        self._clock = clock or (lambda: datetime.now(UTC))
        self._in_flight = threading.Lock()

    def refresh(self, city: str | None = None) -> RefreshResult:
        city = (city or self.settings.default_city).strip()
        if not self.settings.api_key_configured:
            self.logger.warning(
                "OpenWeatherMap API key not configured; set OPENWEATHER_API_KEY "
                "(free keys: https://openweathermap.org/api). Skipping fetch."
            )
            return RefreshResult(
                city=city, started=False, decision_code="api_key_not_configured"
            )
        if not self._in_flight.acquire(blocking=False):
            self.logger.info("Refresh for %s ignored; a fetch cycle is already running", city)
            return RefreshResult(city=city, started=False, decision_code="refresh_in_flight")

        errors: list[str] = []
        try:
            self.state.set_error(None)
            self.state.set_loading(True)
            current_updated = self._refresh_current(city, errors)
            forecast_updated = self._refresh_forecast(city, errors)
            if errors:
                self.state.set_error("; ".join(errors))
        finally:
            self.state.set_loading(False)
            self._in_flight.release()

        if not errors:
            decision: DecisionCode = "refreshed"
        elif current_updated or forecast_updated:
            decision = "partial_failure"
        else:
            decision = "failed"
        self.logger.info(
            "Fetch cycle for %s finished: %s (current=%s forecast=%s)",
            city, decision, current_updated, forecast_updated,
        )
        return RefreshResult(
            city=city,
            started=True,
            decision_code=decision,
            current_updated=current_updated,
            forecast_updated=forecast_updated,
            errors=errors,
        )

    def _refresh_current(self, city: str, errors: list[str]) -> bool:
        try:
            observation = self.provider.fetch_current(city)
        except WeatherProviderError as exc:
            self.logger.error("Current weather fetch failed for %s: %s", city, exc)
            errors.append(describe_error(exc))
            return False
        self.state.set_current(current_from_observation(observation))
        if observation.location_name:
            self.state.set_location_name(observation.location_name)
        return True

    def _refresh_forecast(self, city: str, errors: list[str]) -> bool:
        try:
            series = self.provider.fetch_forecast(city)
        except WeatherProviderError as exc:
            self.logger.error("Forecast fetch failed for %s: %s", city, exc)
            errors.append(describe_error(exc))
            return False

        tz: tzinfo | None = None
        offset = series.utc_offset_seconds
        if offset is not None and abs(offset) < 86_400:
            tz = timezone(timedelta(seconds=offset))
        summaries = aggregate(
            series.samples,
            reference_instant=self._clock(),
            target_day_count=self.settings.forecast_day_count,
            tz=tz,
        )
        placeholders = sum(1 for summary in summaries if summary.is_placeholder)
        if placeholders:
            self.logger.info(
                "Forecast for %s padded with %d placeholder days", city, placeholders
            )
        self.state.set_forecast(summaries)
        if self.state.location_name is None and series.city_name:
            self.state.set_location_name(series.city_name)
        return True
