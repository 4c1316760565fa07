"""OpenWeatherMap (api.openweathermap.org/data/2.5) weather provider implementation."""

from __future__ import annotations

import logging
import math
import time
from datetime import UTC, datetime
from typing import Any

import httpx

from ..config import Settings
from ..exceptions import WeatherDecodeError, WeatherProviderError, WeatherTransportError
from ..redaction import sanitize_params, sanitize_text
from .base import WeatherProvider
from .models import CurrentObservation, ForecastSeries, RawSample

# OpenWeatherMap leaves `visibility` out when it is unrestricted (10 km cap).
DEFAULT_VISIBILITY_METERS = 10_000
DEFAULT_CONDITION_CODE = "Clear"


class OpenWeatherMapProvider(WeatherProvider):
    """Fetches and normalizes current and 5-day/3-hour forecast data."""

    provider_name = "openweathermap"

    def __init__(
        self,
        settings: Settings,
        logger: logging.Logger,
        max_retries: int | None = None,
        retry_delay_seconds: float = 1.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.settings = settings
        self.logger = logger
        self._max_retries = (
            settings.weather_max_retries if max_retries is None else max_retries
        )
        self._retry_delay = retry_delay_seconds
        self._client = httpx.Client(
            timeout=settings.weather_timeout_seconds,
            headers={"Accept": "application/json"},
            transport=transport,
        )

    def __enter__(self) -> OpenWeatherMapProvider:
        return self

    def __exit__(self, exc_type: Any, exc: Any, exc_tb: Any) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def fetch_current(self, city: str) -> CurrentObservation:
        """Fetch `/weather` for a city and normalize it."""
        payload = self._request_json(
            self._endpoint("weather"), self._query(city), context="current weather"
        )
        return self._normalize_current(payload)

    def fetch_forecast(self, city: str) -> ForecastSeries:
        """Fetch `/forecast` for a city and normalize its sample list."""
        payload = self._request_json(
            self._endpoint("forecast"), self._query(city), context="forecast"
        )
        return self._normalize_forecast(payload)

    def _endpoint(self, name: str) -> str:
        return f"{self.settings.base_url}/{name}"

    def _query(self, city: str) -> dict[str, str]:
        city = city.strip()
        if not city:
            raise WeatherProviderError("City name must not be empty.")
        return {
            "q": city,
            "appid": self.settings.openweather_api_key,
            "units": self.settings.temperature_units,
            "lang": self.settings.language,
        }

    def _request_json(self, url: str, params: dict[str, str], context: str) -> dict[str, Any]:
        last_error: Exception | None = None
        self.logger.debug(
            "OpenWeatherMap %s request %s params=%s", context, url, sanitize_params(params)
        )
        for attempt in range(self._max_retries + 1):
            try:
                response = self._client.get(url, params=params)
                response.raise_for_status()
            except httpx.HTTPStatusError as exc:
                status = exc.response.status_code
                # Don't retry 4xx client errors except 429 rate-limit.
                if 400 <= status < 500 and status != 429:
                    raise WeatherTransportError(
                        f"OpenWeatherMap {context} failed with status {status} "
                        f"at {url}: {sanitize_text(exc.response.text[:300])}",
                        status_code=status,
                    ) from exc
                last_error = exc
                if attempt < self._max_retries:
                    self.logger.warning(
                        "OpenWeatherMap %s failed (HTTP %d); retrying",
                        context, status,
                    )
                    time.sleep(self._retry_delay)
                    continue
                raise WeatherTransportError(
                    f"OpenWeatherMap {context} failed with status {status} "
                    f"at {url}: {sanitize_text(exc.response.text[:300])}",
                    status_code=status,
                ) from exc
            except httpx.HTTPError as exc:
                last_error = exc
                if attempt < self._max_retries:
                    self.logger.warning(
                        "OpenWeatherMap %s request failed (%s); retrying",
                        context, type(exc).__name__,
                    )
                    time.sleep(self._retry_delay)
                    continue
                raise WeatherTransportError(
                    f"OpenWeatherMap {context} request failed at {url}: "
                    f"{sanitize_text(str(exc))}"
                ) from exc

            try:
                payload = response.json()
            except ValueError as exc:
                raise WeatherDecodeError(
                    f"OpenWeatherMap {context} returned non-JSON response at {url}."
                ) from exc

            if not isinstance(payload, dict):
                raise WeatherDecodeError(
                    f"OpenWeatherMap {context} returned unexpected payload type "
                    f"{type(payload).__name__} at {url}."
                )
            self.logger.debug("OpenWeatherMap %s succeeded (attempt %d)", context, attempt + 1)
            return payload

        raise WeatherTransportError(
            f"OpenWeatherMap {context} failed after retries: "
            f"{sanitize_text(str(last_error))}"
        )

    def _normalize_current(self, payload: dict[str, Any]) -> CurrentObservation:
        main = payload.get("main")
        if not isinstance(main, dict):
            raise WeatherDecodeError("Current weather payload missing 'main' object.")
        temperature = self._as_float(main.get("temp"))
        if temperature is None:
            raise WeatherDecodeError("Current weather payload missing numeric 'main.temp'.")
        humidity = self._as_int(main.get("humidity"))
        if humidity is None:
            raise WeatherDecodeError("Current weather payload missing numeric 'main.humidity'.")

        wind = payload.get("wind")
        wind_speed = self._as_float(wind.get("speed")) if isinstance(wind, dict) else None
        if wind_speed is None:
            raise WeatherDecodeError("Current weather payload missing numeric 'wind.speed'.")

        visibility = self._as_int(payload.get("visibility"))
        if visibility is None:
            visibility = DEFAULT_VISIBILITY_METERS

        condition, description = self._primary_condition(payload.get("weather"))
        return CurrentObservation(
            temperature=temperature,
            humidity=humidity,
            wind_speed_ms=wind_speed,
            visibility_m=visibility,
            condition_code=condition,
            condition_description=description,
            location_name=self._as_str(payload.get("name")),
            retrieved_at=datetime.now(UTC),
        )

    def _normalize_forecast(self, payload: dict[str, Any]) -> ForecastSeries:
        items = payload.get("list")
        if not isinstance(items, list):
            raise WeatherDecodeError("Forecast payload missing 'list' array.")

        samples: list[RawSample] = []
        for item in items:
            sample = self._normalize_sample(item)
            if sample is not None:
                samples.append(sample)
        if items and not samples:
            raise WeatherDecodeError("Forecast payload items were present but not parseable.")
        if len(samples) < len(items):
            self.logger.warning(
                "Dropped %d unparseable forecast items", len(items) - len(samples)
            )

        city_name: str | None = None
        utc_offset: int | None = None
        city = payload.get("city")
        if isinstance(city, dict):
            city_name = self._as_str(city.get("name"))
            utc_offset = self._as_int(city.get("timezone"))

        return ForecastSeries(
            samples=samples,
            city_name=city_name,
            utc_offset_seconds=utc_offset,
            retrieved_at=datetime.now(UTC),
        )

    def _normalize_sample(self, item: Any) -> RawSample | None:
        if not isinstance(item, dict):
            return None
        dt = self._as_float(item.get("dt"))
        main = item.get("main")
        temperature = self._as_float(main.get("temp")) if isinstance(main, dict) else None
        if dt is None or temperature is None:
            return None
        try:
            timestamp = datetime.fromtimestamp(dt, tz=UTC)
        except (OverflowError, OSError, ValueError):
            return None
        condition, _ = self._primary_condition(item.get("weather"))
        return RawSample(timestamp=timestamp, temperature=temperature, condition_code=condition)

    def _primary_condition(self, weather: Any) -> tuple[str, str | None]:
        if isinstance(weather, list) and weather and isinstance(weather[0], dict):
            first = weather[0]
            return (
                self._as_str(first.get("main")) or DEFAULT_CONDITION_CODE,
                self._as_str(first.get("description")),
            )
        return DEFAULT_CONDITION_CODE, None

    @staticmethod
    def _as_str(value: Any) -> str | None:
        if isinstance(value, str) and value.strip():
            return value.strip()
        return None

    @staticmethod
    def _as_int(value: Any) -> int | None:
        if isinstance(value, bool):
            return None
        if isinstance(value, int):
            return value
        if isinstance(value, float) and math.isfinite(value):
            return int(value)
        return None

    @staticmethod
    def _as_float(value: Any) -> float | None:
        if isinstance(value, bool):
            return None
        if isinstance(value, (int, float)) and math.isfinite(value):
            return float(value)
        return None
