"""Tests for the OpenWeatherMap provider using a mocked HTTP transport."""

from __future__ import annotations

import logging
from collections.abc import Callable
from types import SimpleNamespace
from typing import Any

import httpx
import pytest

from weather_display.exceptions import (
    WeatherDecodeError,
    WeatherProviderError,
    WeatherTransportError,
)
from weather_display.weather.openweathermap import OpenWeatherMapProvider

API_KEY = "secret-key-123"

CURRENT_PAYLOAD: dict[str, Any] = {
    "weather": [{"main": "Clouds", "description": "多云", "icon": "03d"}],
    "main": {"temp": 21.6, "humidity": 58, "temp_min": 19.0, "temp_max": 23.0},
    "wind": {"speed": 3.5},
    "visibility": 10000,
    "name": "Beijing",
}

FORECAST_PAYLOAD: dict[str, Any] = {
    "list": [
        {
            "dt": 1771934400,
            "main": {"temp": 12.3, "humidity": 40, "temp_min": 11.0, "temp_max": 13.0},
            "weather": [{"main": "Rain", "description": "小雨", "icon": "10d"}],
        },
        {
            "dt": 1771945200,
            "main": {"temp": 15.1, "humidity": 38, "temp_min": 14.0, "temp_max": 16.0},
            "weather": [],
        },
        {"dt": "not-a-number", "main": {"temp": 10.0}},
        "garbage",
    ],
    "city": {"name": "Beijing", "timezone": 28800},
}


def _make_settings(**overrides: Any) -> Any:
    defaults = {
        "base_url": "https://api.openweathermap.org/data/2.5",
        "openweather_api_key": API_KEY,
        "temperature_units": "metric",
        "language": "zh_cn",
        "weather_timeout_seconds": 5.0,
        "weather_max_retries": 1,
    }
    defaults.update(overrides)
    return SimpleNamespace(**defaults)


def _make_provider(
    handler: Callable[[httpx.Request], httpx.Response], **settings_overrides: Any
) -> OpenWeatherMapProvider:
    return OpenWeatherMapProvider(
        settings=_make_settings(**settings_overrides),
        logger=logging.getLogger("test_openweathermap"),
        retry_delay_seconds=0.0,
        transport=httpx.MockTransport(handler),
    )


def test_current_weather_request_and_normalization() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=CURRENT_PAYLOAD)

    with _make_provider(handler) as provider:
        observation = provider.fetch_current(" Beijing ")

    assert len(seen) == 1
    request = seen[0]
    assert request.url.path == "/data/2.5/weather"
    assert request.url.params["q"] == "Beijing"
    assert request.url.params["appid"] == API_KEY
    assert request.url.params["units"] == "metric"
    assert request.url.params["lang"] == "zh_cn"

    assert observation.temperature == 21.6
    assert observation.humidity == 58
    assert observation.wind_speed_ms == 3.5
    assert observation.visibility_m == 10000
    assert observation.condition_code == "Clouds"
    assert observation.condition_description == "多云"
    assert observation.location_name == "Beijing"


def test_forecast_normalization_drops_unparseable_items() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/data/2.5/forecast"
        return httpx.Response(200, json=FORECAST_PAYLOAD)

    with _make_provider(handler) as provider:
        series = provider.fetch_forecast("Beijing")

    assert len(series.samples) == 2
    first, second = series.samples
    assert first.timestamp.tzinfo is not None
    assert first.timestamp.timestamp() == 1771934400
    assert first.temperature == 12.3
    assert first.condition_code == "Rain"
    assert second.condition_code == "Clear"
    assert series.city_name == "Beijing"
    assert series.utc_offset_seconds == 28800


def test_missing_visibility_defaults_to_ten_km() -> None:
    payload = {key: value for key, value in CURRENT_PAYLOAD.items() if key != "visibility"}
    with _make_provider(lambda request: httpx.Response(200, json=payload)) as provider:
        assert provider.fetch_current("Beijing").visibility_m == 10000


def test_client_error_is_not_retried_and_key_is_redacted() -> None:
    calls = {"n": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["n"] += 1
        return httpx.Response(
            401, text=f'{{"cod":401,"message":"Invalid API key appid={API_KEY}"}}'
        )

    with _make_provider(handler) as provider:
        with pytest.raises(WeatherTransportError) as exc_info:
            provider.fetch_current("Beijing")

    assert calls["n"] == 1
    assert exc_info.value.status_code == 401
    assert API_KEY not in str(exc_info.value)


def test_server_error_is_retried_then_succeeds() -> None:
    calls = {"n": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["n"] += 1
        if calls["n"] == 1:
            return httpx.Response(503, text="unavailable")
        return httpx.Response(200, json=CURRENT_PAYLOAD)

    with _make_provider(handler) as provider:
        observation = provider.fetch_current("Beijing")

    assert calls["n"] == 2
    assert observation.location_name == "Beijing"


def test_rate_limit_exhausts_retries() -> None:
    calls = {"n": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["n"] += 1
        return httpx.Response(429, text="slow down")

    with _make_provider(handler, weather_max_retries=2) as provider:
        with pytest.raises(WeatherTransportError, match="status 429") as exc_info:
            provider.fetch_forecast("Beijing")

    assert calls["n"] == 3
    assert exc_info.value.status_code == 429


def test_network_failure_raises_transport_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError(f"connection refused for {request.url}", request=request)

    with _make_provider(handler) as provider:
        with pytest.raises(WeatherTransportError, match="request failed") as exc_info:
            provider.fetch_current("Beijing")

    assert API_KEY not in str(exc_info.value)
    assert exc_info.value.status_code is None


def test_non_json_response_raises_decode_error() -> None:
    with _make_provider(lambda request: httpx.Response(200, text="<html>oops</html>")) as provider:
        with pytest.raises(WeatherDecodeError, match="non-JSON"):
            provider.fetch_current("Beijing")


def test_non_object_payload_raises_decode_error() -> None:
    with _make_provider(lambda request: httpx.Response(200, json=[1, 2, 3])) as provider:
        with pytest.raises(WeatherDecodeError, match="unexpected payload type list"):
            provider.fetch_forecast("Beijing")


@pytest.mark.parametrize(
    ("payload", "message"),
    [
        ({"wind": {"speed": 1.0}}, "missing 'main' object"),
        ({"main": {"humidity": 40}, "wind": {"speed": 1.0}}, "main.temp"),
        ({"main": {"temp": 10.0}, "wind": {"speed": 1.0}}, "main.humidity"),
        ({"main": {"temp": 10.0, "humidity": 40}}, "wind.speed"),
    ],
)
def test_malformed_current_payload_raises(payload: dict[str, Any], message: str) -> None:
    with _make_provider(lambda request: httpx.Response(200, json=payload)) as provider:
        with pytest.raises(WeatherDecodeError, match=message):
            provider.fetch_current("Beijing")


def test_forecast_without_list_raises() -> None:
    with _make_provider(lambda request: httpx.Response(200, json={"cod": "200"})) as provider:
        with pytest.raises(WeatherDecodeError, match="missing 'list' array"):
            provider.fetch_forecast("Beijing")


def test_forecast_with_only_garbage_items_raises() -> None:
    payload = {"list": [None, "garbage", {"dt": 1}]}
    with _make_provider(lambda request: httpx.Response(200, json=payload)) as provider:
        with pytest.raises(WeatherDecodeError, match="not parseable"):
            provider.fetch_forecast("Beijing")


def test_empty_forecast_list_is_not_an_error() -> None:
    with _make_provider(lambda request: httpx.Response(200, json={"list": []})) as provider:
        assert provider.fetch_forecast("Beijing").samples == []


def test_blank_city_is_rejected_before_any_request() -> None:
    def handler(request: httpx.Request) -> httpx.Response:  # pragma: no cover
        raise AssertionError("no request expected")

    with _make_provider(handler) as provider:
        with pytest.raises(WeatherProviderError, match="City name must not be empty"):
            provider.fetch_current("   ")
