"""Tests for structured console logging."""

from __future__ import annotations

import json
import logging

from weather_display.log_setup import JsonConsoleFormatter, setup_logger


def test_formatter_emits_json_and_redacts_keys() -> None:
    record = logging.LogRecord(
        name="weather_display",
        level=logging.WARNING,
        pathname=__file__,
        lineno=1,
        msg="GET %s failed",
        args=("https://api.openweathermap.org/data/2.5/weather?q=北京&appid=abc123",),
        exc_info=None,
    )
    event = json.loads(JsonConsoleFormatter().format(record))

    assert event["level"] == "WARNING"
    assert event["logger"] == "weather_display"
    assert "abc123" not in event["message"]
    assert "q=北京" in event["message"]


def test_setup_logger_is_idempotent() -> None:
    first = setup_logger("weather_display.test_idempotent", level="DEBUG")
    second = setup_logger("weather_display.test_idempotent")
    assert first is second
    assert len(second.handlers) == 1
    assert second.propagate is False


def test_setup_logger_applies_level_on_repeat_call() -> None:
    logger = setup_logger("weather_display.test_relevel")
    assert logger.level == logging.INFO

    setup_logger("weather_display.test_relevel", level="WARNING")
    assert logger.level == logging.WARNING
    assert len(logger.handlers) == 1


def test_setup_logger_quiets_http_client_request_logs() -> None:
    logging.getLogger("httpx").setLevel(logging.DEBUG)
    setup_logger("weather_display.test_http_quiet")
    assert logging.getLogger("httpx").level == logging.WARNING
    assert logging.getLogger("httpcore").level == logging.WARNING
    assert not logging.getLogger("httpx").isEnabledFor(logging.INFO)
