"""Logging setup for command-line and embedded use."""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from typing import Any

from .redaction import sanitize_text

# httpx logs every request URL at INFO, and ours carry `appid` in the query.
HTTP_CLIENT_LOGGERS = ("httpx", "httpcore")


class JsonConsoleFormatter(logging.Formatter):
    """One JSON object per line; message and traceback pass through redaction."""

    def format(self, record: logging.LogRecord) -> str:
        event: dict[str, Any] = {
            "ts": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": sanitize_text(record.getMessage()),
        }
        if record.exc_info:
            event["exception"] = sanitize_text(self.formatException(record.exc_info))
        return json.dumps(event, ensure_ascii=False, default=str)


def quiet_http_client_loggers(level: int = logging.WARNING) -> None:
    """Keep third-party HTTP client loggers from echoing credentialed URLs."""
    for name in HTTP_CLIENT_LOGGERS:
        logging.getLogger(name).setLevel(level)


def setup_logger(name: str = "weather_display", level: int | str = logging.INFO) -> logging.Logger:
    """Configure the app logger; calling again only updates the level.

    `level` accepts the `LOG_LEVEL` setting names directly.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = False
    quiet_http_client_loggers()
    if logger.handlers:
        return logger

    handler = logging.StreamHandler()
    handler.setFormatter(JsonConsoleFormatter())
    logger.addHandler(handler)
    return logger
