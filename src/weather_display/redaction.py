"""Helpers for redacting API keys from logs and error messages."""

from __future__ import annotations

import re
from typing import Any

REDACTED = "[REDACTED]"

_SENSITIVE_KEY_RE = re.compile(
    r"(appid|token|secret|api[_-]?key|authorization)",
    re.IGNORECASE,
)
# OpenWeatherMap takes the key as a query parameter, so it shows up inside URLs.
_QUERY_SECRET_RE = re.compile(r"(?i)([?&](?:appid|api[_-]?key)=)[^&\s#'\"]+")
_KEY_VALUE_SECRET_RE = re.compile(
    r"""(?ix)
    \b
    (
      appid|
      token|
      secret|
      api[_-]?key|
      openweather[_-]api[_-]key
    )
    \s*[:=]\s*
    ([^\s,;&]+)
    """
)


def sanitize_text(text: str) -> str:
    """Redact sensitive content embedded in plain text."""
    sanitized = _QUERY_SECRET_RE.sub(r"\1" + REDACTED, text)
    sanitized = _KEY_VALUE_SECRET_RE.sub(
        lambda m: m.group(0) if m.group(2) == REDACTED else f"{m.group(1)}={REDACTED}",
        sanitized,
    )
    return sanitized


def sanitize_params(params: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of request params with secret values masked."""
    return {
        key: REDACTED if _SENSITIVE_KEY_RE.search(str(key)) else value
        for key, value in params.items()
    }
