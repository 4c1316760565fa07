"""Application exception classes."""


class ConfigError(Exception):
    """Raised when configuration is invalid or incomplete."""


class WeatherProviderError(Exception):
    """Raised when weather provider requests or normalization fail."""


class WeatherTransportError(WeatherProviderError):
    """Raised for network failures and unusable HTTP status codes."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class WeatherDecodeError(WeatherProviderError):
    """Raised when a provider response does not match the expected shape."""
