"""Typed settings loader for the weather display back-end."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import AnyUrl, Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigError

API_KEY_PLACEHOLDER = "YOUR_API_KEY_HERE"


class Settings(BaseSettings):
    """Application settings loaded from environment variables and `.env`."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    openweather_api_key: str = Field(
        default=API_KEY_PLACEHOLDER, alias="OPENWEATHER_API_KEY", repr=False
    )
    openweather_base_url: AnyUrl = Field(
        default="https://api.openweathermap.org/data/2.5",
        alias="OPENWEATHER_BASE_URL",
        validate_default=True,
    )
    default_city: str = Field(default="Beijing", alias="WEATHER_DEFAULT_CITY")
    temperature_units: Literal["metric", "imperial", "standard"] = Field(
        default="metric",
        alias="WEATHER_UNITS",
    )
    language: str = Field(default="zh_cn", alias="WEATHER_LANGUAGE")
    forecast_day_count: int = Field(default=8, alias="FORECAST_DAY_COUNT")
    weather_timeout_seconds: float = Field(default=10.0, alias="WEATHER_TIMEOUT_SECONDS")
    weather_max_retries: int = Field(default=1, alias="WEATHER_MAX_RETRIES")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        alias="LOG_LEVEL",
    )

    @field_validator("openweather_api_key", "default_city", "language", mode="before")
    @classmethod
    def strip_strings(cls, value: Any) -> Any:
        """Trim whitespace that commonly sneaks into `.env` values."""
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("temperature_units", mode="before")
    @classmethod
    def lower_units(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_log_level(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @model_validator(mode="after")
    def validate_ranges(self) -> Settings:
        """Validate numeric and string settings."""
        if not self.default_city:
            raise ValueError("WEATHER_DEFAULT_CITY must not be empty.")
        if not self.language:
            raise ValueError("WEATHER_LANGUAGE must not be empty.")
        if self.forecast_day_count <= 0:
            raise ValueError("FORECAST_DAY_COUNT must be > 0.")
        if self.weather_timeout_seconds <= 0:
            raise ValueError("WEATHER_TIMEOUT_SECONDS must be > 0.")
        if self.weather_max_retries < 0:
            raise ValueError("WEATHER_MAX_RETRIES must be >= 0.")
        if self.openweather_base_url.scheme not in {"http", "https"}:
            raise ValueError("OPENWEATHER_BASE_URL must be an http(s) URL.")
        return self

    @property
    def api_key_configured(self) -> bool:
        """True when a real key replaced the template placeholder."""
        key = self.openweather_api_key
        return bool(key) and API_KEY_PLACEHOLDER not in key

    @property
    def base_url(self) -> str:
        return str(self.openweather_base_url).rstrip("/")

    def safe_summary(self) -> dict[str, Any]:
        """Return config summary safe for logging (no credentials)."""
        return {
            "base_url": self.base_url,
            "api_key_configured": self.api_key_configured,
            "default_city": self.default_city,
            "temperature_units": self.temperature_units,
            "language": self.language,
            "forecast_day_count": self.forecast_day_count,
            "weather_timeout_seconds": self.weather_timeout_seconds,
            "weather_max_retries": self.weather_max_retries,
        }


def load_settings() -> Settings:
    """Load and validate settings, raising ConfigError on failure."""
    try:
        return Settings()
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Failed reading environment/.env: {exc}") from exc
