"""Typed models for normalized OpenWeatherMap responses."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class RawSample(BaseModel):
    """One timestamped forecast slot as reported by the provider."""

    model_config = ConfigDict(frozen=True)

    timestamp: datetime
    temperature: float
    condition_code: str = "Clear"


class CurrentObservation(BaseModel):
    """Normalized current-weather response."""

    temperature: float
    humidity: int
    wind_speed_ms: float
    visibility_m: int
    condition_code: str = "Clear"
    condition_description: str | None = None
    location_name: str | None = None
    retrieved_at: datetime


class ForecastSeries(BaseModel):
    """Normalized forecast response: sub-daily samples plus city metadata."""

    samples: list[RawSample] = Field(default_factory=list)
    city_name: str | None = None
    utc_offset_seconds: int | None = None
    retrieved_at: datetime
