"""Provider-agnostic weather interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from .models import CurrentObservation, ForecastSeries


class WeatherProvider(ABC):
    """Base contract for weather providers used by the fetch cycle."""

    @abstractmethod
    def fetch_current(self, city: str) -> CurrentObservation:
        """Fetch and normalize current conditions for a city."""

    @abstractmethod
    def fetch_forecast(self, city: str) -> ForecastSeries:
        """Fetch and normalize the sub-daily forecast for a city."""

    @abstractmethod
    def close(self) -> None:
        """Release provider resources."""
