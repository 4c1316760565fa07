"""Weather provider integrations."""

from .base import WeatherProvider
from .models import CurrentObservation, ForecastSeries, RawSample
from .openweathermap import OpenWeatherMapProvider

__all__ = [
    "CurrentObservation",
    "ForecastSeries",
    "OpenWeatherMapProvider",
    "RawSample",
    "WeatherProvider",
]
