"""Weather display back-end: OpenWeatherMap client, forecast aggregation, observable state."""

__version__ = "0.1.0"
