"""Convert a current-weather observation into display units."""

from __future__ import annotations

from ..weather.models import CurrentObservation
from .models import CurrentConditions
from .rounding import round_half_away, truncating_div
from .vocabulary import translate_condition

MS_TO_KMH = 3.6


def map_current(
    temperature: float,
    humidity: int,
    wind_speed_ms: float,
    visibility_m: int,
    condition_raw: str,
    description: str | None = None,
) -> CurrentConditions:
    """Round temperature, convert m/s to km/h, and truncate metres to whole kilometres.

    Non-finite temperature or wind speed becomes 0 rather than raising.
    """
    return CurrentConditions(
        temperature=round_half_away(temperature),
        condition=translate_condition(condition_raw),
        description=description,
        humidity=humidity,
        wind_speed_kmh=round_half_away(wind_speed_ms * MS_TO_KMH),
        visibility_km=truncating_div(visibility_m, 1000),
    )


def current_from_observation(observation: CurrentObservation) -> CurrentConditions:
    return map_current(
        temperature=observation.temperature,
        humidity=observation.humidity,
        wind_speed_ms=observation.wind_speed_ms,
        visibility_m=observation.visibility_m,
        condition_raw=observation.condition_code,
        description=observation.condition_description,
    )
