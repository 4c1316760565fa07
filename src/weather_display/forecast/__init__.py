"""Forecast aggregation and display-vocabulary mapping."""

from .aggregator import DEFAULT_DAY_COUNT, aggregate, day_key_for, placeholder_summary
from .current import current_from_observation, map_current
from .models import CurrentConditions, DailySummary, DayKey, DisplayCondition, IconId
from .vocabulary import icon_for, translate_condition

__all__ = [
    "DEFAULT_DAY_COUNT",
    "CurrentConditions",
    "DailySummary",
    "DayKey",
    "DisplayCondition",
    "IconId",
    "aggregate",
    "current_from_observation",
    "day_key_for",
    "icon_for",
    "map_current",
    "placeholder_summary",
    "translate_condition",
]
