"""Provider condition vocabulary to display vocabulary."""

from __future__ import annotations

from .models import DisplayCondition, IconId

DEFAULT_CONDITION = DisplayCondition.CLOUDY
DEFAULT_ICON = IconId.CLOUD_SUN

_CONDITIONS: dict[str, DisplayCondition] = {
    "clear": DisplayCondition.CLEAR,
    "clouds": DisplayCondition.CLOUDY,
    "rain": DisplayCondition.RAIN,
    "drizzle": DisplayCondition.DRIZZLE,
    "thunderstorm": DisplayCondition.THUNDERSTORM,
    "snow": DisplayCondition.SNOW,
    "mist": DisplayCondition.FOG,
    "fog": DisplayCondition.FOG,
    "haze": DisplayCondition.HAZE,
}

_ICONS: dict[str, IconId] = {
    "clear": IconId.SUN_MAX,
    "clouds": IconId.CLOUD_SUN,
    "rain": IconId.CLOUD_RAIN,
    "drizzle": IconId.CLOUD_DRIZZLE,
    "thunderstorm": IconId.CLOUD_BOLT,
    "snow": IconId.CLOUD_SNOW,
    "mist": IconId.CLOUD_FOG,
    "fog": IconId.CLOUD_FOG,
    "haze": IconId.SUN_HAZE,
}


def _normalize(raw: object) -> str:
    return raw.strip().lower() if isinstance(raw, str) else ""


def translate_condition(raw: object) -> DisplayCondition:
    """Map a provider condition (e.g. 'Clouds') to its display condition."""
    return _CONDITIONS.get(_normalize(raw), DEFAULT_CONDITION)


def icon_for(raw: object) -> IconId:
    """Map a provider condition to an icon id; unknown values get the partly-cloudy icon."""
    return _ICONS.get(_normalize(raw), DEFAULT_ICON)
