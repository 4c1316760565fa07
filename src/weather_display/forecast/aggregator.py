"""Bucket sub-daily forecast samples into per-day display summaries."""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, datetime, tzinfo

from ..weather.models import RawSample
from .models import WEEKDAY_KEYS, DailySummary, DayKey, DisplayCondition, IconId
from .rounding import round_half_away
from .vocabulary import icon_for, translate_condition

DEFAULT_DAY_COUNT = 8

PLACEHOLDER_CONDITION = DisplayCondition.CLOUDY
PLACEHOLDER_ICON = IconId.CLOUD_SUN
PLACEHOLDER_HIGH = 22
PLACEHOLDER_LOW = 15


@dataclass(slots=True)
class _DayBucket:
    high: float
    low: float
    condition_code: str


def _as_local(value: datetime, tz: tzinfo) -> datetime:
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(tz)


def _resolve_tz(reference_instant: datetime, tz: tzinfo | None) -> tzinfo:
    if tz is not None:
        return tz
    return reference_instant.tzinfo or UTC


def day_key_for(
    timestamp: datetime,
    reference_instant: datetime,
    tz: tzinfo | None = None,
) -> DayKey:
    """Return TODAY for the reference instant's calendar day, else the weekday key.

    Only the weekday is kept, so dates seven days apart share a key.
    """
    zone = _resolve_tz(reference_instant, tz)
    local = _as_local(timestamp, zone)
    if local.date() == _as_local(reference_instant, zone).date():
        return DayKey.TODAY
    return WEEKDAY_KEYS[local.weekday()]


def placeholder_summary(index: int) -> DailySummary:
    """Synthetic row used to pad the forecast up to the configured day count."""
    return DailySummary(
        day=f"周{index}",
        day_key=None,
        condition=PLACEHOLDER_CONDITION,
        high_temp=PLACEHOLDER_HIGH,
        low_temp=PLACEHOLDER_LOW,
        icon=PLACEHOLDER_ICON,
        is_placeholder=True,
    )


def aggregate(
    samples: Iterable[RawSample],
    reference_instant: datetime,
    target_day_count: int = DEFAULT_DAY_COUNT,
    tz: tzinfo | None = None,
) -> list[DailySummary]:
    """Summarize samples into exactly `target_day_count` days in canonical day order.

    Each day's condition comes from its earliest sample. Days missing from the
    input are skipped and the tail is padded with placeholder rows.
    """
    usable = [
        sample for sample in samples if math.isfinite(sample.temperature)
    ]
    usable.sort(
        key=lambda sample: (
            _as_local(sample.timestamp, UTC), sample.condition_code, sample.temperature
        )
    )

    buckets: dict[DayKey, _DayBucket] = {}
    for sample in usable:
        key = day_key_for(sample.timestamp, reference_instant, tz)
        bucket = buckets.get(key)
        if bucket is None:
            buckets[key] = _DayBucket(
                high=sample.temperature,
                low=sample.temperature,
                condition_code=sample.condition_code,
            )
            continue
        bucket.high = max(bucket.high, sample.temperature)
        bucket.low = min(bucket.low, sample.temperature)

    summaries: list[DailySummary] = []
    for key in DayKey:
        bucket = buckets.get(key)
        if bucket is None:
            continue
        summaries.append(
            DailySummary(
                day=key.label,
                day_key=key,
                condition=translate_condition(bucket.condition_code),
                high_temp=round_half_away(bucket.high),
                low_temp=round_half_away(bucket.low),
                icon=icon_for(bucket.condition_code),
            )
        )

    target = max(target_day_count, 0)
    del summaries[target:]
    while len(summaries) < target:
        summaries.append(placeholder_summary(len(summaries)))
    return summaries
