"""Display-side records produced by the forecast aggregation pipeline."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class DayKey(str, Enum):
    """Bucket identity for a forecast day; declaration order is display order."""

    TODAY = "今天"
    MON = "周一"
    TUE = "周二"
    WED = "周三"
    THU = "周四"
    FRI = "周五"
    SAT = "周六"
    SUN = "周日"

    @property
    def label(self) -> str:
        return self.value


# Indexed by datetime.weekday(): Monday == 0.
WEEKDAY_KEYS: tuple[DayKey, ...] = (
    DayKey.MON,
    DayKey.TUE,
    DayKey.WED,
    DayKey.THU,
    DayKey.FRI,
    DayKey.SAT,
    DayKey.SUN,
)


class DisplayCondition(str, Enum):
    """Human-facing weather condition labels."""

    CLEAR = "晴朗"
    CLOUDY = "多云"
    RAIN = "雨"
    DRIZZLE = "小雨"
    THUNDERSTORM = "雷雨"
    SNOW = "雪"
    FOG = "雾"
    HAZE = "霾"


class IconId(str, Enum):
    """Symbol names understood by the display layer."""

    SUN_MAX = "sun.max"
    CLOUD_SUN = "cloud.sun"
    CLOUD_RAIN = "cloud.rain"
    CLOUD_DRIZZLE = "cloud.drizzle"
    CLOUD_BOLT = "cloud.bolt"
    CLOUD_SNOW = "cloud.snow"
    CLOUD_FOG = "cloud.fog"
    SUN_HAZE = "sun.haze"


class DailySummary(BaseModel):
    """One aggregated forecast day."""

    model_config = ConfigDict(frozen=True)

    day: str = Field(description="Display label, e.g. '今天' or '周三'")
    day_key: DayKey | None = Field(
        default=None, description="Grouping key; None for placeholder rows"
    )
    condition: DisplayCondition
    high_temp: int
    low_temp: int
    icon: IconId
    is_placeholder: bool = Field(
        default=False, description="True when the row was synthesized to fill the day count"
    )

    @model_validator(mode="after")
    def validate_temperature_order(self) -> DailySummary:
        if self.high_temp < self.low_temp:
            raise ValueError(
                f"high_temp ({self.high_temp}) must be >= low_temp ({self.low_temp})."
            )
        return self


class CurrentConditions(BaseModel):
    """Current conditions converted to display units."""

    model_config = ConfigDict(frozen=True)

    temperature: int
    condition: DisplayCondition
    description: str | None = Field(
        default=None, description="Provider wording for the condition, in the request language"
    )
    humidity: int
    wind_speed_kmh: int
    visibility_km: int
