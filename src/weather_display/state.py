"""Observable application state shared with display layers."""

from __future__ import annotations

import threading
from collections.abc import Callable, Sequence
from typing import Literal

from pydantic import BaseModel, Field

from .forecast.aggregator import DEFAULT_DAY_COUNT, placeholder_summary
from .forecast.models import CurrentConditions, DailySummary

StateField = Literal["current", "forecast", "location_name", "is_loading", "error_message"]
StateListener = Callable[["WeatherState", StateField], None]


class WeatherStateSnapshot(BaseModel):
    """Point-in-time copy of the state, suitable for JSON output."""

    location_name: str | None = None
    current: CurrentConditions | None = None
    forecast: list[DailySummary] = Field(default_factory=list)
    is_loading: bool = False
    error_message: str | None = None


class WeatherState:
    """Holds the current-conditions and forecast slots plus fetch status.

    Every setter replaces exactly one slot under a lock and then notifies
    listeners with the name of the slot that changed. Readers always see a
    whole value, never a partially written one.
    """

    def __init__(self, *, forecast_day_count: int = DEFAULT_DAY_COUNT) -> None:
        self._lock = threading.Lock()
        self._listeners: list[StateListener] = []
        self._current: CurrentConditions | None = None
        self._forecast: tuple[DailySummary, ...] = tuple(
            placeholder_summary(index) for index in range(forecast_day_count)
        )
        self._location_name: str | None = None
        self._is_loading = False
        self._error_message: str | None = None

    @property
    def current(self) -> CurrentConditions | None:
        return self._current

    @property
    def forecast(self) -> tuple[DailySummary, ...]:
        return self._forecast

    @property
    def location_name(self) -> str | None:
        return self._location_name

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    @property
    def error_message(self) -> str | None:
        return self._error_message

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a change listener; returns a callable that unsubscribes it."""
        with self._lock:
            self._listeners.append(listener)

        def _unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return _unsubscribe

    def set_current(self, conditions: CurrentConditions) -> None:
        with self._lock:
            self._current = conditions
        self._notify("current")

    def set_forecast(self, summaries: Sequence[DailySummary]) -> None:
        with self._lock:
            self._forecast = tuple(summaries)
        self._notify("forecast")

    def set_location_name(self, name: str | None) -> None:
        with self._lock:
            if name == self._location_name:
                return
            self._location_name = name
        self._notify("location_name")

    def set_loading(self, loading: bool) -> None:
        with self._lock:
            if loading == self._is_loading:
                return
            self._is_loading = loading
        self._notify("is_loading")

    def set_error(self, message: str | None) -> None:
        with self._lock:
            if message == self._error_message:
                return
            self._error_message = message
        self._notify("error_message")

    def snapshot(self) -> WeatherStateSnapshot:
        with self._lock:
            return WeatherStateSnapshot(
                location_name=self._location_name,
                current=self._current,
                forecast=list(self._forecast),
                is_loading=self._is_loading,
                error_message=self._error_message,
            )

    def _notify(self, field: StateField) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            listener(self, field)
