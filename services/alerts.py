"""Out-of-range detection and the per-sensor alert state machine.

``evaluate`` is a pure bound check shared with status derivation and the
telemetry calendar.  ``AlertEvaluator`` wraps it with a two-state machine
(normal / alerting) per sensor: a sensor that trips notifies once, may repeat
on a fixed interval while it stays out of range, and notifies once more on
recovery.

Alert state is process-local and keyed by sensor id.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from functools import lru_cache
from typing import MutableMapping, Optional

from models.records import SensorConfig, SensorKind

PRIORITY_NORMAL = 0
PRIORITY_HIGH = 1


@dataclass(frozen=True)
class Evaluation:
    """Outcome of comparing one reading against a sensor's configuration."""

    is_alert: bool
    message: str


class Transition(str, Enum):
    triggered = "triggered"
    repeated = "repeated"
    recovered = "recovered"


@dataclass
class AlertState:
    alerting: bool = False
    last_notified_at: Optional[datetime] = None


@dataclass(frozen=True)
class AlertDecision:
    """What the state machine concluded for a reading."""

    sensor: SensorConfig
    evaluation: Evaluation
    transition: Optional[Transition] = None

    @property
    def should_notify(self) -> bool:
        return self.transition is not None

    @property
    def title(self) -> str:
        if self.transition is Transition.recovered:
            return f"{self.sensor.label} recovered"
        if self.transition is Transition.repeated:
            return f"{self.sensor.label} still out of range"
        return f"{self.sensor.label} alert"

    @property
    def priority(self) -> int:
        if self.transition is Transition.recovered:
            return PRIORITY_NORMAL
        return PRIORITY_HIGH


def format_reading(value: float, unit: str = "") -> str:
    text = f"{value:g}"
    return f"{text} {unit}" if unit else text


def evaluate(sensor: SensorConfig, value: float) -> Evaluation:
    """Decide whether ``value`` is out of range for ``sensor``."""
    label = sensor.label
    if sensor.kind is SensorKind.float_switch:
        if value != sensor.ok_value:
            return Evaluation(
                is_alert=True,
                message=f"{label} float switch triggered (reading {value:g}, expected {sensor.ok_value})",
            )
        return Evaluation(is_alert=False, message=f"{label} float switch OK")

    reading = format_reading(value, sensor.unit)
    # The lower bound is checked first, so a misconfigured min > max reports "too low".
    if sensor.min_value is not None and value < sensor.min_value:
        limit = format_reading(sensor.min_value, sensor.unit)
        return Evaluation(is_alert=True, message=f"{label} too low: {reading} (min {limit})")
    if sensor.max_value is not None and value > sensor.max_value:
        limit = format_reading(sensor.max_value, sensor.unit)
        return Evaluation(is_alert=True, message=f"{label} too high: {reading} (max {limit})")
    if not sensor.has_bounds:
        return Evaluation(is_alert=False, message=f"{label} active: {reading}")
    return Evaluation(is_alert=False, message=f"{label} back to normal: {reading}")


class AlertEvaluator:
    """Tracks per-sensor alert state and decides when a notification is due."""

    def __init__(self, states: Optional[MutableMapping[str, AlertState]] = None) -> None:
        self._states: MutableMapping[str, AlertState] = states if states is not None else {}

    def evaluate(self, sensor: SensorConfig, value: float) -> Evaluation:
        return evaluate(sensor, value)

    def observe(
        self,
        sensor: SensorConfig,
        value: float,
        now: datetime,
        repeat_interval: Optional[timedelta] = None,
    ) -> AlertDecision:
        """Feed a new reading through the state machine."""
        evaluation = evaluate(sensor, value)
        if not sensor.alerts_enabled:
            self.reset(sensor.sensor_id)
            return AlertDecision(sensor=sensor, evaluation=evaluation)

        state = self._states.setdefault(sensor.sensor_id, AlertState())
        transition: Optional[Transition] = None

        if evaluation.is_alert:
            if not state.alerting:
                state.alerting = True
                state.last_notified_at = now
                transition = Transition.triggered
            elif self._repeat_due(state, now, repeat_interval):
                state.last_notified_at = now
                transition = Transition.repeated
        elif state.alerting:
            state.alerting = False
            state.last_notified_at = None
            transition = Transition.recovered

        return AlertDecision(sensor=sensor, evaluation=evaluation, transition=transition)

    def reset(self, sensor_id: str) -> None:
        self._states.pop(sensor_id, None)

    def state_for(self, sensor_id: str) -> AlertState:
        state = self._states.get(sensor_id)
        if state is None:
            return AlertState()
        return AlertState(alerting=state.alerting, last_notified_at=state.last_notified_at)

    @staticmethod
    def _repeat_due(
        state: AlertState, now: datetime, repeat_interval: Optional[timedelta]
    ) -> bool:
        if repeat_interval is None or repeat_interval <= timedelta(0):
            return False
        if state.last_notified_at is None:
            return True
        return now - state.last_notified_at >= repeat_interval


@lru_cache
def build_default_evaluator() -> AlertEvaluator:
    """The process-wide evaluator; its state lives as long as the app."""
    return AlertEvaluator()
