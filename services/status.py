"""Dashboard status derivation built on the alert bound check."""

from __future__ import annotations

from typing import Optional

from models.records import SensorConfig, SensorKind
from services.alerts import evaluate

NO_DATA = "No Data"
ACTIVE = "Active"
NORMAL = "Normal"
TOO_LOW = "Too Low"
TOO_HIGH = "Too High"
FLOAT_OK = "OK"
FLOAT_ALERT = "Alert"

PLACEHOLDER = "--"


def value_status(sensor: SensorConfig, value: Optional[float]) -> str:
    if value is None:
        return NO_DATA
    if not sensor.has_bounds:
        return ACTIVE
    if not evaluate(sensor, value).is_alert:
        return NORMAL
    if sensor.min_value is not None and value < sensor.min_value:
        return TOO_LOW
    return TOO_HIGH


def float_status(sensor: SensorConfig, value: Optional[float]) -> str:
    if value is None:
        return NO_DATA
    return FLOAT_ALERT if evaluate(sensor, value).is_alert else FLOAT_OK


def sensor_status(sensor: SensorConfig, value: Optional[float]) -> str:
    if sensor.kind is SensorKind.float_switch:
        return float_status(sensor, value)
    return value_status(sensor, value)


def display_value(sensor: SensorConfig, value: Optional[float]) -> str:
    """Render the latest value the way the dashboard cards show it."""
    if value is None:
        return PLACEHOLDER
    if sensor.kind is SensorKind.float_switch:
        return "ALERT" if evaluate(sensor, value).is_alert else "OK"
    return f"{value:.1f}"
