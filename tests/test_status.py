from __future__ import annotations

from models.records import SensorConfig, SensorKind
from services.status import display_value, sensor_status


def _sensor(**overrides) -> SensorConfig:
    values = dict(sensor_id="ph", label="pH", min_value=7.8, max_value=8.4)
    values.update(overrides)
    return SensorConfig(**values)


def test_value_sensor_statuses() -> None:
    sensor = _sensor()

    assert sensor_status(sensor, None) == "No Data"
    assert sensor_status(sensor, 7.5) == "Too Low"
    assert sensor_status(sensor, 8.6) == "Too High"
    assert sensor_status(sensor, 8.1) == "Normal"


def test_unbounded_sensor_is_active() -> None:
    assert sensor_status(_sensor(min_value=None, max_value=None), 3.0) == "Active"


def test_float_switch_statuses() -> None:
    sensor = _sensor(kind=SensorKind.float_switch, min_value=None, max_value=None, ok_value=1)

    assert sensor_status(sensor, None) == "No Data"
    assert sensor_status(sensor, 1.0) == "OK"
    assert sensor_status(sensor, 0.0) == "Alert"


def test_display_value_formats() -> None:
    assert display_value(_sensor(), 8.123) == "8.1"
    assert display_value(_sensor(), None) == "--"
    switch = _sensor(kind=SensorKind.float_switch, ok_value=1)
    assert display_value(switch, 0.0) == "ALERT"
    assert display_value(switch, 1.0) == "OK"
