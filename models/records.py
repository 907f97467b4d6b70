"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class SensorKind(str, Enum):
    """How a sensor's readings are interpreted."""

    continuous = "value"
    float_switch = "float"


@dataclass(frozen=True, slots=True)
class SensorConfig:
    """The part of a sensor's configuration that alerting and status depend on."""

    sensor_id: str
    label: str
    unit: str = ""
    kind: SensorKind = SensorKind.continuous
    min_value: Optional[float] = None
    max_value: Optional[float] = None
    ok_value: int = 1
    alerts_enabled: bool = True

    @property
    def has_bounds(self) -> bool:
        return self.min_value is not None or self.max_value is not None


@dataclass(slots=True)
class SensorReading:
    """A single stored reading."""

    sensor_id: str
    timestamp: datetime
    value: float
