"""Reading ingestion: persist, evaluate, and notify on alert transitions."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional

from app.schemas import Sensor
from datastore.app_settings import SettingsStore
from datastore.database import utcnow
from datastore.sensors import SensorRepository
from models.records import SensorKind
from services.alerts import AlertEvaluator, Transition
from services.notifier import (
    NotificationGateway,
    NotificationPreferences,
    NotificationResult,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IngestResult:
    sensor: Sensor
    value: float
    transition: Optional[Transition] = None
    notification: Optional[NotificationResult] = None


class IngestionService:
    """Handles one incoming reading to completion before returning."""

    def __init__(
        self,
        sensors: SensorRepository,
        settings_store: SettingsStore,
        evaluator: AlertEvaluator,
        gateway: NotificationGateway,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.sensors = sensors
        self.settings_store = settings_store
        self.evaluator = evaluator
        self.gateway = gateway
        self._clock = clock

    def ingest(self, api_key: str, raw_value: object) -> IngestResult:
        """Store a reading for the sensor owning ``api_key``.

        Raises ``KeyError`` for an unknown key and ``ValueError`` for a missing
        or non-numeric value; nothing is written in either case.
        """
        sensor = self.sensors.find_by_api_key(api_key)
        if sensor is None:
            raise KeyError("Invalid API key")

        value = self.parse_value(raw_value)
        if sensor.sensor_type is SensorKind.float_switch:
            value = 1.0 if value else 0.0

        now = self._clock()
        sensor = self.sensors.add_reading(sensor.id, value, now)
        logger.debug(
            "Reading stored",
            extra={"sensor_id": sensor.id, "sensor_name": sensor.name, "value": value},
        )

        preferences = NotificationPreferences.from_settings(self.settings_store.all())
        repeat = (
            timedelta(minutes=preferences.alert_repeat_minutes)
            if preferences.alert_repeat_minutes
            else None
        )
        decision = self.evaluator.observe(sensor.to_config(), value, now, repeat_interval=repeat)
        if not decision.should_notify:
            return IngestResult(sensor=sensor, value=value)

        log = logger.info if decision.transition is Transition.recovered else logger.warning
        log(
            decision.evaluation.message,
            extra={
                "sensor_id": sensor.id,
                "value": value,
                "transition": decision.transition.value,
            },
        )

        notification: Optional[NotificationResult] = None
        notifier = self.gateway.notifier(preferences) if preferences.alerts_enabled else None
        if notifier is not None:
            notification = notifier.send(
                decision.title, decision.evaluation.message, decision.priority
            )
            if not notification.success:
                logger.warning(
                    "Alert notification failed",
                    extra={"sensor_id": sensor.id, "error": notification.error},
                )

        return IngestResult(
            sensor=sensor,
            value=value,
            transition=decision.transition,
            notification=notification,
        )

    @staticmethod
    def parse_value(raw: object) -> float:
        if raw is None:
            raise ValueError("Value is required.")
        if isinstance(raw, bool):
            return 1.0 if raw else 0.0
        if isinstance(raw, (int, float)):
            try:
                value = float(raw)
            except OverflowError as exc:
                raise ValueError(f"Invalid value {raw!r}.") from exc
        elif isinstance(raw, str):
            candidate = raw.strip()
            if not candidate:
                raise ValueError("Value is required.")
            try:
                value = float(candidate)
            except ValueError as exc:
                raise ValueError(f"Invalid value {raw!r}.") from exc
        else:
            raise ValueError(f"Invalid value {raw!r}.")

        if not math.isfinite(value):
            raise ValueError(f"Invalid value {raw!r}.")
        return value

