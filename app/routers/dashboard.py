"""Read-only views: live parameter status and the telemetry calendar."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends

from app.dependencies import get_chart_limit, get_sensor_repository, get_settings_store
from app.schemas import DailySummary, ParameterStatus, Reading, TelemetryResponse
from datastore.app_settings import SettingsStore
from datastore.database import utcnow
from datastore.sensors import SensorRepository
from services.status import display_value, sensor_status
from services.telemetry import TelemetryAggregator, one_month_before, resolve_timezone

router = APIRouter(prefix="/api", tags=["dashboard"])


@router.get(
    "/parameters",
    response_model=List[ParameterStatus],
    summary="Latest value and status for every sensor.",
)
async def list_parameters(
    sensors: SensorRepository = Depends(get_sensor_repository),
) -> List[ParameterStatus]:
    cards: List[ParameterStatus] = []
    for sensor in sensors.list_sensors():
        config = sensor.to_config()
        cards.append(
            ParameterStatus(
                id=sensor.id,
                icon=sensor.icon,
                label=sensor.type,
                value=display_value(config, sensor.latest_value),
                unit=sensor.unit,
                status=sensor_status(config, sensor.latest_value),
                color=sensor.color,
                sensor_type=sensor.sensor_type,
            )
        )
    return cards


@router.get(
    "/telemetry/{sensor_type}",
    response_model=TelemetryResponse,
    summary="Past month of readings and a per-day summary for a sensor type.",
)
async def get_telemetry(
    sensor_type: str,
    sensors: SensorRepository = Depends(get_sensor_repository),
    settings_store: SettingsStore = Depends(get_settings_store),
    chart_limit: int = Depends(get_chart_limit),
) -> TelemetryResponse:
    sensor = sensors.find_by_type(sensor_type)
    if sensor is None:
        return TelemetryResponse()

    readings = sensors.readings_since(sensor.id, one_month_before(utcnow()))
    aggregator = TelemetryAggregator(resolve_timezone(settings_store.get("timezone")))
    days = aggregator.daily_summary(sensor.to_config(), readings)

    return TelemetryResponse(
        sensor=sensor,
        readings=[
            Reading(value=reading.value, recorded_at=reading.timestamp)
            for reading in readings[-chart_limit:]
        ],
        daily_summary=[DailySummary.model_validate(day) for day in days],
    )
