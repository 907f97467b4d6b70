"""Sensor configuration endpoints."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from app.dependencies import get_evaluator, get_sensor_repository
from app.schemas import Acknowledgement, Sensor, SensorCreate, SensorDetail, SensorUpdate
from datastore.sensors import SensorRepository
from services.alerts import AlertEvaluator

router = APIRouter(prefix="/api/sensors", tags=["sensors"])

_NOT_FOUND = "Sensor not found"


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=_NOT_FOUND)


@router.get("", response_model=List[Sensor], summary="List sensors with their latest reading.")
async def list_sensors(
    sensors: SensorRepository = Depends(get_sensor_repository),
) -> List[Sensor]:
    return sensors.list_sensors()


@router.post(
    "",
    response_model=Sensor,
    status_code=status.HTTP_201_CREATED,
    summary="Register a sensor and issue its API key.",
)
async def create_sensor(
    payload: SensorCreate,
    sensors: SensorRepository = Depends(get_sensor_repository),
) -> Sensor:
    return sensors.create(payload)


@router.get(
    "/{sensor_id}",
    response_model=SensorDetail,
    summary="Fetch a sensor and its most recent readings.",
)
async def get_sensor(
    sensor_id: str,
    sensors: SensorRepository = Depends(get_sensor_repository),
) -> SensorDetail:
    try:
        return sensors.get_sensor(sensor_id)
    except KeyError as exc:
        raise _not_found() from exc


@router.put("/{sensor_id}", response_model=Sensor, summary="Update a sensor's configuration.")
async def update_sensor(
    sensor_id: str,
    payload: SensorUpdate,
    sensors: SensorRepository = Depends(get_sensor_repository),
    evaluator: AlertEvaluator = Depends(get_evaluator),
) -> Sensor:
    try:
        sensor = sensors.update(sensor_id, payload)
    except KeyError as exc:
        raise _not_found() from exc
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    if not sensor.alerts_enabled or payload.sensor_type is not None:
        evaluator.reset(sensor.id)
    return sensor


@router.delete(
    "/{sensor_id}",
    response_model=Acknowledgement,
    summary="Delete a sensor together with its readings.",
)
async def delete_sensor(
    sensor_id: str,
    sensors: SensorRepository = Depends(get_sensor_repository),
    evaluator: AlertEvaluator = Depends(get_evaluator),
) -> Acknowledgement:
    try:
        sensors.delete(sensor_id)
    except KeyError as exc:
        raise _not_found() from exc
    evaluator.reset(sensor_id)
    return Acknowledgement()


@router.post(
    "/{sensor_id}/regenerate-key",
    response_model=Sensor,
    summary="Issue a new API key, invalidating the old one.",
)
async def regenerate_key(
    sensor_id: str,
    sensors: SensorRepository = Depends(get_sensor_repository),
) -> Sensor:
    try:
        return sensors.regenerate_key(sensor_id)
    except KeyError as exc:
        raise _not_found() from exc
