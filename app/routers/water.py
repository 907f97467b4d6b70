"""Manual water-test parameters and their reading history."""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.dependencies import get_settings_store, get_water_repository
from app.schemas import (
    Acknowledgement,
    WaterParameter,
    WaterParameterCreate,
    WaterParameterUpdate,
    WaterReading,
    WaterReadingCreate,
)
from datastore.app_settings import SettingsStore
from datastore.water import WaterParameterRepository
from services.water import local_today, with_test_schedule

router = APIRouter(prefix="/api/water-parameters", tags=["water"])

_NOT_FOUND = "Water parameter not found"


def _not_found(detail: str = _NOT_FOUND) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


@router.get("", response_model=List[WaterParameter], summary="List parameters with test status.")
async def list_parameters(
    parameters: WaterParameterRepository = Depends(get_water_repository),
    settings_store: SettingsStore = Depends(get_settings_store),
) -> List[WaterParameter]:
    today = local_today(settings_store)
    return [with_test_schedule(parameter, today) for parameter in parameters.list_parameters()]


@router.post("", response_model=WaterParameter, status_code=status.HTTP_201_CREATED)
async def create_parameter(
    payload: WaterParameterCreate,
    parameters: WaterParameterRepository = Depends(get_water_repository),
    settings_store: SettingsStore = Depends(get_settings_store),
) -> WaterParameter:
    return with_test_schedule(parameters.create(payload), local_today(settings_store))


@router.put("/{parameter_id}", response_model=WaterParameter)
async def update_parameter(
    parameter_id: str,
    payload: WaterParameterUpdate,
    parameters: WaterParameterRepository = Depends(get_water_repository),
    settings_store: SettingsStore = Depends(get_settings_store),
) -> WaterParameter:
    try:
        parameter = parameters.update(parameter_id, payload)
    except KeyError as exc:
        raise _not_found() from exc
    return with_test_schedule(parameter, local_today(settings_store))


@router.delete("/{parameter_id}", response_model=Acknowledgement)
async def delete_parameter(
    parameter_id: str,
    parameters: WaterParameterRepository = Depends(get_water_repository),
) -> Acknowledgement:
    try:
        parameters.delete(parameter_id)
    except KeyError as exc:
        raise _not_found() from exc
    return Acknowledgement()


@router.get("/{parameter_id}/readings", response_model=List[WaterReading])
async def list_readings(
    parameter_id: str,
    limit: Optional[int] = Query(default=None, ge=1, le=1000),
    parameters: WaterParameterRepository = Depends(get_water_repository),
) -> List[WaterReading]:
    try:
        return parameters.list_readings(parameter_id, limit=limit)
    except KeyError as exc:
        raise _not_found() from exc


@router.post(
    "/{parameter_id}/readings",
    response_model=WaterReading,
    status_code=status.HTTP_201_CREATED,
)
async def add_reading(
    parameter_id: str,
    payload: WaterReadingCreate,
    parameters: WaterParameterRepository = Depends(get_water_repository),
    settings_store: SettingsStore = Depends(get_settings_store),
) -> WaterReading:
    if payload.reading_date is None:
        payload = payload.model_copy(update={"reading_date": local_today(settings_store)})
    try:
        return parameters.add_reading(parameter_id, payload)
    except KeyError as exc:
        raise _not_found() from exc


@router.delete("/{parameter_id}/readings/{reading_id}", response_model=Acknowledgement)
async def delete_reading(
    parameter_id: str,
    reading_id: str,
    parameters: WaterParameterRepository = Depends(get_water_repository),
) -> Acknowledgement:
    try:
        parameters.delete_reading(parameter_id, reading_id)
    except KeyError as exc:
        raise _not_found("Reading not found") from exc
    return Acknowledgement()
