"""Reading ingestion endpoints used by microcontrollers."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status

from app.dependencies import get_ingestion
from app.schemas import IngestResponse, NotificationOutcome, ReadingIn
from services.ingestion import IngestionService, IngestResult

router = APIRouter(prefix="/api/data", tags=["ingestion"])


def _ingest(service: IngestionService, api_key: str, raw_value: object) -> IngestResponse:
    try:
        result = service.ingest(api_key, raw_value)
    except KeyError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Invalid API key",
        ) from exc
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid value",
        ) from exc
    return _to_response(result)


def _to_response(result: IngestResult) -> IngestResponse:
    outcome: Optional[NotificationOutcome] = None
    if result.transition is not None and result.notification is not None:
        outcome = NotificationOutcome(
            transition=result.transition.value,
            success=result.notification.success,
            error=result.notification.error,
        )
    return IngestResponse(
        sensor_name=result.sensor.name,
        value=result.value,
        notification=outcome,
    )


@router.post(
    "/{api_key}",
    response_model=IngestResponse,
    summary="Record a reading sent as a JSON body.",
)
async def ingest_json(
    api_key: str,
    payload: Optional[ReadingIn] = None,
    service: IngestionService = Depends(get_ingestion),
) -> IngestResponse:
    return _ingest(service, api_key, payload.value if payload is not None else None)


@router.get(
    "/{api_key}/{value}",
    response_model=IngestResponse,
    summary="Record a reading for devices that can only issue GET requests.",
)
async def ingest_get(
    api_key: str,
    value: str,
    service: IngestionService = Depends(get_ingestion),
) -> IngestResponse:
    return _ingest(service, api_key, value)


@router.post(
    "/{api_key}/{value}",
    response_model=IngestResponse,
    summary="Record a reading passed in the path.",
)
async def ingest_path(
    api_key: str,
    value: str,
    service: IngestionService = Depends(get_ingestion),
) -> IngestResponse:
    return _ingest(service, api_key, value)
