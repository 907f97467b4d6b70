"""HTTP route definitions for the service.

Handlers are ``async def`` and call the blocking SQLite and httpx layers
directly, so requests are served one at a time; a slow notification delays
other requests by up to ``NOTIFICATION_TIMEOUT`` seconds.
"""

from __future__ import annotations

from fastapi import APIRouter, status

from app.routers import dashboard, ingestion, maintenance, sensors, settings, specimens, water
from datastore.database import utcnow

router = APIRouter()

for _module in (ingestion, dashboard, sensors, specimens, maintenance, water, settings):
    router.include_router(_module.router)


@router.get(
    "/api/health",
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck() -> dict[str, str]:
    return {"status": "ok", "timestamp": utcnow().isoformat()}


@router.get(
    "/",
    summary="Root endpoint mirrors health information.",
    status_code=status.HTTP_200_OK,
)
async def root() -> dict[str, str]:
    return {"status": "ok", "detail": "See /api/health for service status."}
