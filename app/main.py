from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from app.api import router
from datastore.database import build_default_database
from logging_config import configure_logging
from services.alerts import build_default_evaluator
from services.maintenance import build_default_reminder_log
from services.notifier import build_default_gateway

_CACHED_FACTORIES = (
    build_default_database,
    build_default_gateway,
    build_default_evaluator,
    build_default_reminder_log,
)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    database = build_default_database()
    gateway = build_default_gateway()
    try:
        yield
    finally:
        gateway.close()
        database.dispose()
        for factory in _CACHED_FACTORIES:
            factory.cache_clear()


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(
        title="Aquarium Monitor",
        description="Sensor ingestion, alerting and husbandry records for a home aquarium.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.include_router(router)
    return app


app = create_app()
