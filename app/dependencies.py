"""FastAPI dependency providers wiring routes to the cached collaborators."""

from __future__ import annotations

from fastapi import Depends

from datastore.app_settings import SettingsStore
from datastore.database import Database, build_default_database
from datastore.maintenance import MaintenanceRepository
from datastore.sensors import SensorRepository
from datastore.specimens import SpecimenRepository
from datastore.water import WaterParameterRepository
from services.alerts import AlertEvaluator, build_default_evaluator
from services.ingestion import IngestionService
from services.maintenance import MaintenanceService, build_default_reminder_log
from services.notifier import NotificationGateway, build_default_gateway
from settings import get_settings


def get_database() -> Database:
    return build_default_database()


def get_gateway() -> NotificationGateway:
    return build_default_gateway()


def get_evaluator() -> AlertEvaluator:
    return build_default_evaluator()


def get_chart_limit() -> int:
    return get_settings().telemetry_chart_limit


def get_sensor_repository(database: Database = Depends(get_database)) -> SensorRepository:
    return SensorRepository(database)


def get_specimen_repository(database: Database = Depends(get_database)) -> SpecimenRepository:
    return SpecimenRepository(database)


def get_maintenance_repository(
    database: Database = Depends(get_database),
) -> MaintenanceRepository:
    return MaintenanceRepository(database)


def get_water_repository(database: Database = Depends(get_database)) -> WaterParameterRepository:
    return WaterParameterRepository(database)


def get_settings_store(database: Database = Depends(get_database)) -> SettingsStore:
    return SettingsStore(database)


def get_ingestion(
    sensors: SensorRepository = Depends(get_sensor_repository),
    settings_store: SettingsStore = Depends(get_settings_store),
    evaluator: AlertEvaluator = Depends(get_evaluator),
    gateway: NotificationGateway = Depends(get_gateway),
) -> IngestionService:
    return IngestionService(
        sensors=sensors,
        settings_store=settings_store,
        evaluator=evaluator,
        gateway=gateway,
    )


def get_maintenance_service(
    repository: MaintenanceRepository = Depends(get_maintenance_repository),
    settings_store: SettingsStore = Depends(get_settings_store),
    gateway: NotificationGateway = Depends(get_gateway),
) -> MaintenanceService:
    return MaintenanceService(
        repository=repository,
        settings_store=settings_store,
        gateway=gateway,
        reminded=build_default_reminder_log(),
    )
