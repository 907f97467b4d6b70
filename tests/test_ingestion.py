"""Tests for reading ingestion and alert notification wiring."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import List

import httpx
import pytest

from app.schemas import SensorCreate
from datastore.app_settings import SettingsStore
from datastore.database import Database
from datastore.sensors import SensorRepository
from models.records import SensorKind
from services.alerts import AlertEvaluator, Transition
from services.ingestion import IngestionService
from services.notifier import NotificationGateway


class FakeClock:
    def __init__(self) -> None:
        self.now = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def database() -> Database:
    db = Database()
    db.create_all()
    yield db
    db.dispose()


@pytest.fixture
def pushes() -> List[httpx.Request]:
    return []


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def service(database: Database, pushes: List[httpx.Request], clock: FakeClock):
    def handler(request: httpx.Request) -> httpx.Response:
        pushes.append(request)
        return httpx.Response(200, json={"status": 1})

    gateway = NotificationGateway(
        api_url="https://pushover.test/1/messages.json",
        transport=httpx.MockTransport(handler),
    )
    store = SettingsStore(database)
    store.put("pushover_token", "tok")
    store.put("pushover_user", "usr")
    ingestion = IngestionService(
        sensors=SensorRepository(database),
        settings_store=store,
        evaluator=AlertEvaluator(),
        gateway=gateway,
        clock=clock,
    )
    yield ingestion
    gateway.close()


def _heater(database: Database):
    return SensorRepository(database).create(
        SensorCreate(name="Heater probe", type="Temperature", unit="C", min_value=24, max_value=27)
    )


def test_unknown_key_raises_key_error_and_writes_nothing(service, database) -> None:
    _heater(database)

    with pytest.raises(KeyError):
        service.ingest("not-a-key", "25")

    assert SensorRepository(database).count_readings() == 0


@pytest.mark.parametrize("raw", [None, "", "abc", "nan", "inf", [1], 10**400])
def test_invalid_values_are_rejected_without_side_effects(service, database, raw) -> None:
    sensor = _heater(database)

    with pytest.raises(ValueError):
        service.ingest(sensor.api_key, raw)

    assert SensorRepository(database).count_readings(sensor.id) == 0


def test_reading_updates_last_value_cache(service, database, clock) -> None:
    sensor = _heater(database)

    result = service.ingest(sensor.api_key, " 25.5 ")

    assert result.value == 25.5
    assert result.sensor.latest_value == 25.5
    assert result.sensor.latest_reading_at == clock.now
    assert result.transition is None


def test_float_readings_are_normalized(service, database) -> None:
    switch = SensorRepository(database).create(
        SensorCreate(name="ATO float", type="Water Level", sensor_type=SensorKind.float_switch)
    )

    assert service.ingest(switch.api_key, "42").value == 1.0
    assert service.ingest(switch.api_key, 0).value == 0.0
    assert service.ingest(switch.api_key, "-0.3").value == 1.0


def test_alert_notifies_on_transition_only(service, database, pushes, clock) -> None:
    sensor = _heater(database)

    first = service.ingest(sensor.api_key, "23")
    clock.advance(minutes=1)
    second = service.ingest(sensor.api_key, "22.8")

    assert first.transition is Transition.triggered
    assert first.notification is not None and first.notification.success
    assert second.transition is None
    assert len(pushes) == 1


def test_repeat_interval_setting_is_honoured(service, database, pushes, clock) -> None:
    sensor = _heater(database)
    service.settings_store.put("pushover_alert_repeat", "5")

    service.ingest(sensor.api_key, "28")
    clock.advance(minutes=6)
    repeated = service.ingest(sensor.api_key, "28")

    assert repeated.transition is Transition.repeated
    assert len(pushes) == 2


def test_recovery_is_pushed_once(service, database, pushes) -> None:
    sensor = _heater(database)

    service.ingest(sensor.api_key, "28")
    recovered = service.ingest(sensor.api_key, "25")
    service.ingest(sensor.api_key, "25")

    assert recovered.transition is Transition.recovered
    assert len(pushes) == 2


def test_disabled_alert_toggle_tracks_state_without_pushing(service, database, pushes) -> None:
    sensor = _heater(database)
    service.settings_store.put("pushover_alerts", "0")

    result = service.ingest(sensor.api_key, "30")

    assert result.transition is Transition.triggered
    assert result.notification is None
    assert pushes == []


def test_notification_failure_keeps_the_reading(database) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, text="boom")

    gateway = NotificationGateway(api_url="https://pushover.test", transport=httpx.MockTransport(handler))
    store = SettingsStore(database)
    store.put("pushover_token", "tok")
    store.put("pushover_user", "usr")
    ingestion = IngestionService(
        sensors=SensorRepository(database),
        settings_store=store,
        evaluator=AlertEvaluator(),
        gateway=gateway,
    )
    sensor = _heater(database)

    result = ingestion.ingest(sensor.api_key, "10")

    assert result.notification is not None
    assert result.notification.success is False
    assert SensorRepository(database).count_readings(sensor.id) == 1
    gateway.close()
