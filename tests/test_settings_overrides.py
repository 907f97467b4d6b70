from __future__ import annotations

import logging
from pathlib import Path

from datastore.database import build_default_database
from logging_config import ContextualFormatter
from services.notifier import build_default_gateway
from settings import DEFAULT_PUSHOVER_URL, get_settings


def test_environment_overrides_apply(monkeypatch, tmp_path) -> None:
    db_path = tmp_path / "nested" / "tank.db"

    monkeypatch.setenv("AQUARIUM_DATABASE_PATH", str(db_path))
    monkeypatch.setenv("PUSHOVER_API_URL", "https://push.example/messages.json")
    monkeypatch.setenv("NOTIFICATION_TIMEOUT", "2.5")
    monkeypatch.setenv("TELEMETRY_CHART_LIMIT", "120")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    for cache in (get_settings, build_default_database, build_default_gateway):
        cache.cache_clear()

    database = build_default_database()
    gateway = build_default_gateway()

    try:
        settings = get_settings()
        assert settings.telemetry_chart_limit == 120
        assert settings.notification_timeout == 2.5
        assert settings.log_level == "DEBUG"
        assert database.path == Path(str(db_path))
        assert db_path.exists()
        assert gateway.api_url == "https://push.example/messages.json"
    finally:
        gateway.close()
        database.dispose()
        build_default_gateway.cache_clear()
        build_default_database.cache_clear()
        get_settings.cache_clear()


def test_invalid_values_fall_back_to_defaults(monkeypatch) -> None:
    monkeypatch.setenv("PUSHOVER_API_URL", "   ")
    monkeypatch.setenv("NOTIFICATION_TIMEOUT", "soon")
    monkeypatch.setenv("TELEMETRY_CHART_LIMIT", "-5")
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    get_settings.cache_clear()

    try:
        settings = get_settings()
        assert settings.pushover_api_url == DEFAULT_PUSHOVER_URL
        assert settings.notification_timeout == 10.0
        assert settings.telemetry_chart_limit == 50
        assert settings.log_level == "INFO"
    finally:
        get_settings.cache_clear()


def test_formatter_appends_known_extras() -> None:
    formatter = ContextualFormatter(fmt="%(message)s")
    record = logging.LogRecord("aquarium", logging.WARNING, __file__, 1, "Alert", None, None)
    record.sensor_id = "s-1"
    record.value = 28.5
    record.transition = "triggered"

    assert formatter.format(record) == "Alert | sensor_id=s-1 value=28.5 transition=triggered"
