from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


_DATABASE_PATH_ENV = "AQUARIUM_DATABASE_PATH"
_PUSHOVER_URL_ENV = "PUSHOVER_API_URL"
_NOTIFICATION_TIMEOUT_ENV = "NOTIFICATION_TIMEOUT"
_CHART_LIMIT_ENV = "TELEMETRY_CHART_LIMIT"
_LOG_LEVEL_ENV = "LOG_LEVEL"

DEFAULT_PUSHOVER_URL = "https://api.pushover.net/1/messages.json"


@dataclass(frozen=True)
class Settings:
    database_path: str
    pushover_api_url: str
    notification_timeout: float
    telemetry_chart_limit: int
    log_level: str


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_positive_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = int(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_positive_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = float(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        database_path=_read_str_env(_DATABASE_PATH_ENV, "./data/aquarium.db"),
        pushover_api_url=_read_str_env(_PUSHOVER_URL_ENV, DEFAULT_PUSHOVER_URL),
        notification_timeout=_read_positive_float(_NOTIFICATION_TIMEOUT_ENV, 10.0),
        telemetry_chart_limit=_read_positive_int(_CHART_LIMIT_ENV, 50),
        log_level=_read_log_level("INFO"),
    )
