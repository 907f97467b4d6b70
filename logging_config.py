from __future__ import annotations

import logging
from logging.config import dictConfig
from typing import Any, Iterable

from settings import get_settings

CONTEXT_KEYS = (
    "sensor_id",
    "sensor_name",
    "value",
    "status",
    "transition",
    "task_id",
    "priority",
    "error",
)

# HTTP client loggers stay at WARNING regardless of LOG_LEVEL.
_QUIET_LOGGERS = ("httpx", "httpcore")

_configured = False


class ContextualFormatter(logging.Formatter):
    """Appends the ``extra=`` fields present on a record as ``key=value`` pairs."""

    def __init__(self, *args: Any, extra_keys: Iterable[str] = CONTEXT_KEYS, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._extra_keys = tuple(extra_keys)

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        context = " ".join(
            f"{key}={getattr(record, key)}"
            for key in self._extra_keys
            if getattr(record, key, None) is not None
        )
        return f"{message} | {context}" if context else message


def configure_logging(level: str | int | None = None) -> None:
    """Install the contextual console handler on the root logger, once per process."""
    global _configured
    if _configured:
        return

    log_level = level if level is not None else get_settings().log_level
    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "contextual": {
                    "()": ContextualFormatter,
                    "fmt": "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
                }
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "contextual",
                }
            },
            "loggers": {name: {"level": "WARNING"} for name in _QUIET_LOGGERS},
            "root": {"handlers": ["console"], "level": log_level},
        }
    )
    _configured = True
