"""Testing schedule for manually measured water parameters."""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from app.schemas import WaterParameter
from datastore.app_settings import SettingsStore
from services.telemetry import resolve_timezone


def with_test_schedule(parameter: WaterParameter, today: date) -> WaterParameter:
    """Mark a parameter due when its test interval has lapsed.

    Parameters with ``interval_days == 0`` are unscheduled and never due.
    """
    latest = parameter.latest_reading
    days_since: Optional[int] = None
    if latest is not None:
        days_since = (today - latest.reading_date).days

    is_due = False
    if parameter.interval_days > 0:
        is_due = days_since is None or days_since >= parameter.interval_days

    return parameter.model_copy(update={"days_since_last": days_since, "is_due": is_due})


def local_today(settings_store: SettingsStore, now: Optional[datetime] = None) -> date:
    """Today's date in the configured display timezone."""
    tz = resolve_timezone(settings_store.get("timezone"))
    moment = now or datetime.now(tz)
    return moment.astimezone(tz).date()
