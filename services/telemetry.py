"""Calendar aggregation of sensor readings for the telemetry views."""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, datetime, timezone, tzinfo
from typing import Dict, Iterable, List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from models.records import SensorConfig, SensorReading
from services.alerts import evaluate


@dataclass
class DailySummary:
    """Statistics for one calendar day of readings."""

    date: date
    has_data: bool = True
    has_alert: bool = False
    min: Optional[float] = None
    max: Optional[float] = None
    avg: Optional[float] = None
    count: int = 0


def resolve_timezone(name: Optional[str]) -> tzinfo:
    """Return the named zone, or UTC when the name is blank or unknown."""
    if not name:
        return timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return timezone.utc


def one_month_before(moment: datetime) -> datetime:
    """Step back one calendar month, clamping to the last day of a shorter month."""
    year, month = (moment.year, moment.month - 1) if moment.month > 1 else (moment.year - 1, 12)
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


class TelemetryAggregator:
    """Pure aggregation component that can be unit tested in isolation."""

    def __init__(self, tz: Optional[tzinfo] = None) -> None:
        self.tz = tz or timezone.utc

    def daily_summary(
        self, sensor: SensorConfig, readings: Iterable[SensorReading]
    ) -> List[DailySummary]:
        days: Dict[date, DailySummary] = {}
        totals: Dict[date, float] = {}

        for reading in readings:
            day = self._local_date(reading.timestamp)
            value = reading.value
            summary = days.get(day)
            if summary is None:
                summary = days[day] = DailySummary(date=day, min=value, max=value)
                totals[day] = 0.0

            summary.count += 1
            totals[day] += value
            summary.min = min(summary.min, value)
            summary.max = max(summary.max, value)

            if evaluate(sensor, value).is_alert:
                summary.has_alert = True

        for day, summary in days.items():
            summary.avg = totals[day] / summary.count

        return [days[day] for day in sorted(days)]

    def _local_date(self, timestamp: datetime) -> date:
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=timezone.utc)
        return timestamp.astimezone(self.tz).date()
