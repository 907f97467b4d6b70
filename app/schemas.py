"""Pydantic schemas for the HTTP API layer."""

from __future__ import annotations

import datetime as dt
from datetime import date, datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from models.records import SensorConfig, SensorKind


class _BoundsMixin(BaseModel):
    min_value: Optional[float] = None
    max_value: Optional[float] = None

    @model_validator(mode="after")
    def _check_bounds(self):
        if (
            self.min_value is not None
            and self.max_value is not None
            and self.min_value > self.max_value
        ):
            raise ValueError("min_value must not be greater than max_value")
        return self


class SensorCreate(_BoundsMixin):
    name: str = Field(..., min_length=1)
    type: str = Field(..., min_length=1, description="Display label, also the telemetry key.")
    unit: str = ""
    color: str = "orange"
    icon: str = "sensors"
    sensor_type: SensorKind = SensorKind.continuous
    float_ok_value: int = Field(default=1, ge=0, le=1)
    alerts_enabled: bool = True


class SensorUpdate(_BoundsMixin):
    """Partial update; an explicit ``null`` bound clears it."""

    name: Optional[str] = Field(default=None, min_length=1)
    type: Optional[str] = Field(default=None, min_length=1)
    unit: Optional[str] = None
    color: Optional[str] = None
    icon: Optional[str] = None
    sensor_type: Optional[SensorKind] = None
    float_ok_value: Optional[int] = Field(default=None, ge=0, le=1)
    alerts_enabled: Optional[bool] = None


class Sensor(BaseModel):
    id: str
    name: str
    type: str
    unit: str
    color: str
    icon: str
    api_key: str
    sensor_type: SensorKind
    min_value: Optional[float] = None
    max_value: Optional[float] = None
    float_ok_value: int = 1
    alerts_enabled: bool = True
    latest_value: Optional[float] = None
    latest_reading_at: Optional[datetime] = None
    created_at: datetime

    def to_config(self) -> SensorConfig:
        return SensorConfig(
            sensor_id=self.id,
            label=self.type,
            unit=self.unit,
            kind=self.sensor_type,
            min_value=self.min_value,
            max_value=self.max_value,
            ok_value=self.float_ok_value,
            alerts_enabled=self.alerts_enabled,
        )


class Reading(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    value: float
    recorded_at: datetime


class SensorDetail(Sensor):
    readings: List[Reading] = Field(default_factory=list)


class ReadingIn(BaseModel):
    """Body accepted by ``POST /api/data/{api_key}``; the value is validated downstream."""

    value: Any = None


class NotificationOutcome(BaseModel):
    transition: str
    success: bool
    error: Optional[str] = None


class IngestResponse(BaseModel):
    success: bool = True
    sensor_name: str
    value: float
    notification: Optional[NotificationOutcome] = None


class ParameterStatus(BaseModel):
    """Dashboard card for one sensor."""

    id: str
    icon: str
    label: str
    value: str
    unit: str
    status: str
    color: str
    sensor_type: SensorKind


class DailySummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    date: dt.date
    has_data: bool = True
    has_alert: bool = False
    min: Optional[float] = None
    max: Optional[float] = None
    avg: Optional[float] = None
    count: int = Field(default=0, ge=0)


class TelemetryResponse(BaseModel):
    sensor: Optional[Sensor] = None
    readings: List[Reading] = Field(default_factory=list)
    daily_summary: List[DailySummary] = Field(default_factory=list)


class SpecimenCreate(BaseModel):
    name: str = Field(..., min_length=1)
    species: str = ""
    health: str = "good"
    acquired_at: Optional[date] = None
    notes: str = ""
    image: Optional[str] = Field(default=None, description="Image as a data URL.")


class SpecimenUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    species: Optional[str] = None
    health: Optional[str] = None
    acquired_at: Optional[date] = None
    notes: Optional[str] = None
    image: Optional[str] = None


class Specimen(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    species: str
    health: str
    acquired_at: Optional[date] = None
    notes: str
    image: Optional[str] = None
    created_at: datetime


class NoteCreate(BaseModel):
    content: str = ""


class SpecimenNote(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    specimen_id: str
    content: str
    created_at: datetime


class MaintenanceTaskCreate(BaseModel):
    name: str = Field(..., min_length=1)
    icon: str = "build"
    interval_days: int = Field(default=7, ge=1)
    notification_url: Optional[str] = None
    show_percentage: bool = False


class MaintenanceTaskUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    icon: Optional[str] = None
    interval_days: Optional[int] = Field(default=None, ge=1)
    notification_url: Optional[str] = None
    show_percentage: Optional[bool] = None


class CompletionCreate(BaseModel):
    percentage: Optional[int] = Field(default=None, ge=0, le=100)
    notes: Optional[str] = None


class Completion(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    task_id: str
    percentage: Optional[int] = None
    notes: Optional[str] = None
    completed_at: datetime


class MaintenanceTask(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    icon: str
    interval_days: int
    notification_url: Optional[str] = None
    show_percentage: bool = False
    created_at: datetime
    last_completion: Optional[Completion] = None
    is_due: bool = True
    days_since_last: Optional[int] = None
    days_until_due: Optional[int] = None


class WebhookCheck(BaseModel):
    success: bool
    status: int


class ReminderReport(BaseModel):
    sent: List[str] = Field(default_factory=list)
    failed: List[str] = Field(default_factory=list)
    skipped: Optional[str] = Field(
        default=None, description="Why no reminders were attempted, if none were."
    )


class WaterParameterCreate(BaseModel):
    name: str = Field(..., min_length=1)
    unit: str = Field(..., min_length=1)
    color: str = "cyan"
    sort_order: int = 0
    interval_days: int = Field(default=0, ge=0)
    target_value: Optional[str] = None


class WaterParameterUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    unit: Optional[str] = Field(default=None, min_length=1)
    color: Optional[str] = None
    sort_order: Optional[int] = None
    interval_days: Optional[int] = Field(default=None, ge=0)
    target_value: Optional[str] = None


class WaterReadingCreate(BaseModel):
    value: float
    reading_date: Optional[date] = None


class WaterReading(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    parameter_id: str
    value: float
    reading_date: date
    created_at: datetime


class WaterParameter(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    unit: str
    color: str
    sort_order: int
    interval_days: int
    target_value: Optional[str] = None
    created_at: datetime
    latest_reading: Optional[WaterReading] = None
    days_since_last: Optional[int] = None
    is_due: bool = False


class SettingUpdate(BaseModel):
    value: str

    @field_validator("value", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> Any:
        if isinstance(value, bool):
            return "1" if value else "0"
        if isinstance(value, (int, float)):
            return str(value)
        return value


class SettingUpdated(BaseModel):
    success: bool = True
    key: str
    value: str


class Acknowledgement(BaseModel):
    success: bool = True
