"""ORM tables for sensors, specimens, maintenance, water tests and settings."""

from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional
from uuid import uuid4

from sqlalchemy import Boolean, Date, Float, ForeignKey, Index, Integer, String, Text, func, select
from sqlalchemy.orm import Mapped, Session, mapped_column, relationship

from datastore.database import Base, UTCDateTime, utcnow


def generate_id() -> str:
    return str(uuid4())


def generate_api_key() -> str:
    return uuid4().hex


class SensorRow(Base):
    __tablename__ = "sensors"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_id)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    type: Mapped[str] = mapped_column(String(120), nullable=False)
    unit: Mapped[str] = mapped_column(String(32), nullable=False, default="")
    color: Mapped[str] = mapped_column(String(32), nullable=False, default="orange")
    icon: Mapped[str] = mapped_column(String(64), nullable=False, default="sensors")
    api_key: Mapped[str] = mapped_column(
        String(64), unique=True, nullable=False, default=generate_api_key
    )
    sensor_type: Mapped[str] = mapped_column(String(16), nullable=False, default="value")
    min_value: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    max_value: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    float_ok_value: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    alerts_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    last_value: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    last_reading_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=utcnow)

    readings: Mapped[List["ReadingRow"]] = relationship(
        back_populates="sensor", cascade="all, delete-orphan", passive_deletes=True
    )


class ReadingRow(Base):
    __tablename__ = "readings"
    __table_args__ = (Index("idx_readings_sensor_time", "sensor_id", "recorded_at"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    sensor_id: Mapped[str] = mapped_column(
        ForeignKey("sensors.id", ondelete="CASCADE"), nullable=False
    )
    value: Mapped[float] = mapped_column(Float, nullable=False)
    recorded_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=utcnow)

    sensor: Mapped[SensorRow] = relationship(back_populates="readings")


class SpecimenRow(Base):
    __tablename__ = "specimens"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_id)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    species: Mapped[str] = mapped_column(String(120), nullable=False, default="")
    health: Mapped[str] = mapped_column(String(32), nullable=False, default="good")
    acquired_at: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    notes: Mapped[str] = mapped_column(Text, nullable=False, default="")
    image: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=utcnow)

    journal: Mapped[List["SpecimenNoteRow"]] = relationship(
        back_populates="specimen", cascade="all, delete-orphan", passive_deletes=True
    )


class SpecimenNoteRow(Base):
    __tablename__ = "specimen_notes"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_id)
    specimen_id: Mapped[str] = mapped_column(
        ForeignKey("specimens.id", ondelete="CASCADE"), nullable=False
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=utcnow)

    specimen: Mapped[SpecimenRow] = relationship(back_populates="journal")


class MaintenanceTaskRow(Base):
    __tablename__ = "maintenance_tasks"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_id)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    icon: Mapped[str] = mapped_column(String(64), nullable=False, default="build")
    interval_days: Mapped[int] = mapped_column(Integer, nullable=False, default=7)
    notification_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    show_percentage: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=utcnow)

    completions: Mapped[List["MaintenanceCompletionRow"]] = relationship(
        back_populates="task", cascade="all, delete-orphan", passive_deletes=True
    )


class MaintenanceCompletionRow(Base):
    __tablename__ = "maintenance_completions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_id)
    task_id: Mapped[str] = mapped_column(
        ForeignKey("maintenance_tasks.id", ondelete="CASCADE"), nullable=False
    )
    percentage: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    completed_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=utcnow)

    task: Mapped[MaintenanceTaskRow] = relationship(back_populates="completions")


class WaterParameterRow(Base):
    __tablename__ = "water_parameters"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_id)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    unit: Mapped[str] = mapped_column(String(32), nullable=False)
    color: Mapped[str] = mapped_column(String(32), nullable=False, default="cyan")
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    interval_days: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    target_value: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=utcnow)

    readings: Mapped[List["WaterParameterReadingRow"]] = relationship(
        back_populates="parameter", cascade="all, delete-orphan", passive_deletes=True
    )


class WaterParameterReadingRow(Base):
    __tablename__ = "water_parameter_readings"
    __table_args__ = (
        Index("idx_water_param_readings_date", "parameter_id", "reading_date"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_id)
    parameter_id: Mapped[str] = mapped_column(
        ForeignKey("water_parameters.id", ondelete="CASCADE"), nullable=False
    )
    value: Mapped[float] = mapped_column(Float, nullable=False)
    reading_date: Mapped[date] = mapped_column(Date, nullable=False)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=utcnow)

    parameter: Mapped[WaterParameterRow] = relationship(back_populates="readings")


class AppSettingRow(Base):
    __tablename__ = "app_settings"

    key: Mapped[str] = mapped_column(String(64), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)


DEFAULT_SETTINGS = {"timezone": "UTC"}

DEFAULT_WATER_PARAMETERS = (
    {"id": "alk", "name": "Alkalinity", "unit": "dKH", "color": "cyan", "sort_order": 1},
    {"id": "ca", "name": "Calcium", "unit": "ppm", "color": "purple", "sort_order": 2},
    {"id": "mg", "name": "Magnesium", "unit": "ppm", "color": "orange", "sort_order": 3},
)


def seed_defaults(session: Session) -> None:
    for key, value in DEFAULT_SETTINGS.items():
        if session.get(AppSettingRow, key) is None:
            session.add(AppSettingRow(key=key, value=value))

    parameter_count = session.scalar(select(func.count()).select_from(WaterParameterRow))
    if not parameter_count:
        session.add_all(WaterParameterRow(**values) for values in DEFAULT_WATER_PARAMETERS)
