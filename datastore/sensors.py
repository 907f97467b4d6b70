from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy import case, func, select, update
from sqlalchemy.orm import Session

from app.schemas import Reading, Sensor, SensorCreate, SensorDetail, SensorUpdate
from datastore.database import Database
from datastore.tables import ReadingRow, SensorRow, generate_api_key
from models.records import SensorKind, SensorReading

DETAIL_READING_LIMIT = 100


def _to_sensor(row: SensorRow) -> Sensor:
    return Sensor(
        id=row.id,
        name=row.name,
        type=row.type,
        unit=row.unit,
        color=row.color,
        icon=row.icon,
        api_key=row.api_key,
        sensor_type=SensorKind(row.sensor_type),
        min_value=row.min_value,
        max_value=row.max_value,
        float_ok_value=row.float_ok_value,
        alerts_enabled=row.alerts_enabled,
        latest_value=row.last_value,
        latest_reading_at=row.last_reading_at,
        created_at=row.created_at,
    )


class SensorRepository:
    """Sensor configuration plus the append-only readings table."""

    def __init__(self, database: Database) -> None:
        self.database = database

    def list_sensors(self) -> List[Sensor]:
        with self.database.session() as session:
            rows = session.scalars(select(SensorRow).order_by(SensorRow.created_at)).all()
            return [_to_sensor(row) for row in rows]

    def get_sensor(self, sensor_id: str) -> SensorDetail:
        with self.database.session() as session:
            row = self._require(session, sensor_id)
            readings = session.scalars(
                select(ReadingRow)
                .where(ReadingRow.sensor_id == sensor_id)
                .order_by(ReadingRow.recorded_at.desc(), ReadingRow.id.desc())
                .limit(DETAIL_READING_LIMIT)
            ).all()
            return SensorDetail(
                **_to_sensor(row).model_dump(),
                readings=[Reading.model_validate(reading) for reading in readings],
            )

    def find_by_api_key(self, api_key: str) -> Optional[Sensor]:
        with self.database.session() as session:
            row = session.scalars(select(SensorRow).where(SensorRow.api_key == api_key)).first()
            return _to_sensor(row) if row is not None else None

    def find_by_type(self, sensor_type: str) -> Optional[Sensor]:
        with self.database.session() as session:
            row = session.scalars(
                select(SensorRow)
                .where(func.lower(SensorRow.type) == sensor_type.lower())
                .order_by(SensorRow.created_at)
            ).first()
            return _to_sensor(row) if row is not None else None

    def create(self, payload: SensorCreate) -> Sensor:
        with self.database.session() as session:
            row = SensorRow(
                name=payload.name,
                type=payload.type,
                unit="" if payload.sensor_type is SensorKind.float_switch else payload.unit,
                color=payload.color,
                icon=payload.icon,
                sensor_type=payload.sensor_type.value,
                min_value=payload.min_value,
                max_value=payload.max_value,
                float_ok_value=payload.float_ok_value,
                alerts_enabled=payload.alerts_enabled,
            )
            session.add(row)
            session.flush()
            return _to_sensor(row)

    def update(self, sensor_id: str, payload: SensorUpdate) -> Sensor:
        changes = payload.model_dump(exclude_unset=True)
        with self.database.session() as session:
            row = self._require(session, sensor_id)
            previous_kind = row.sensor_type
            for field in ("min_value", "max_value"):
                if field in changes:
                    setattr(row, field, changes.pop(field))
            for field, value in changes.items():
                if value is None:
                    continue
                if isinstance(value, SensorKind):
                    value = value.value
                setattr(row, field, value)
            if row.min_value is not None and row.max_value is not None and row.min_value > row.max_value:
                raise ValueError("min_value must not be greater than max_value")
            if row.sensor_type == SensorKind.float_switch.value:
                row.unit = ""
                if previous_kind != row.sensor_type:
                    self._normalize_float_readings(session, row)
            session.flush()
            return _to_sensor(row)

    def delete(self, sensor_id: str) -> None:
        with self.database.session() as session:
            row = self._require(session, sensor_id)
            session.delete(row)

    def regenerate_key(self, sensor_id: str) -> Sensor:
        with self.database.session() as session:
            row = self._require(session, sensor_id)
            row.api_key = generate_api_key()
            session.flush()
            return _to_sensor(row)

    def add_reading(self, sensor_id: str, value: float, recorded_at: datetime) -> Sensor:
        """Append a reading and refresh the sensor's last-value cache."""
        with self.database.session() as session:
            row = self._require(session, sensor_id)
            session.add(ReadingRow(sensor_id=sensor_id, value=value, recorded_at=recorded_at))
            row.last_value = value
            row.last_reading_at = recorded_at
            session.flush()
            return _to_sensor(row)

    def readings_since(self, sensor_id: str, since: datetime) -> List[SensorReading]:
        with self.database.session() as session:
            rows = session.scalars(
                select(ReadingRow)
                .where(ReadingRow.sensor_id == sensor_id, ReadingRow.recorded_at >= since)
                .order_by(ReadingRow.recorded_at, ReadingRow.id)
            ).all()
            return [
                SensorReading(sensor_id=row.sensor_id, timestamp=row.recorded_at, value=row.value)
                for row in rows
            ]

    def count_readings(self, sensor_id: Optional[str] = None) -> int:
        with self.database.session() as session:
            query = select(func.count()).select_from(ReadingRow)
            if sensor_id is not None:
                query = query.where(ReadingRow.sensor_id == sensor_id)
            return session.scalar(query) or 0

    @staticmethod
    def _normalize_float_readings(session: Session, row: SensorRow) -> None:
        """Collapse stored readings to 0/1 once a sensor becomes a float switch."""
        session.execute(
            update(ReadingRow)
            .where(ReadingRow.sensor_id == row.id)
            .values(value=case((ReadingRow.value != 0, 1.0), else_=0.0))
            .execution_options(synchronize_session=False)
        )
        if row.last_value is not None:
            row.last_value = 1.0 if row.last_value else 0.0

    @staticmethod
    def _require(session: Session, sensor_id: str) -> SensorRow:
        row = session.get(SensorRow, sensor_id)
        if row is None:
            raise KeyError(f"Sensor {sensor_id!r} not found.")
        return row
