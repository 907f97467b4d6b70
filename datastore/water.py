from __future__ import annotations

from datetime import date
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.schemas import (
    WaterParameter,
    WaterParameterCreate,
    WaterParameterUpdate,
    WaterReading,
    WaterReadingCreate,
)
from datastore.database import Database
from datastore.tables import WaterParameterReadingRow, WaterParameterRow


class WaterParameterRepository:
    """Manually tested water chemistry (alkalinity, calcium, ...) and its history."""

    def __init__(self, database: Database) -> None:
        self.database = database

    def list_parameters(self) -> List[WaterParameter]:
        with self.database.session() as session:
            rows = session.scalars(
                select(WaterParameterRow).order_by(
                    WaterParameterRow.sort_order, WaterParameterRow.created_at
                )
            ).all()
            return [self._to_parameter(session, row) for row in rows]

    def get_parameter(self, parameter_id: str) -> WaterParameter:
        with self.database.session() as session:
            return self._to_parameter(session, self._require(session, parameter_id))

    def create(self, payload: WaterParameterCreate) -> WaterParameter:
        with self.database.session() as session:
            row = WaterParameterRow(**payload.model_dump())
            session.add(row)
            session.flush()
            return self._to_parameter(session, row)

    def update(self, parameter_id: str, payload: WaterParameterUpdate) -> WaterParameter:
        changes = payload.model_dump(exclude_unset=True)
        with self.database.session() as session:
            row = self._require(session, parameter_id)
            if "target_value" in changes:
                row.target_value = changes.pop("target_value") or None
            for field, value in changes.items():
                if value is not None:
                    setattr(row, field, value)
            session.flush()
            return self._to_parameter(session, row)

    def delete(self, parameter_id: str) -> None:
        with self.database.session() as session:
            session.delete(self._require(session, parameter_id))

    def list_readings(self, parameter_id: str, limit: Optional[int] = None) -> List[WaterReading]:
        with self.database.session() as session:
            self._require(session, parameter_id)
            query = (
                select(WaterParameterReadingRow)
                .where(WaterParameterReadingRow.parameter_id == parameter_id)
                .order_by(
                    WaterParameterReadingRow.reading_date.desc(),
                    WaterParameterReadingRow.created_at.desc(),
                )
            )
            if limit is not None:
                query = query.limit(limit)
            return [WaterReading.model_validate(row) for row in session.scalars(query).all()]

    def add_reading(self, parameter_id: str, payload: WaterReadingCreate) -> WaterReading:
        with self.database.session() as session:
            self._require(session, parameter_id)
            row = WaterParameterReadingRow(
                parameter_id=parameter_id,
                value=payload.value,
                reading_date=payload.reading_date or date.today(),
            )
            session.add(row)
            session.flush()
            return WaterReading.model_validate(row)

    def delete_reading(self, parameter_id: str, reading_id: str) -> None:
        with self.database.session() as session:
            row = session.get(WaterParameterReadingRow, reading_id)
            if row is None or row.parameter_id != parameter_id:
                raise KeyError(f"Reading {reading_id!r} not found.")
            session.delete(row)

    @staticmethod
    def _to_parameter(session: Session, row: WaterParameterRow) -> WaterParameter:
        latest = session.scalars(
            select(WaterParameterReadingRow)
            .where(WaterParameterReadingRow.parameter_id == row.id)
            .order_by(
                WaterParameterReadingRow.reading_date.desc(),
                WaterParameterReadingRow.created_at.desc(),
            )
            .limit(1)
        ).first()
        parameter = WaterParameter.model_validate(row)
        if latest is not None:
            parameter.latest_reading = WaterReading.model_validate(latest)
        return parameter

    @staticmethod
    def _require(session: Session, parameter_id: str) -> WaterParameterRow:
        row = session.get(WaterParameterRow, parameter_id)
        if row is None:
            raise KeyError(f"Water parameter {parameter_id!r} not found.")
        return row
