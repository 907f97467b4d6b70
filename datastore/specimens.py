from __future__ import annotations

from datetime import date
from typing import List

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from app.schemas import Specimen, SpecimenCreate, SpecimenNote, SpecimenUpdate
from datastore.database import Database
from datastore.tables import SpecimenNoteRow, SpecimenRow


class SpecimenRepository:

    def __init__(self, database: Database) -> None:
        self.database = database

    def list_specimens(self) -> List[Specimen]:
        with self.database.session() as session:
            rows = session.scalars(
                select(SpecimenRow).order_by(SpecimenRow.created_at.desc())
            ).all()
            return [Specimen.model_validate(row) for row in rows]

    def get_specimen(self, specimen_id: str) -> Specimen:
        with self.database.session() as session:
            return Specimen.model_validate(self._require(session, specimen_id))

    def create(self, payload: SpecimenCreate) -> Specimen:
        with self.database.session() as session:
            row = SpecimenRow(
                name=payload.name,
                species=payload.species,
                health=payload.health or "good",
                acquired_at=payload.acquired_at or date.today(),
                notes=payload.notes,
                image=payload.image,
            )
            session.add(row)
            session.flush()
            return Specimen.model_validate(row)

    def update(self, specimen_id: str, payload: SpecimenUpdate) -> Specimen:
        changes = payload.model_dump(exclude_unset=True)
        with self.database.session() as session:
            row = self._require(session, specimen_id)
            # ``image`` may be cleared explicitly; every other field keeps its value on null.
            if "image" in changes:
                row.image = changes.pop("image")
            for field, value in changes.items():
                if value is not None:
                    setattr(row, field, value)
            session.flush()
            return Specimen.model_validate(row)

    def delete(self, specimen_id: str) -> None:
        with self.database.session() as session:
            session.delete(self._require(session, specimen_id))

    def list_notes(self, specimen_id: str) -> List[SpecimenNote]:
        with self.database.session() as session:
            self._require(session, specimen_id)
            rows = session.scalars(
                select(SpecimenNoteRow)
                .where(SpecimenNoteRow.specimen_id == specimen_id)
                .order_by(SpecimenNoteRow.created_at.desc())
            ).all()
            return [SpecimenNote.model_validate(row) for row in rows]

    def add_note(self, specimen_id: str, content: str) -> SpecimenNote:
        text = content.strip()
        if not text:
            raise ValueError("Note content is required")
        with self.database.session() as session:
            self._require(session, specimen_id)
            row = SpecimenNoteRow(specimen_id=specimen_id, content=text)
            session.add(row)
            session.flush()
            return SpecimenNote.model_validate(row)

    def delete_note(self, specimen_id: str, note_id: str) -> None:
        with self.database.session() as session:
            row = session.get(SpecimenNoteRow, note_id)
            if row is None or row.specimen_id != specimen_id:
                raise KeyError(f"Note {note_id!r} not found.")
            session.delete(row)

    def clear_notes(self, specimen_id: str) -> int:
        with self.database.session() as session:
            self._require(session, specimen_id)
            result = session.execute(
                delete(SpecimenNoteRow).where(SpecimenNoteRow.specimen_id == specimen_id)
            )
            return result.rowcount or 0

    @staticmethod
    def _require(session: Session, specimen_id: str) -> SpecimenRow:
        row = session.get(SpecimenRow, specimen_id)
        if row is None:
            raise KeyError(f"Specimen {specimen_id!r} not found.")
        return row
