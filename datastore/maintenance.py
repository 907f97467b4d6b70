from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.schemas import (
    Completion,
    CompletionCreate,
    MaintenanceTask,
    MaintenanceTaskCreate,
    MaintenanceTaskUpdate,
)
from datastore.database import Database
from datastore.tables import MaintenanceCompletionRow, MaintenanceTaskRow


class MaintenanceRepository:
    """Recurring maintenance tasks and their completion log."""

    def __init__(self, database: Database) -> None:
        self.database = database

    def list_tasks(self) -> List[MaintenanceTask]:
        """Return tasks in creation order, each with its most recent completion."""
        with self.database.session() as session:
            rows = session.scalars(
                select(MaintenanceTaskRow).order_by(MaintenanceTaskRow.created_at)
            ).all()
            return [self._to_task(session, row) for row in rows]

    def get_task(self, task_id: str) -> MaintenanceTask:
        with self.database.session() as session:
            return self._to_task(session, self._require(session, task_id))

    def create(self, payload: MaintenanceTaskCreate) -> MaintenanceTask:
        with self.database.session() as session:
            row = MaintenanceTaskRow(
                name=payload.name,
                icon=payload.icon or "build",
                interval_days=payload.interval_days,
                notification_url=payload.notification_url or None,
                show_percentage=payload.show_percentage,
            )
            session.add(row)
            session.flush()
            return self._to_task(session, row)

    def update(self, task_id: str, payload: MaintenanceTaskUpdate) -> MaintenanceTask:
        changes = payload.model_dump(exclude_unset=True)
        with self.database.session() as session:
            row = self._require(session, task_id)
            if "notification_url" in changes:
                row.notification_url = changes.pop("notification_url") or None
            for field, value in changes.items():
                if value is not None:
                    setattr(row, field, value)
            session.flush()
            return self._to_task(session, row)

    def delete(self, task_id: str) -> None:
        with self.database.session() as session:
            session.delete(self._require(session, task_id))

    def list_completions(self, task_id: str) -> List[Completion]:
        with self.database.session() as session:
            self._require(session, task_id)
            rows = session.scalars(
                select(MaintenanceCompletionRow)
                .where(MaintenanceCompletionRow.task_id == task_id)
                .order_by(MaintenanceCompletionRow.completed_at.desc())
            ).all()
            return [Completion.model_validate(row) for row in rows]

    def add_completion(
        self,
        task_id: str,
        payload: CompletionCreate,
        completed_at: Optional[datetime] = None,
    ) -> Completion:
        with self.database.session() as session:
            self._require(session, task_id)
            row = MaintenanceCompletionRow(
                task_id=task_id,
                percentage=payload.percentage,
                notes=payload.notes or None,
            )
            if completed_at is not None:
                row.completed_at = completed_at
            session.add(row)
            session.flush()
            return Completion.model_validate(row)

    @staticmethod
    def _to_task(session: Session, row: MaintenanceTaskRow) -> MaintenanceTask:
        last = session.scalars(
            select(MaintenanceCompletionRow)
            .where(MaintenanceCompletionRow.task_id == row.id)
            .order_by(MaintenanceCompletionRow.completed_at.desc())
            .limit(1)
        ).first()
        task = MaintenanceTask.model_validate(row)
        if last is not None:
            task.last_completion = Completion.model_validate(last)
        return task

    @staticmethod
    def _require(session: Session, task_id: str) -> MaintenanceTaskRow:
        row = session.get(MaintenanceTaskRow, task_id)
        if row is None:
            raise KeyError(f"Task {task_id!r} not found.")
        return row
