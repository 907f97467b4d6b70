from __future__ import annotations

from typing import Dict, Optional

from sqlalchemy import select

from datastore.database import Database
from datastore.tables import AppSettingRow


class SettingsStore:
    """String key/value settings edited from the UI."""

    def __init__(self, database: Database) -> None:
        self.database = database

    def all(self) -> Dict[str, str]:
        with self.database.session() as session:
            rows = session.scalars(select(AppSettingRow).order_by(AppSettingRow.key)).all()
            return {row.key: row.value for row in rows}

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        with self.database.session() as session:
            row = session.get(AppSettingRow, key)
            return row.value if row is not None else default

    def put(self, key: str, value: str) -> None:
        with self.database.session() as session:
            row = session.get(AppSettingRow, key)
            if row is None:
                session.add(AppSettingRow(key=key, value=value))
            else:
                row.value = value
