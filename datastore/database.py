from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime, timezone
from functools import lru_cache
from pathlib import Path
from typing import Iterator, Optional

from sqlalchemy import DateTime, create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool
from sqlalchemy.types import TypeDecorator

from settings import get_settings


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UTCDateTime(TypeDecorator):
    """Stores naive UTC in SQLite and hands back timezone-aware values."""

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value: Optional[datetime], dialect) -> Optional[datetime]:
        if value is None:
            return None
        if value.tzinfo is None:
            return value
        return value.astimezone(timezone.utc).replace(tzinfo=None)

    def process_result_value(self, value: Optional[datetime], dialect) -> Optional[datetime]:
        if value is None:
            return None
        return value.replace(tzinfo=timezone.utc)


class Base(DeclarativeBase):
    pass


class Database:

    def __init__(self, path: Optional[Path] = None) -> None:
        self.path = path
        if path:
            path.parent.mkdir(parents=True, exist_ok=True)
            url = f"sqlite:///{path}"
        else:
            url = "sqlite://"
        engine_options = {} if path else {"poolclass": StaticPool}
        self.engine: Engine = create_engine(
            url, connect_args={"check_same_thread": False}, **engine_options
        )
        event.listen(self.engine, "connect", _enable_foreign_keys)
        self._session_factory = sessionmaker(bind=self.engine, expire_on_commit=False)

    def create_all(self) -> None:
        """Create missing tables and seed first-run defaults."""
        # Tables register themselves on Base.metadata when the module is imported.
        from datastore import tables

        Base.metadata.create_all(self.engine)
        with self.session() as session:
            tables.seed_defaults(session)

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Yield a session that commits on success and rolls back on error."""
        with self._session_factory.begin() as session:
            yield session

    def dispose(self) -> None:
        self.engine.dispose()


def _enable_foreign_keys(dbapi_connection, _record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@lru_cache
def build_default_database(path: Optional[str] = None) -> Database:
    settings = get_settings()
    db_path = settings.database_path if path is None else path
    database = Database(path=Path(db_path) if db_path else None)
    database.create_all()
    return database
