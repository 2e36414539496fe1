"""SQLModel engine and session handling for the API server.

The HTTP gateway serves requests from worker threads, so SQLite connections
are opened with foreign keys enforced and a busy timeout instead of failing
immediately when another thread holds the write lock.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

from ..config import BaseConfig
from ..logging_config import get_logger

logger = get_logger("infra.database")

SQLITE_BUSY_TIMEOUT_MS = 5000
SQLITE_PRAGMAS = (
    "PRAGMA foreign_keys=ON",
    f"PRAGMA busy_timeout={SQLITE_BUSY_TIMEOUT_MS}",
)


def _apply_sqlite_pragmas(dbapi_connection, _connection_record) -> None:
    cursor = dbapi_connection.cursor()
    try:
        for pragma in SQLITE_PRAGMAS:
            cursor.execute(pragma)
    finally:
        cursor.close()


def create_db_engine(config: BaseConfig) -> Engine:
    """Build the engine for ``config.DATABASE_URL``; SQLite gets per-connection pragmas."""

    engine = create_engine(config.DATABASE_URL, **config.sqlalchemy_engine_options())
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _apply_sqlite_pragmas)
    logger.info("Database engine created", extra={"dialect": engine.dialect.name})
    return engine


def init_database(engine: Engine) -> None:
    """Create the category, transaction and budget tables if missing."""
    from .. import models  # noqa: F401

    SQLModel.metadata.create_all(engine)


class SessionFactory:
    """Callable handing out one committed-or-rolled-back session per call.

    Repositories use it as ``with session_factory() as session:``. Sessions
    keep attributes loaded after commit so expunged rows stay readable.
    """

    def __init__(self, engine: Engine) -> None:
        self.engine = engine

    @contextmanager
    def __call__(self) -> Iterator[Session]:
        with Session(self.engine, expire_on_commit=False) as session:
            try:
                yield session
                session.commit()
            except Exception:
                session.rollback()
                raise

    def dispose(self) -> None:
        """Close pooled connections (the SQLite file can then be removed)."""
        self.engine.dispose()


def bootstrap_database(config: BaseConfig) -> tuple[Engine, SessionFactory]:
    """Create the engine, ensure the schema and return ``(engine, session_factory)``."""

    engine = create_db_engine(config)
    init_database(engine)
    return engine, SessionFactory(engine)
