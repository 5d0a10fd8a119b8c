"""SQLite connection setup: database file location and per-connection pragmas."""

from __future__ import annotations

import logging
from pathlib import Path

from sqlalchemy import event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from evorbrain.core.database.path_security import validate_filename, validate_path
from evorbrain.core.errors import DatabaseConnectionError

logger = logging.getLogger(__name__)


def resolve_database_path(data_dir: str | Path, filename: str) -> Path:
    """Return the canonical database file path inside ``data_dir``.

    The directory is created when missing. Names escaping the directory raise
    ``SecurityError``.
    """
    base = Path(data_dir)
    try:
        base.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise DatabaseConnectionError(f"Failed to create data directory {base}: {exc}") from exc
    validate_filename(filename)
    return validate_path(base, filename)


def database_uri(data_dir: str | Path, filename: str) -> str:
    return f"sqlite:///{resolve_database_path(data_dir, filename)}"


def configure_sqlite_engine(engine: Engine, *, busy_timeout_ms: int = 10000) -> None:
    """Attach pragma and transaction listeners to a SQLite engine.

    pysqlite's implicit transaction handling is switched off and ``BEGIN`` is
    emitted explicitly, so DDL inside migrations is transactional.
    """
    if engine.dialect.name != "sqlite":
        return

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        try:
            cursor.execute("PRAGMA journal_mode=WAL")
            cursor.execute("PRAGMA synchronous=NORMAL")
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.execute(f"PRAGMA busy_timeout={int(busy_timeout_ms)}")
        finally:
            cursor.close()

    @event.listens_for(engine, "begin")
    def _do_begin(conn):
        conn.exec_driver_sql("BEGIN")


def check_connection(engine: Engine) -> None:
    """Open a connection and run a trivial query; raise on failure."""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.error("Database connection check failed: %s", exc)
        raise DatabaseConnectionError(f"Failed to connect to database: {exc}") from exc


def vacuum(engine: Engine) -> None:
    """Run VACUUM outside any transaction."""
    raw = engine.raw_connection()
    try:
        cursor = raw.cursor()
        try:
            cursor.execute("VACUUM")
        finally:
            cursor.close()
    finally:
        raw.close()


__all__ = [
    "resolve_database_path",
    "database_uri",
    "configure_sqlite_engine",
    "check_connection",
    "vacuum",
]
