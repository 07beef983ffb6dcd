from __future__ import annotations

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from migraplan.config import settings

_engine: AsyncEngine | None = None


def enable_sqlite_transactional_ddl(engine: AsyncEngine) -> None:
    """Make SQLite wrap DDL in the surrounding transaction.

    The sqlite3 driver commits implicitly before DDL statements, so a failed
    step would leave half-created tables behind. Driver-level transaction
    handling is switched off and SQLAlchemy emits BEGIN itself.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")


def build_engine(url: str, *, echo: bool = False) -> AsyncEngine:
    """Create an async engine suitable for running migration steps.

    Notes
    -----
    - SQLite URLs get transactional DDL, everything else is assumed to
      support it natively (PostgreSQL).
    - pool_pre_ping: Detects stale connections before using them
    - pool_recycle: Recycle connections after N seconds to avoid server timeouts
    """
    if url.startswith("sqlite"):
        engine = create_async_engine(url, echo=echo)
        enable_sqlite_transactional_ddl(engine)
        return engine

    return create_async_engine(
        url,
        echo=echo,
        pool_pre_ping=True,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_recycle=settings.db_pool_recycle,
    )


def get_engine() -> AsyncEngine:
    """Get a singleton async engine for the configured database."""
    global _engine
    if _engine is None:
        _engine = build_engine(settings.database_url_async, echo=settings.debug)
    return _engine
