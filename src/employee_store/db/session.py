"""
employee_store.db.session

Async SQLAlchemy engine + session factory helpers.

Responsibilities:
- Create the async engine from settings.
- Take control of transaction starts on SQLite so read-only transactions hold one
  snapshot and writers serialize instead of deadlocking.
- Create the async sessionmaker with safe defaults.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from employee_store.settings import Settings

# Custom execution option read by the SQLite "begin" hook.
SQLITE_BEGIN_MODE = "employee_store_sqlite_begin"


def create_engine(settings: Settings) -> AsyncEngine:
    is_sqlite = settings.database_url.startswith("sqlite")
    engine = create_async_engine(
        settings.database_url,
        pool_pre_ping=not is_sqlite,
        connect_args={"timeout": settings.sqlite_busy_timeout} if is_sqlite else {},
    )
    if is_sqlite:
        _install_sqlite_hooks(engine)
    return engine


def _install_sqlite_hooks(engine: AsyncEngine) -> None:
    in_memory = engine.url.database in (None, "", ":memory:")

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection: Any, _: Any) -> None:
        # Stop the driver from emitting its own BEGIN; `_on_begin` does it instead.
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        if not in_memory:
            # WAL: readers keep their snapshot without blocking writers.
            cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn: Any) -> None:
        mode = conn.get_execution_options().get(SQLITE_BEGIN_MODE, "DEFERRED")
        conn.exec_driver_sql(f"BEGIN {mode}")


def begin_options(dialect_name: str, *, read_only: bool) -> dict[str, Any]:
    """
    Connection options applied when a new transaction procures its connection.

    SQLite writers take the write lock up front (IMMEDIATE) so two writers wait on
    each other instead of failing a lock upgrade; readers start DEFERRED and pin
    their snapshot at the first read. Other backends use REPEATABLE READ for
    read-only transactions.
    """

    if dialect_name == "sqlite":
        return {SQLITE_BEGIN_MODE: "DEFERRED" if read_only else "IMMEDIATE"}
    if read_only:
        return {"isolation_level": "REPEATABLE READ"}
    return {}


def create_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # expire_on_commit=False keeps entities readable after their transaction closes.
    return async_sessionmaker(
        bind=engine,
        expire_on_commit=False,
        autoflush=False,
        autocommit=False,
    )


# --- Module Notes -----------------------------------------------------------
# Sessions are never opened directly by services; `db.transactions.TransactionManager`
# opens one per new transaction and `db.persistence_context` keeps one for extended use.
