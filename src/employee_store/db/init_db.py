"""
employee_store.db.init_db

Schema bootstrap for dev/test; production applies the Alembic revisions under
`alembic/versions`.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncEngine

from employee_store.db import models  # noqa: F401  # registers the entity tables on Base.metadata
from employee_store.db.base import Base
from employee_store.observability.logging import get_logger

log = get_logger(__name__)


async def init_db(engine: AsyncEngine) -> None:
    # checkfirst: existing tables (and their rows) are left alone.
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all, checkfirst=True)
    log.info("db.initialized", tables=sorted(Base.metadata.tables))
