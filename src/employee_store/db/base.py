"""
employee_store.db.base

SQLAlchemy declarative base.

Responsibilities:
- Shared DeclarativeBase for the entity model, with `awaitable_attrs` for
  explicit loads of lazy relations under asyncio.
- Deterministic constraint names, so Alembic batch migrations on SQLite can
  address them.
"""

from __future__ import annotations

from sqlalchemy import MetaData
from sqlalchemy.ext.asyncio import AsyncAttrs
from sqlalchemy.orm import DeclarativeBase

NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(AsyncAttrs, DeclarativeBase):
    metadata = MetaData(naming_convention=NAMING_CONVENTION)
