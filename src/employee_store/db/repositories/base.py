"""
employee_store.db.repositories.base

Generic CRUD repository parameterized by entity type and id type.

Responsibilities:
- retrieve-by-id, retrieve-all, save (insert or merge), delete.
- Translate integrity errors raised at flush into `ConstraintViolation`.
"""

from __future__ import annotations

from typing import Any, ClassVar, Generic, TypeVar

from sqlalchemy import inspect, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from employee_store.db.base import Base
from employee_store.errors import ConstraintViolation, NotFound

EntityT = TypeVar("EntityT", bound=Base)
IdT = TypeVar("IdT")


class CrudRepo(Generic[EntityT, IdT]):
    entity: ClassVar[type[Base]]

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, ident: IdT) -> EntityT | None:
        return await self._session.get(self.entity, ident)  # type: ignore[return-value]

    async def list_all(self) -> list[EntityT]:
        stmt = select(self.entity).order_by(*inspect(self.entity).primary_key)
        # unique(): joined eager collections repeat the parent row.
        return list((await self._session.scalars(stmt)).unique().all())  # type: ignore[arg-type]

    async def save(self, entity: EntityT) -> EntityT:
        if entity not in self._session:
            if inspect(entity).transient and self._ident(entity) is None:
                self._session.add(entity)
            else:
                # Detached (or id assigned by the caller): copy state onto the
                # persistent instance of this session.
                entity = await self._session.merge(entity)
        await self._flush()
        return entity

    async def delete(self, entity: EntityT) -> None:
        if entity not in self._session:
            ident = self._ident(entity)
            target = await self.get(ident) if ident is not None else None
            if target is None:
                raise NotFound(self.entity.__name__, ident)
            entity = target
        # Awaitable: the delete cascade may load unloaded collections first.
        await self._session.delete(entity)
        await self._flush()

    async def _flush(self) -> None:
        try:
            await self._session.flush()
        except IntegrityError as e:
            raise ConstraintViolation(f"{self.entity.__name__}: {e.orig}") from e

    def _ident(self, entity: EntityT) -> Any:
        values = inspect(self.entity).primary_key_from_instance(entity)
        if all(v is None for v in values):
            return None
        return values[0] if len(values) == 1 else tuple(values)


# --- Module Notes -----------------------------------------------------------
# Subclasses set `entity` and add entity-specific queries; they receive the session
# of the transactional scope they run in.
