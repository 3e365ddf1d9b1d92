"""
employee_store.db.persistence_context

Extended persistence context.

Responsibilities:
- Keep one session (identity map + pending changes) alive across several
  transactions, so entities persisted between transactions are flushed by the
  next one.

Not thread- or task-safe: callers serialize access to an extended context.
Short-lived contexts need no helper; `TransactionManager` opens one per new
transaction.
"""

from __future__ import annotations

from contextlib import AbstractAsyncContextManager
from typing import Any, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from employee_store.db.base import Base
from employee_store.db.transactions import (
    DEFAULT_POLICY,
    Propagation,
    RollbackPolicy,
    TransactionManager,
    TransactionStatus,
)

EntityT = TypeVar("EntityT", bound=Base)


class ExtendedPersistenceContext:
    def __init__(self, transactions: TransactionManager, session: AsyncSession) -> None:
        self._transactions = transactions
        self._session = session

    @classmethod
    def open(
        cls,
        transactions: TransactionManager,
        session_factory: async_sessionmaker[AsyncSession],
    ) -> ExtendedPersistenceContext:
        return cls(transactions, session_factory())

    @property
    def session(self) -> AsyncSession:
        return self._session

    def transaction(
        self,
        propagation: Propagation = Propagation.REQUIRED,
        *,
        read_only: bool = False,
        policy: RollbackPolicy = DEFAULT_POLICY,
    ) -> AbstractAsyncContextManager[TransactionStatus]:
        return self._transactions.transaction(
            propagation, read_only=read_only, policy=policy, session=self._session
        )

    def persist(self, entity: Base) -> None:
        # Queued only; written when the next transaction on this context commits.
        self._session.add(entity)

    async def find(self, entity_type: type[EntityT], ident: Any) -> EntityT | None:
        return await self._session.get(entity_type, ident)

    async def flush(self) -> None:
        await self._session.flush()

    def contains(self, entity: Base) -> bool:
        return entity in self._session

    async def close(self) -> None:
        await self._session.close()

    async def __aenter__(self) -> ExtendedPersistenceContext:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()


# --- Module Notes -----------------------------------------------------------
# Reads made outside a `transaction()` block start the database transaction that
# the next block commits (SQLAlchemy autobegin).
