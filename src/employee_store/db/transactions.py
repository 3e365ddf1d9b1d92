"""
employee_store.db.transactions

Explicit transaction demarcation with propagation rules.

Responsibilities:
- Carry the transaction in scope through the call chain (a ContextVar), so nested
  transactional calls can join, suspend or reject it without the caller passing
  a handle around.
- Apply per-scope rollback rules (allow-list / deny-list of error kinds).
- Guarantee commit or rollback on every exit path of the scope that began the
  transaction, and only that scope.
- Notify listeners of begin/commit/rollback events.
"""

from __future__ import annotations

import enum
import functools
import itertools
from collections.abc import AsyncIterator, Awaitable, Callable, Iterable
from contextlib import asynccontextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, Protocol, TypeVar

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from employee_store.db.session import begin_options
from employee_store.errors import IllegalTransactionStateError, TransactionFailure
from employee_store.observability.logging import get_logger

log = get_logger(__name__)

T = TypeVar("T")


class Propagation(enum.StrEnum):
    REQUIRED = "REQUIRED"
    REQUIRES_NEW = "REQUIRES_NEW"
    SUPPORTS = "SUPPORTS"
    MANDATORY = "MANDATORY"
    NOT_SUPPORTED = "NOT_SUPPORTED"
    NEVER = "NEVER"


_JOINING = frozenset({Propagation.REQUIRED, Propagation.SUPPORTS, Propagation.MANDATORY})
_NON_TRANSACTIONAL = frozenset(
    {Propagation.SUPPORTS, Propagation.NOT_SUPPORTED, Propagation.NEVER}
)
# One session holds one transaction: these cannot run beside it on the same session.
_SUSPENDING = frozenset({Propagation.REQUIRES_NEW, Propagation.NOT_SUPPORTED})


@dataclass(frozen=True, slots=True)
class RollbackPolicy:
    """
    Decides whether an error leaving a transactional scope rolls it back.

    - A kind in `no_rollback_for` never rolls back, even if it also matches
      `rollback_for`.
    - If `rollback_for` is non-empty, only those kinds roll back.
    - Otherwise every error rolls back.
    """

    rollback_for: tuple[type[BaseException], ...] = ()
    no_rollback_for: tuple[type[BaseException], ...] = ()

    def should_rollback(self, error: BaseException) -> bool:
        if self.no_rollback_for and isinstance(error, self.no_rollback_for):
            return False
        if self.rollback_for:
            return isinstance(error, self.rollback_for)
        return True


DEFAULT_POLICY = RollbackPolicy()


@dataclass(eq=False, slots=True)
class _Transaction:
    id: int
    session: AsyncSession
    read_only: bool
    rollback_only: bool = False


@dataclass(frozen=True, slots=True)
class TransactionStatus:
    """
    Handle for one transactional scope.

    Scopes that join a transaction share its `_Transaction`; only the scope with
    `new_transaction=True` commits or rolls back. A non-transactional scope has
    a session but no transaction (`active` is False).
    """

    session: AsyncSession
    propagation: Propagation
    new_transaction: bool = False
    _tx: _Transaction | None = field(default=None, repr=False)

    @property
    def active(self) -> bool:
        return self._tx is not None

    @property
    def id(self) -> int | None:
        return self._tx.id if self._tx is not None else None

    @property
    def read_only(self) -> bool:
        return self._tx is not None and self._tx.read_only

    @property
    def rollback_only(self) -> bool:
        return self._tx is not None and self._tx.rollback_only

    def set_rollback_only(self) -> None:
        if self._tx is None:
            raise IllegalTransactionStateError("no transaction to mark rollback-only")
        self._tx.rollback_only = True


class TransactionListener(Protocol):
    def on_begin(self, status: TransactionStatus) -> None: ...

    def on_commit(self, status: TransactionStatus) -> None: ...

    def on_rollback(self, status: TransactionStatus) -> None: ...


_current: ContextVar[TransactionStatus | None] = ContextVar(
    "employee_store_transaction", default=None
)


class TransactionManager:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory
        self._listeners: list[TransactionListener] = []
        self._ids = itertools.count(1)

    def add_listener(self, listener: TransactionListener) -> None:
        self._listeners.append(listener)

    def current(self) -> TransactionStatus | None:
        return _current.get()

    def require_current(self) -> TransactionStatus:
        status = _current.get()
        if status is None:
            raise IllegalTransactionStateError("no transactional scope is active")
        return status

    @asynccontextmanager
    async def transaction(
        self,
        propagation: Propagation = Propagation.REQUIRED,
        *,
        read_only: bool = False,
        policy: RollbackPolicy = DEFAULT_POLICY,
        session: AsyncSession | None = None,
    ) -> AsyncIterator[TransactionStatus]:
        """
        Enter a scope under `propagation`.

        `session` binds a new transaction to an existing session (extended
        persistence context). An active transaction on a different session is
        then treated as absent and suspended for the duration.
        """

        existing = _current.get()
        active = existing if existing is not None and existing.active else None
        if session is not None and active is not None and active.session is not session:
            active = None
        if active is not None and active.session is session and propagation in _SUSPENDING:
            raise IllegalTransactionStateError(
                f"propagation {propagation.value} cannot suspend transaction {active.id} "
                "on its own session"
            )

        if propagation is Propagation.MANDATORY and active is None:
            raise IllegalTransactionStateError(
                "no existing transaction found for propagation MANDATORY"
            )
        if propagation is Propagation.NEVER and active is not None:
            raise IllegalTransactionStateError(
                f"existing transaction {active.id} found for propagation NEVER"
            )

        if active is not None and propagation in _JOINING:
            scope = self._participate(active, propagation, policy)
        elif propagation in _NON_TRANSACTIONAL:
            scope = self._without_transaction(existing, propagation, session)
        else:
            scope = self._begin(propagation, read_only=read_only, policy=policy, session=session)

        async with scope as status:
            yield status

    @asynccontextmanager
    async def _participate(
        self,
        active: TransactionStatus,
        propagation: Propagation,
        policy: RollbackPolicy,
    ) -> AsyncIterator[TransactionStatus]:
        if active._tx is None:
            raise IllegalTransactionStateError("cannot join a scope without a transaction")
        status = TransactionStatus(
            session=active.session, propagation=propagation, new_transaction=False, _tx=active._tx
        )
        token = _current.set(status)
        try:
            yield status
        except Exception as e:
            if policy.should_rollback(e):
                log.debug("tx.rollback_only", tx_id=status.id, error=repr(e))
                status.set_rollback_only()
            raise
        finally:
            _current.reset(token)

    @asynccontextmanager
    async def _without_transaction(
        self,
        existing: TransactionStatus | None,
        propagation: Propagation,
        session: AsyncSession | None,
    ) -> AsyncIterator[TransactionStatus]:
        if existing is not None and not existing.active and session is None:
            # Already outside any transaction: keep the same persistence context.
            yield existing
            return

        owned = session is None
        status = TransactionStatus(
            session=session if session is not None else self._session_factory(),
            propagation=propagation,
        )
        if existing is not None:
            log.debug("tx.suspend", tx_id=existing.id, propagation=propagation.value)
        token = _current.set(status)
        try:
            yield status
        finally:
            _current.reset(token)
            if owned:
                await status.session.close()

    @asynccontextmanager
    async def _begin(
        self,
        propagation: Propagation,
        *,
        read_only: bool,
        policy: RollbackPolicy,
        session: AsyncSession | None,
    ) -> AsyncIterator[TransactionStatus]:
        owned = session is None
        if session is None:
            session = self._session_factory()
        tx = _Transaction(id=next(self._ids), session=session, read_only=read_only)
        status = TransactionStatus(
            session=session, propagation=propagation, new_transaction=True, _tx=tx
        )

        try:
            # An extended session may already hold a database transaction from reads
            # made outside any scope; this transaction continues it.
            if not session.in_transaction():
                await session.connection(
                    execution_options=begin_options(session.bind.dialect.name, read_only=read_only)
                )
        except SQLAlchemyError as e:
            if owned:
                await session.close()
            raise TransactionFailure(f"could not begin transaction {tx.id}") from e

        log.debug("tx.begin", tx_id=tx.id, propagation=propagation.value, read_only=read_only)
        self._notify("on_begin", status)
        token = _current.set(status)
        try:
            with structlog.contextvars.bound_contextvars(tx_id=tx.id):
                yield status
        except Exception as e:
            if tx.rollback_only or policy.should_rollback(e):
                await self._rollback(status, owned=owned)
            else:
                log.debug("tx.commit_on_error", tx_id=tx.id, error=repr(e))
                await self._commit(status, owned=owned)
            raise
        except BaseException:
            # Cancellation and interpreter exits always undo the work.
            await self._rollback(status, owned=owned)
            raise
        else:
            if tx.rollback_only:
                await self._rollback(status, owned=owned)
                raise TransactionFailure(
                    f"transaction {tx.id} rolled back because it was marked rollback-only"
                )
            await self._commit(status, owned=owned)
        finally:
            _current.reset(token)
            if owned:
                await session.close()

    async def _commit(self, status: TransactionStatus, *, owned: bool) -> None:
        session = status.session
        try:
            if status.read_only and owned:
                # Nothing to write; closing the session releases the snapshot.
                pass
            elif status.read_only:
                await session.rollback()
            else:
                await session.commit()
        except SQLAlchemyError as e:
            await self._rollback(status, owned=owned)
            raise TransactionFailure(f"commit failed for transaction {status.id}") from e
        log.debug("tx.commit", tx_id=status.id)
        self._notify("on_commit", status)

    async def _rollback(self, status: TransactionStatus, *, owned: bool) -> None:
        try:
            await status.session.rollback()
        except SQLAlchemyError as e:
            raise TransactionFailure(f"rollback failed for transaction {status.id}") from e
        log.debug("tx.rollback", tx_id=status.id)
        self._notify("on_rollback", status)

    def _notify(self, event: str, status: TransactionStatus) -> None:
        for listener in self._listeners:
            getattr(listener, event)(status)


def transactional(
    propagation: Propagation = Propagation.REQUIRED,
    *,
    read_only: bool = False,
    rollback_for: Iterable[type[BaseException]] = (),
    no_rollback_for: Iterable[type[BaseException]] = (),
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """
    Run an async method inside `self.transactions.transaction(...)`.

    The decorated method's owner must expose a `transactions` attribute holding
    a `TransactionManager`; inside the method, `self.transactions.current()`
    gives the scope's session.
    """

    policy = RollbackPolicy(tuple(rollback_for), tuple(no_rollback_for))

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @functools.wraps(func)
        async def wrapper(self: Any, *args: Any, **kwargs: Any) -> T:
            manager: TransactionManager = self.transactions
            async with manager.transaction(propagation, read_only=read_only, policy=policy):
                return await func(self, *args, **kwargs)

        return wrapper

    return decorator


# --- Module Notes -----------------------------------------------------------
# Every asyncio task copies the ContextVar on creation, so concurrent call chains
# never see each other's transaction. On SQLite a REQUIRES_NEW writer nested inside
# an open writer waits on the outer write lock until the busy timeout.
