"""
employee_store.errors

Error kinds raised by the persistence layer and its interceptors.

Responsibilities:
- Give callers a small, stable set of exception types independent of the
  underlying driver/ORM exceptions.
"""

from __future__ import annotations

from typing import Any


class EmployeeStoreError(Exception):
    pass


class NotFound(EmployeeStoreError):
    """A lookup by identity matched no row."""

    def __init__(self, entity: str, ident: Any) -> None:
        super().__init__(f"{entity} {ident!r} not found")
        self.entity = entity
        self.ident = ident


class ConstraintViolation(EmployeeStoreError):
    """Unique-key, required-field or immutable-field violation."""


class TransactionFailure(EmployeeStoreError):
    """Commit or rollback could not complete, or the transaction was unusable."""


class IllegalTransactionStateError(TransactionFailure):
    """Propagation rule rejected the call (e.g. MANDATORY without a transaction)."""


class InterceptionFailure(EmployeeStoreError):
    """Wraps any error raised through a `logged` call; the original is `__cause__`."""


# --- Module Notes -----------------------------------------------------------
# Driver errors are translated at the gateway boundary with `raise ... from`,
# so the SQLAlchemy exception is always reachable for diagnostics.
