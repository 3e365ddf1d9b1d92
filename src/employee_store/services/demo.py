"""
employee_store.services.demo

Fixed demonstration sequence run by the startup hook.

Responsibilities:
- Save an employee in an explicitly demarcated short-lived transaction.
- Save an employee through an extended persistence context.
- Read an employee with a plain non-transactional lookup.
- Look up employee id 1 through the gateway and log it.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import date

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from employee_store.db.models import Employee, EmployeeType
from employee_store.db.persistence_context import ExtendedPersistenceContext
from employee_store.db.transactions import Propagation, TransactionManager
from employee_store.observability.logging import get_logger
from employee_store.services.gateway import EmployeeGateway

log = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class DemoResult:
    short_lived_id: int
    extended_id: int
    first_employee: Employee | None


def _new_employee(name: str, *, age: int) -> Employee:
    # ssn is unique; a random one keeps repeated startups against one database valid.
    return Employee(
        ssn=uuid.uuid4().hex[:10],
        name=name,
        age=age,
        dob=date.today(),
        type=EmployeeType.FULL_TIME,
    )


async def save_in_short_lived_transaction(transactions: TransactionManager) -> Employee:
    employee = _new_employee("Kautilya", age=20)
    async with transactions.transaction(Propagation.REQUIRES_NEW) as tx:
        tx.session.add(employee)
        await tx.session.flush()
    log.info("demo.saved_short_lived", employee=repr(employee))
    return employee


async def save_with_extended_context(
    transactions: TransactionManager,
    session_factory: async_sessionmaker[AsyncSession],
) -> Employee:
    employee = _new_employee("Chanakya", age=20)
    async with ExtendedPersistenceContext.open(transactions, session_factory) as ctx:
        # Queued outside any transaction; the next transaction on the context writes it.
        ctx.persist(employee)
        async with ctx.transaction():
            pass
    log.info("demo.saved_extended", employee=repr(employee))
    return employee


async def find_without_transaction(
    transactions: TransactionManager, employee_id: int
) -> Employee | None:
    async with transactions.transaction(Propagation.NOT_SUPPORTED) as scope:
        return await scope.session.get(Employee, employee_id)


async def run_demo(
    transactions: TransactionManager,
    session_factory: async_sessionmaker[AsyncSession],
) -> DemoResult:
    short_lived = await save_in_short_lived_transaction(transactions)
    extended = await save_with_extended_context(transactions, session_factory)

    found = await find_without_transaction(transactions, short_lived.id)
    log.info("demo.found_without_transaction", employee=repr(found))

    first = await EmployeeGateway(transactions).find_by_id(1)
    if first is not None:
        log.info("demo.employee_1", employee=repr(first))
    return DemoResult(short_lived_id=short_lived.id, extended_id=extended.id, first_employee=first)


# --- Module Notes -----------------------------------------------------------
# Invoked from the API startup hook when `run_demo_on_startup` is set.
