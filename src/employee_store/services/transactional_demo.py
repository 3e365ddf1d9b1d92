"""
employee_store.services.transactional_demo

Propagation and rollback-rule examples.

Responsibilities:
- `update_employee_and_access_card`: one transaction spanning an employee update
  and an access card save. The nested `update_employee` call joins it; only this
  outer call commits or rolls back.
- `update_employee`: REQUIRED with explicit rollback rules. Persistence and I/O
  errors roll back; `AttributeError` (a missing-object dereference) commits
  the work done so far and still propagates.
- `read_employee_and_access_cards`: read-only transaction so both reads observe
  the same snapshot without blocking writers.
"""

from __future__ import annotations

from sqlalchemy.exc import SQLAlchemyError

from employee_store.db.models import AccessCard, Employee
from employee_store.db.transactions import Propagation, TransactionManager, transactional
from employee_store.errors import ConstraintViolation
from employee_store.observability.interceptor import logged
from employee_store.observability.logging import get_logger
from employee_store.services.gateway import EmployeeGateway, PersistenceGateway

log = get_logger(__name__)

UPDATED_NAME = "Updated Name"


class TransactionalDemo:
    def __init__(
        self,
        *,
        transactions: TransactionManager,
        employees: EmployeeGateway,
        access_cards: PersistenceGateway[AccessCard, int],
    ) -> None:
        self.transactions = transactions
        self._employees = employees
        self._access_cards = access_cards

    # `logged` is the outer wrapper: the transaction scope sees the raw error and
    # the caller gets it wrapped in InterceptionFailure.
    @logged
    @transactional(Propagation.REQUIRED)
    async def update_employee_and_access_card(
        self, employee: Employee, access_card: AccessCard
    ) -> None:
        await self.update_employee(employee)
        await self._access_cards.save(access_card)

    @logged
    @transactional(
        Propagation.REQUIRED,
        rollback_for=(ConstraintViolation, SQLAlchemyError, OSError),
        no_rollback_for=(AttributeError,),
    )
    async def update_employee(self, employee: Employee) -> Employee:
        employee.name = UPDATED_NAME
        return await self._employees.save(employee)

    @transactional(Propagation.REQUIRED, read_only=True)
    async def read_employee_and_access_cards(
        self,
    ) -> tuple[list[Employee], list[AccessCard]]:
        employees = await self._employees.find_all()
        for employee in employees:
            log.info("employee", employee=repr(employee))
        access_cards = await self._access_cards.find_all()
        for card in access_cards:
            log.info("access_card", access_card=repr(card))
        return employees, access_cards


# --- Module Notes -----------------------------------------------------------
# The gateways' own REQUIRED/SUPPORTS scopes join whatever these methods begin.
