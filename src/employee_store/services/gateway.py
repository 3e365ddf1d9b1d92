"""
employee_store.services.gateway

Transactional persistence gateway.

Responsibilities:
- Run save/find/delete through a repository inside a demarcated transaction.
- Writes join the caller's transaction or begin one (REQUIRED); reads join one if
  present and otherwise run without a transaction (SUPPORTS, read-only).
- Refuse writes inside read-only transactions.
"""

from __future__ import annotations

from typing import Generic

from employee_store.db.models import AccessCard, EmailGroup, Employee, PayStub
from employee_store.db.repositories.access_cards import AccessCardRepo
from employee_store.db.repositories.base import CrudRepo, EntityT, IdT
from employee_store.db.repositories.email_groups import EmailGroupRepo
from employee_store.db.repositories.employees import EmployeeRepo
from employee_store.db.repositories.pay_stubs import PayStubRepo
from employee_store.db.transactions import Propagation, TransactionManager, transactional
from employee_store.errors import NotFound, TransactionFailure


class PersistenceGateway(Generic[EntityT, IdT]):
    def __init__(
        self,
        transactions: TransactionManager,
        repo_type: type[CrudRepo[EntityT, IdT]],
    ) -> None:
        self.transactions = transactions
        self._repo_type = repo_type

    @property
    def entity_name(self) -> str:
        return self._repo_type.entity.__name__

    def _repo(self) -> CrudRepo[EntityT, IdT]:
        return self._repo_type(self.transactions.require_current().session)

    def _writable_repo(self) -> CrudRepo[EntityT, IdT]:
        status = self.transactions.require_current()
        if status.read_only:
            raise TransactionFailure(
                f"cannot write {self.entity_name} inside read-only transaction {status.id}"
            )
        return self._repo_type(status.session)

    @transactional(Propagation.REQUIRED)
    async def save(self, entity: EntityT) -> EntityT:
        return await self._writable_repo().save(entity)

    @transactional(Propagation.SUPPORTS, read_only=True)
    async def find_by_id(self, ident: IdT) -> EntityT | None:
        return await self._repo().get(ident)

    async def get_by_id(self, ident: IdT) -> EntityT:
        entity = await self.find_by_id(ident)
        if entity is None:
            raise NotFound(self.entity_name, ident)
        return entity

    @transactional(Propagation.SUPPORTS, read_only=True)
    async def find_all(self) -> list[EntityT]:
        return await self._repo().list_all()

    @transactional(Propagation.REQUIRED)
    async def delete(self, entity: EntityT) -> None:
        await self._writable_repo().delete(entity)

    @transactional(Propagation.REQUIRED)
    async def delete_by_id(self, ident: IdT) -> None:
        repo = self._writable_repo()
        entity = await repo.get(ident)
        if entity is None:
            raise NotFound(self.entity_name, ident)
        await repo.delete(entity)


class EmployeeGateway(PersistenceGateway[Employee, int]):
    def __init__(self, transactions: TransactionManager) -> None:
        super().__init__(transactions, EmployeeRepo)

    @transactional(Propagation.SUPPORTS, read_only=True)
    async def find_by_ssn(self, ssn: str) -> Employee | None:
        return await EmployeeRepo(self.transactions.require_current().session).get_by_ssn(ssn)

    @transactional(Propagation.SUPPORTS, read_only=True)
    async def find_by_min_age(self, min_age: int) -> list[Employee]:
        session = self.transactions.require_current().session
        return await EmployeeRepo(session).list_by_min_age(min_age)

    @transactional(Propagation.SUPPORTS, read_only=True)
    async def fetch_pay_stubs(self, employee: Employee) -> list[PayStub]:
        # Pay stubs are lazy: callers ask for them explicitly, one query per call.
        session = self.transactions.require_current().session
        return await PayStubRepo(session).list_for_employee(employee.id)


def access_card_gateway(transactions: TransactionManager) -> PersistenceGateway[AccessCard, int]:
    return PersistenceGateway(transactions, AccessCardRepo)


def email_group_gateway(transactions: TransactionManager) -> PersistenceGateway[EmailGroup, int]:
    return PersistenceGateway(transactions, EmailGroupRepo)


def pay_stub_gateway(transactions: TransactionManager) -> PersistenceGateway[PayStub, int]:
    return PersistenceGateway(transactions, PayStubRepo)


# --- Module Notes -----------------------------------------------------------
# `get_by_id` runs in whatever scope `find_by_id` opens and adds the NotFound translation.
