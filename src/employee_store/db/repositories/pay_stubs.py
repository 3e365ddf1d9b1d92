"""
employee_store.db.repositories.pay_stubs

Repository for `PayStub` entities.

Responsibilities:
- Explicit fetch of an employee's pay stubs (the relation is never loaded implicitly).
"""

from __future__ import annotations

from sqlalchemy import select

from employee_store.db.models import PayStub
from employee_store.db.repositories.base import CrudRepo


class PayStubRepo(CrudRepo[PayStub, int]):
    entity = PayStub

    async def list_for_employee(self, employee_id: int) -> list[PayStub]:
        stmt = (
            select(PayStub)
            .where(PayStub.employee_id == employee_id)
            .order_by(PayStub.pay_period_start)
        )
        return list((await self._session.scalars(stmt)).all())
