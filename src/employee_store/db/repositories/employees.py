"""
employee_store.db.repositories.employees

Repository for `Employee` entities.

Responsibilities:
- Generic CRUD plus lookups by natural key (ssn) and minimum age.
"""

from __future__ import annotations

from sqlalchemy import bindparam, select

from employee_store.db.models import Employee
from employee_store.db.repositories.base import CrudRepo

# Named query: employees at or above a minimum age, by name.
EMPLOYEES_BY_MIN_AGE = (
    select(Employee).where(Employee.age >= bindparam("min_age")).order_by(Employee.name)
)


class EmployeeRepo(CrudRepo[Employee, int]):
    entity = Employee

    async def get_by_ssn(self, ssn: str) -> Employee | None:
        stmt = select(Employee).where(Employee.ssn == ssn)
        return (await self._session.scalars(stmt)).unique().one_or_none()

    async def list_by_min_age(self, min_age: int) -> list[Employee]:
        result = await self._session.scalars(EMPLOYEES_BY_MIN_AGE, {"min_age": min_age})
        return list(result.unique().all())
