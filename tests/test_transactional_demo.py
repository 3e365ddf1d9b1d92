"""
tests.test_transactional_demo

Rollback rules and propagation of the `TransactionalDemo` service methods.
"""

from __future__ import annotations

from datetime import date

import pytest

from employee_store.db.models import AccessCard, Employee
from employee_store.errors import InterceptionFailure
from employee_store.services.gateway import EmployeeGateway, access_card_gateway
from employee_store.services.transactional_demo import UPDATED_NAME, TransactionalDemo


class FailingEmployeeGateway(EmployeeGateway):
    """Saves normally, then raises `error` from inside the caller's transaction."""

    def __init__(self, transactions, error: Exception) -> None:
        super().__init__(transactions)
        self.error = error

    async def save(self, entity: Employee) -> Employee:
        await super().save(entity)
        raise self.error


def _demo(transactions, employees: EmployeeGateway) -> TransactionalDemo:
    return TransactionalDemo(
        transactions=transactions,
        employees=employees,
        access_cards=access_card_gateway(transactions),
    )


def _card() -> AccessCard:
    return AccessCard(issued_date=date(2024, 6, 1), firmware_version="2.0.1")


@pytest.mark.asyncio
async def test_update_employee_and_access_card_runs_in_one_transaction(
    transactions, listener, employees, make_employee
) -> None:
    employee = await employees.save(make_employee(name="Original"))
    listener.events.clear()

    await _demo(transactions, employees).update_employee_and_access_card(employee, _card())

    assert listener.kinds() == ["begin", "commit"]
    assert (await employees.find_by_id(employee.id)).name == UPDATED_NAME
    cards = await access_card_gateway(transactions).find_all()
    assert [c.firmware_version for c in cards] == ["2.0.1"]


@pytest.mark.asyncio
async def test_error_exempt_from_rollback_commits_and_is_wrapped(
    transactions, listener, employees, make_employee
) -> None:
    employee = await employees.save(make_employee(name="Original"))
    listener.events.clear()
    failing = FailingEmployeeGateway(transactions, AttributeError("dangling reference"))

    with pytest.raises(InterceptionFailure) as exc_info:
        await _demo(transactions, failing).update_employee(employee)

    assert isinstance(exc_info.value.__cause__, AttributeError)
    assert listener.kinds() == ["begin", "commit"]
    assert (await employees.find_by_id(employee.id)).name == UPDATED_NAME


@pytest.mark.asyncio
async def test_listed_error_rolls_back(transactions, listener, employees, make_employee) -> None:
    employee = await employees.save(make_employee(name="Original"))
    listener.events.clear()
    failing = FailingEmployeeGateway(transactions, OSError("disk unavailable"))

    with pytest.raises(InterceptionFailure) as exc_info:
        await _demo(transactions, failing).update_employee(employee)

    assert isinstance(exc_info.value.__cause__, OSError)
    assert listener.kinds() == ["begin", "rollback"]
    assert (await employees.find_by_id(employee.id)).name == "Original"


@pytest.mark.asyncio
async def test_update_of_missing_employee_commits_empty_transaction(
    transactions, listener, employees
) -> None:
    with pytest.raises(InterceptionFailure) as exc_info:
        await _demo(transactions, employees).update_employee(None)

    assert isinstance(exc_info.value.__cause__, AttributeError)
    assert listener.kinds() == ["begin", "commit"]


@pytest.mark.asyncio
async def test_wrapped_inner_failure_rolls_back_the_outer_transaction(
    transactions, listener, employees, make_employee
) -> None:
    # The inner method commits on AttributeError only when it owns the transaction;
    # joined, it hands the outer scope an InterceptionFailure, which rolls back.
    employee = await employees.save(make_employee(name="Original"))
    listener.events.clear()
    failing = FailingEmployeeGateway(transactions, AttributeError("dangling reference"))

    with pytest.raises(InterceptionFailure):
        await _demo(transactions, failing).update_employee_and_access_card(employee, _card())

    assert listener.kinds() == ["begin", "rollback"]
    assert (await employees.find_by_id(employee.id)).name == "Original"
    assert await access_card_gateway(transactions).find_all() == []


@pytest.mark.asyncio
async def test_read_employee_and_access_cards_uses_one_read_only_transaction(
    transactions, listener, employees, make_employee
) -> None:
    employee = make_employee(name="Reader")
    employee.access_card = _card()
    await employees.save(employee)
    listener.events.clear()

    found_employees, found_cards = await _demo(
        transactions, employees
    ).read_employee_and_access_cards()

    assert [e.name for e in found_employees] == ["Reader"]
    assert [c.firmware_version for c in found_cards] == ["2.0.1"]
    assert listener.kinds() == ["begin", "commit"]
