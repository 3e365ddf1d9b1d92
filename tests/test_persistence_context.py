"""
tests.test_persistence_context

Extended persistence contexts and the startup demonstration sequence.
"""

from __future__ import annotations

import pytest

from employee_store.db.models import Employee
from employee_store.db.persistence_context import ExtendedPersistenceContext
from employee_store.db.transactions import Propagation
from employee_store.errors import ConstraintViolation, IllegalTransactionStateError
from employee_store.services.demo import find_without_transaction, run_demo


@pytest.mark.asyncio
async def test_entity_persisted_outside_transaction_is_written_by_next_one(
    transactions, session_factory, listener, employees, make_employee
) -> None:
    employee = make_employee(name="Queued")
    async with ExtendedPersistenceContext.open(transactions, session_factory) as ctx:
        ctx.persist(employee)
        assert ctx.contains(employee)
        assert employee.id is None
        assert listener.kinds() == []

        async with ctx.transaction() as tx:
            assert tx.new_transaction
            assert tx.session is ctx.session

    assert employee.id is not None
    assert (await employees.find_by_id(employee.id)).name == "Queued"
    assert listener.kinds() == ["begin", "commit"]


@pytest.mark.asyncio
async def test_identity_map_survives_across_transactions(
    transactions, session_factory, employees, make_employee
) -> None:
    saved = await employees.save(make_employee())
    async with ExtendedPersistenceContext.open(transactions, session_factory) as ctx:
        async with ctx.transaction():
            first = await ctx.find(Employee, saved.id)
        async with ctx.transaction():
            first.age = 44
        second = await ctx.find(Employee, saved.id)
        assert second is first

    assert (await employees.find_by_id(saved.id)).age == 44


@pytest.mark.asyncio
async def test_rollback_discards_queued_entities(
    transactions, session_factory, employees, make_employee
) -> None:
    employee = make_employee()
    async with ExtendedPersistenceContext.open(transactions, session_factory) as ctx:
        ctx.persist(employee)
        with pytest.raises(ValueError):
            async with ctx.transaction():
                await ctx.flush()
                raise ValueError("abandon")
        assert not ctx.contains(employee)

    assert await employees.find_all() == []


@pytest.mark.asyncio
async def test_extended_transaction_inside_other_transaction_is_independent(
    transactions, session_factory, listener, make_employee
) -> None:
    async with transactions.transaction(read_only=True) as outer:
        async with ExtendedPersistenceContext.open(transactions, session_factory) as ctx:
            ctx.persist(make_employee())
            async with ctx.transaction(Propagation.REQUIRED) as inner:
                assert inner.new_transaction
                assert inner.id != outer.id
            assert transactions.current() is outer

    assert listener.kinds() == ["begin", "begin", "commit", "commit"]


@pytest.mark.asyncio
async def test_ssn_stays_immutable_after_rollback_expires_the_employee(
    transactions, session_factory, employees, make_employee
) -> None:
    saved = await employees.save(make_employee(ssn="111111111"))
    async with ExtendedPersistenceContext.open(transactions, session_factory) as ctx:
        with pytest.raises(ValueError):
            async with ctx.transaction():
                employee = await ctx.find(Employee, saved.id)
                raise ValueError("abandon")
        assert "ssn" not in employee.__dict__

        async with ctx.transaction():
            with pytest.raises(ConstraintViolation):
                employee.ssn = "999999999"

    assert (await employees.find_by_id(saved.id)).ssn == "111111111"


@pytest.mark.asyncio
@pytest.mark.parametrize("propagation", [Propagation.REQUIRES_NEW, Propagation.NOT_SUPPORTED])
async def test_context_cannot_suspend_its_own_transaction(
    transactions, session_factory, listener, employees, make_employee, propagation
) -> None:
    async with ExtendedPersistenceContext.open(transactions, session_factory) as ctx:
        with pytest.raises(ValueError):
            async with ctx.transaction():
                ctx.persist(make_employee(name="OuterOnly"))
                await ctx.flush()
                with pytest.raises(IllegalTransactionStateError):
                    async with ctx.transaction(propagation):
                        pass
                raise ValueError("outer fails")

    assert await employees.find_all() == []
    assert listener.kinds() == ["begin", "rollback"]


@pytest.mark.asyncio
async def test_reads_before_first_transaction_are_continued_by_it(
    transactions, session_factory, employees, make_employee
) -> None:
    saved = await employees.save(make_employee())
    async with ExtendedPersistenceContext.open(transactions, session_factory) as ctx:
        employee = await ctx.find(Employee, saved.id)
        assert ctx.session.in_transaction()
        async with ctx.transaction():
            employee.name = "Renamed"

    assert (await employees.find_by_id(saved.id)).name == "Renamed"


@pytest.mark.asyncio
async def test_find_without_transaction_opens_no_transaction(
    transactions, listener, employees, make_employee
) -> None:
    saved = await employees.save(make_employee())
    listener.events.clear()

    found = await find_without_transaction(transactions, saved.id)

    assert found.ssn == saved.ssn
    assert listener.kinds() == []


@pytest.mark.asyncio
async def test_run_demo_saves_two_employees_and_reads_the_first(
    transactions, session_factory, employees
) -> None:
    result = await run_demo(transactions, session_factory)

    assert (result.short_lived_id, result.extended_id) == (1, 2)
    assert result.first_employee is not None
    assert result.first_employee.name == "Kautilya"
    assert [e.name for e in await employees.find_all()] == ["Kautilya", "Chanakya"]
