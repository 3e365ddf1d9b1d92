"""
tests.test_models

Entity defaults and diagnostics that need no database.
"""

from __future__ import annotations

from datetime import date

from employee_store.db.models import AccessCard, EmailGroup, Employee, EmployeeType, PayStub


def test_new_employee_starts_with_empty_relations() -> None:
    employee = Employee(ssn="1")
    assert employee.access_card is None
    assert employee.pay_stubs == []
    assert employee.email_groups == []
    assert employee.not_to_be_persisted is None


def test_relation_helpers_keep_both_sides_in_sync() -> None:
    employee = Employee(ssn="1")
    stub = PayStub(pay_period_start=date(2024, 1, 1), pay_period_end=date(2024, 1, 31), salary=1.0)
    group = EmailGroup(name="ops")

    employee.add_pay_stub(stub)
    employee.add_email_group(group)

    assert stub.employee is employee
    assert group.members == [employee]


def test_repr_includes_access_card_only_on_request() -> None:
    employee = Employee(ssn="42", name="Kautilya", age=30, type=EmployeeType.CONTRACTOR)
    employee.access_card = AccessCard(firmware_version="1.0")

    full = repr(employee)
    short = employee.repr_without_access_card()

    assert "type=CONTRACTOR" in full
    assert "AccessCard(" in full
    assert "AccessCard(" not in short
    assert short.startswith("Employee(id=None, ssn='42', name='Kautilya'")


def test_ssn_can_change_before_first_save() -> None:
    employee = Employee(ssn="1")
    employee.ssn = "2"
    assert employee.ssn == "2"
