"""
employee_store.db.models

Persistence schema for the employee directory.

Responsibilities:
- Define ORM models and their relations:
  - Employee: identity, immutable ssn, classification, owned pay stubs
  - AccessCard: one-to-one with Employee (Employee holds the key)
  - PayStub: owning side of the Employee one-to-many
  - EmailGroup: many-to-many with Employee through `email_group_mapping`
"""

from __future__ import annotations

import enum
from datetime import date
from typing import Any

from sqlalchemy import (
    BigInteger,
    Column,
    Date,
    Enum,
    Float,
    ForeignKey,
    Integer,
    Sequence,
    String,
    Table,
    inspect,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from employee_store.db.base import Base
from employee_store.errors import ConstraintViolation

# Numeric identities come from a database-native sequence. SQLite has no sequences, so
# the variant keeps INTEGER PRIMARY KEY there (rowid autoincrement).
_Id = BigInteger().with_variant(Integer, "sqlite")


class EmployeeType(enum.StrEnum):
    # Stored by member name (see `Enum(..., native_enum=False)` below), so reordering
    # or adding members never changes what existing rows mean.
    FULL_TIME = "full-time"
    PART_TIME = "part-time"
    CONTRACTOR = "contractor"


email_group_mapping = Table(
    "email_group_mapping",
    Base.metadata,
    Column("employee_id", ForeignKey("employee_data.id"), primary_key=True),
    Column("email_group_id", ForeignKey("email_group.id"), primary_key=True),
)


class AccessCard(Base):
    __tablename__ = "access_card"

    id: Mapped[int] = mapped_column(_Id, Sequence("access_card_id_seq"), primary_key=True)
    issued_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    is_active: Mapped[bool] = mapped_column(nullable=False, default=True)
    firmware_version: Mapped[str | None] = mapped_column(String(32), nullable=True)

    owner: Mapped[Employee | None] = relationship(back_populates="access_card")

    def __repr__(self) -> str:
        return (
            f"AccessCard(id={self.id!r}, issued_date={self.issued_date!r}, "
            f"is_active={self.is_active!r}, firmware_version={self.firmware_version!r})"
        )


class Employee(Base):
    __tablename__ = "employee_data"

    id: Mapped[int] = mapped_column(_Id, Sequence("employee_id_seq"), primary_key=True)
    ssn: Mapped[str] = mapped_column(String(10), unique=True, nullable=False)
    name: Mapped[str | None] = mapped_column("emp_name", String(150), nullable=True)
    age: Mapped[int] = mapped_column(nullable=False, default=0)
    dob: Mapped[date | None] = mapped_column(Date, nullable=True)
    type: Mapped[EmployeeType | None] = mapped_column(
        Enum(EmployeeType, native_enum=False, length=32, validate_strings=True), nullable=True
    )

    access_card_id: Mapped[int | None] = mapped_column(
        ForeignKey("access_card.id"), unique=True, nullable=True
    )
    # Eager relations are fetched in the same SELECT (join); pay stubs stay lazy and
    # must be fetched explicitly (`awaitable_attrs` or `EmployeeGateway.fetch_pay_stubs`).
    # Saving a detached employee (merge) leaves its pay stubs untouched.
    access_card: Mapped[AccessCard | None] = relationship(back_populates="owner", lazy="joined")
    pay_stubs: Mapped[list[PayStub]] = relationship(
        back_populates="employee",
        cascade="save-update, delete",
        order_by="PayStub.pay_period_start",
    )
    email_groups: Mapped[list[EmailGroup]] = relationship(
        secondary=email_group_mapping, back_populates="members", lazy="joined"
    )

    # Never mapped: lives on the instance only.
    not_to_be_persisted = None

    def __init__(self, **kwargs: Any) -> None:
        # New employees start with empty relations (never None, never an implicit load).
        kwargs.setdefault("access_card", None)
        kwargs.setdefault("pay_stubs", [])
        kwargs.setdefault("email_groups", [])
        super().__init__(**kwargs)

    @validates("ssn")
    def _validate_ssn(self, _: str, value: str) -> str:
        state = inspect(self)
        if not state.has_identity:
            return value
        # An expired instance has no loaded ssn to compare against.
        if "ssn" not in self.__dict__ or value != self.__dict__["ssn"]:
            # Expired attributes, self.id included, are not readable without SQL.
            raise ConstraintViolation(f"ssn of employee {state.identity[0]!r} cannot be changed")
        return value

    def add_pay_stub(self, pay_stub: PayStub) -> None:
        self.pay_stubs.append(pay_stub)

    def add_email_group(self, email_group: EmailGroup) -> None:
        self.email_groups.append(email_group)

    def _fields(self) -> str:
        return (
            f"id={self.id!r}, ssn={self.ssn!r}, name={self.name!r}, age={self.age!r}, "
            f"dob={self.dob!r}, type={self.type.name if self.type else None}, "
            f"not_to_be_persisted={self.not_to_be_persisted!r}"
        )

    def __repr__(self) -> str:
        # Only reads what is already loaded; diagnostics never trigger SQL.
        card = self.__dict__.get("access_card")
        return f"Employee({self._fields()}, access_card={card!r})"

    def repr_without_access_card(self) -> str:
        return f"Employee({self._fields()})"


class PayStub(Base):
    __tablename__ = "pay_stub"

    id: Mapped[int] = mapped_column(_Id, Sequence("pay_stub_id_seq"), primary_key=True)
    pay_period_start: Mapped[date] = mapped_column(Date, nullable=False)
    pay_period_end: Mapped[date] = mapped_column(Date, nullable=False)
    salary: Mapped[float] = mapped_column(Float, nullable=False)

    employee_id: Mapped[int] = mapped_column(
        ForeignKey("employee_data.id"), nullable=False, index=True
    )
    employee: Mapped[Employee] = relationship(back_populates="pay_stubs")

    def __repr__(self) -> str:
        return (
            f"PayStub(id={self.id!r}, employee_id={self.employee_id!r}, "
            f"pay_period_start={self.pay_period_start!r}, pay_period_end={self.pay_period_end!r}, "
            f"salary={self.salary!r})"
        )


class EmailGroup(Base):
    __tablename__ = "email_group"

    id: Mapped[int] = mapped_column(_Id, Sequence("email_group_id_seq"), primary_key=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False, unique=True)

    members: Mapped[list[Employee]] = relationship(
        secondary=email_group_mapping, back_populates="email_groups"
    )

    def __repr__(self) -> str:
        return f"EmailGroup(id={self.id!r}, name={self.name!r})"


# --- Module Notes -----------------------------------------------------------
# Deleting an Employee deletes its PayStubs through the ORM cascade; EmailGroups
# only lose their mapping rows. Enum columns store member names, a stable contract.
