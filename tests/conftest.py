"""
tests.conftest

Shared fixtures: a file-backed SQLite database per test, the transaction manager
wired over it, and a listener recording transaction events.
"""

from __future__ import annotations

import itertools
from collections.abc import AsyncIterator, Callable
from datetime import date
from typing import Any

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from employee_store.db.init_db import init_db
from employee_store.db.models import Employee, EmployeeType
from employee_store.db.session import create_engine, create_sessionmaker
from employee_store.db.transactions import TransactionManager, TransactionStatus
from employee_store.services.gateway import EmployeeGateway
from employee_store.settings import Settings


class RecordingListener:
    def __init__(self) -> None:
        self.events: list[tuple[str, int | None]] = []

    def on_begin(self, status: TransactionStatus) -> None:
        self.events.append(("begin", status.id))

    def on_commit(self, status: TransactionStatus) -> None:
        self.events.append(("commit", status.id))

    def on_rollback(self, status: TransactionStatus) -> None:
        self.events.append(("rollback", status.id))

    def kinds(self) -> list[str]:
        return [kind for kind, _ in self.events]

    def count(self, kind: str) -> int:
        return self.kinds().count(kind)


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(env="test", database_url=f"sqlite+aiosqlite:///{tmp_path / 'employees.db'}")


@pytest_asyncio.fixture
async def engine(settings: Settings) -> AsyncIterator[AsyncEngine]:
    engine = create_engine(settings)
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return create_sessionmaker(engine)


@pytest.fixture
def transactions(session_factory: async_sessionmaker[AsyncSession]) -> TransactionManager:
    return TransactionManager(session_factory)


@pytest.fixture
def listener(transactions: TransactionManager) -> RecordingListener:
    recorder = RecordingListener()
    transactions.add_listener(recorder)
    return recorder


@pytest.fixture
def employees(transactions: TransactionManager) -> EmployeeGateway:
    return EmployeeGateway(transactions)


@pytest.fixture
def make_employee() -> Callable[..., Employee]:
    ssns = itertools.count(100000001)

    def factory(**overrides: Any) -> Employee:
        fields: dict[str, Any] = {
            "ssn": str(next(ssns)),
            "name": "Kautilya",
            "age": 30,
            "dob": date(1994, 5, 17),
            "type": EmployeeType.FULL_TIME,
        }
        fields.update(overrides)
        return Employee(**fields)

    return factory
