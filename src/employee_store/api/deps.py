"""
employee_store.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Provide dependency functions for the transaction manager and gateways.
- Encapsulate app.state access patterns.
"""

from __future__ import annotations

from fastapi import Depends, Request

from employee_store.db.transactions import TransactionManager
from employee_store.services.gateway import EmployeeGateway


def transactions_from_app(request: Request) -> TransactionManager:
    # Created on app startup in `employee_store.api.app.create_app`.
    return request.app.state.transactions  # type: ignore[attr-defined]


def employee_gateway(
    transactions: TransactionManager = Depends(transactions_from_app),
) -> EmployeeGateway:
    return EmployeeGateway(transactions)
