"""
employee_store.api.routers.health

Health and readiness endpoints.

Responsibilities:
- Provide liveness probe (`/healthz`).
- Provide readiness probe (`/readyz`) with DB connectivity validation.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy import text

from employee_store.api.deps import transactions_from_app
from employee_store.db.transactions import Propagation, TransactionManager

router = APIRouter()


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/readyz")
async def readyz(transactions: TransactionManager = Depends(transactions_from_app)) -> dict[str, str]:
    # Readiness: verify critical dependency (DB) is reachable.
    async with transactions.transaction(Propagation.NOT_SUPPORTED) as scope:
        await scope.session.execute(text("SELECT 1"))
    return {"status": "ready"}
