"""
employee_store.api.app

FastAPI app factory for the employee store service.

Responsibilities:
- Build the FastAPI application and register routers/middleware.
- Wire shared infrastructure explicitly: engine -> sessionmaker -> TransactionManager.
- Run the startup hook (table bootstrap in dev/test, optional demo sequence).
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from employee_store import __version__
from employee_store.api.routers.employees import router as employees_router
from employee_store.api.routers.health import router as health_router
from employee_store.db.init_db import init_db
from employee_store.db.session import create_engine, create_sessionmaker
from employee_store.db.transactions import TransactionManager
from employee_store.observability.logging import configure_logging, get_logger
from employee_store.observability.middleware import RequestContextMiddleware
from employee_store.services.demo import run_demo
from employee_store.settings import Settings

log = get_logger(__name__)


def create_app(*, settings: Settings) -> FastAPI:
    configure_logging(
        service_name=settings.service_name,
        level=settings.log_level,
        echo_sql=settings.echo_sql,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env)
        engine = create_engine(settings)
        session_factory = create_sessionmaker(engine)
        app.state.transactions = TransactionManager(session_factory)
        if settings.env in ("dev", "test"):
            # Dev/test convenience: create tables automatically. Prod uses Alembic.
            await init_db(engine)
        if settings.run_demo_on_startup:
            result = await run_demo(app.state.transactions, session_factory)
            log.info(
                "demo.completed",
                short_lived_id=result.short_lived_id,
                extended_id=result.extended_id,
            )
        try:
            yield
        finally:
            await engine.dispose()
            log.info("shutdown")

    app = FastAPI(
        title="Employee Store",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(RequestContextMiddleware)
    app.include_router(health_router, tags=["health"])
    app.include_router(employees_router)

    return app


# --- Module Notes -----------------------------------------------------------
# This file is the composition root; business rules stay in services and the
# transaction rules in `db.transactions`.
