"""
employee_store.observability.logging

Structured logging configuration for the service.

Responsibilities:
- Configure `structlog` for JSON logs carrying request and transaction ids.
- Route SQLAlchemy's statement log through the same stdlib handler when SQL echo
  is enabled.
- Provide a small wrapper for obtaining bound loggers.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog


def configure_logging(*, service_name: str, level: str, echo_sql: bool = False) -> None:
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
    )
    # Statements and their parameters are logged at INFO by `sqlalchemy.engine`.
    logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO if echo_sql else logging.WARNING)

    structlog.configure(
        processors=_processors(service_name),
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def _processors(service_name: str) -> list[Any]:
    return [
        # `request_id` (middleware) and `tx_id` (TransactionManager) arrive here.
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        _add_service_name(service_name),
        structlog.processors.dict_tracebacks,
        # Interceptor events carry ORM entities and dates; render them with repr().
        structlog.processors.JSONRenderer(default=repr),
    ]


def _add_service_name(service_name: str):
    def processor(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        event_dict.setdefault("service", service_name)
        return event_dict

    return processor


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


# --- Module Notes -----------------------------------------------------------
# Entity `__repr__` reads loaded state only, so rendering an event never emits SQL.
