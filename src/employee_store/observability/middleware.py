"""
employee_store.observability.middleware

HTTP middleware for request-scoped logging context.

Responsibilities:
- Accept or generate a request id and echo it in `x-request-id`.
- Bind it into structlog contextvars so transaction events of the request carry it.
- Log one completion event per request with status and elapsed time.
"""

from __future__ import annotations

import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from employee_store.observability.logging import get_logger

log = get_logger(__name__)


class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get("x-request-id") or uuid.uuid4().hex
        started = time.perf_counter()
        with structlog.contextvars.bound_contextvars(
            request_id=request_id, method=request.method, path=request.url.path
        ):
            try:
                response: Response = await call_next(request)
            except Exception:
                log.exception("request.failed", elapsed_ms=_elapsed_ms(started))
                raise
            log.info(
                "request.completed",
                status=response.status_code,
                elapsed_ms=_elapsed_ms(started),
            )

        response.headers["x-request-id"] = request_id
        return response


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)
