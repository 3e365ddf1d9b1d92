"""
employee_store.observability.interceptor

Around-call logging interceptor.

Responsibilities:
- Wrap a sync or async callable so that a "before" event is logged with the
  target and arguments, the call runs, and an "after" event is logged with
  the result.
- Log any error raised by the call and re-raise it as `InterceptionFailure`
  chained to the original. Errors are never swallowed.
"""

from __future__ import annotations

import functools
import inspect
from collections.abc import Callable
from typing import Any, TypeVar

from employee_store.errors import InterceptionFailure
from employee_store.observability.logging import get_logger

F = TypeVar("F", bound=Callable[..., Any])


def logged(func: F) -> F:
    """
    Decorator form of the logging aspect.

    Compose it outside `transactional` so rollback rules see the raw error:

        @logged
        @transactional(Propagation.REQUIRED)
        async def update_employee(self, employee): ...
    """

    signature = f"{func.__module__}.{func.__qualname__}"
    params = list(inspect.signature(func).parameters)
    is_method = bool(params) and params[0] in ("self", "cls")

    def _split(args: tuple[Any, ...]) -> tuple[Any, tuple[Any, ...]]:
        if is_method and args:
            return args[0], args[1:]
        return None, args

    if inspect.iscoroutinefunction(func):

        @functools.wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            log = get_logger(func.__module__)
            target, call_args = _split(args)
            log.info("call.before", signature=signature, target=target, args=call_args, kwargs=kwargs)
            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                log.error("call.error", signature=signature, error=repr(e))
                raise InterceptionFailure(f"{signature} failed: {e!r}") from e
            log.info("call.after", signature=signature, result=result)
            return result

        return async_wrapper  # type: ignore[return-value]

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        log = get_logger(func.__module__)
        target, call_args = _split(args)
        log.info("call.before", signature=signature, target=target, args=call_args, kwargs=kwargs)
        try:
            result = func(*args, **kwargs)
        except Exception as e:
            log.error("call.error", signature=signature, error=repr(e))
            raise InterceptionFailure(f"{signature} failed: {e!r}") from e
        log.info("call.after", signature=signature, result=result)
        return result

    return wrapper  # type: ignore[return-value]


# --- Module Notes -----------------------------------------------------------
# The logger is resolved per call (named after the wrapped function's module) so
# `structlog.testing.capture_logs` sees interceptor events even after the app has
# configured logging with `cache_logger_on_first_use`.
