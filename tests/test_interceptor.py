"""
tests.test_interceptor

Events emitted by the `logged` interceptor.
"""

from __future__ import annotations

import pytest
from structlog.testing import capture_logs

from employee_store.errors import InterceptionFailure
from employee_store.observability.interceptor import logged


@logged
def add(a: int, b: int) -> int:
    return a + b


class Greeter:
    @logged
    def greet(self, name: str, *, punctuation: str = "!") -> str:
        return f"hello {name}{punctuation}"

    @logged
    async def fail(self) -> None:
        raise ValueError("nope")


def test_function_call_is_logged_before_and_after() -> None:
    with capture_logs() as logs:
        assert add(2, 3) == 5

    assert [e["event"] for e in logs] == ["call.before", "call.after"]
    before, after = logs
    assert before["signature"].endswith("add")
    assert before["target"] is None
    assert before["args"] == (2, 3)
    assert after["result"] == 5


def test_method_call_logs_target_and_kwargs() -> None:
    greeter = Greeter()
    with capture_logs() as logs:
        assert greeter.greet("world", punctuation="?") == "hello world?"

    before = logs[0]
    assert before["target"] is greeter
    assert before["args"] == ("world",)
    assert before["kwargs"] == {"punctuation": "?"}
    assert before["signature"].endswith("Greeter.greet")


@pytest.mark.asyncio
async def test_error_is_logged_and_wrapped() -> None:
    with capture_logs() as logs:
        with pytest.raises(InterceptionFailure) as exc_info:
            await Greeter().fail()

    assert isinstance(exc_info.value.__cause__, ValueError)
    assert [e["event"] for e in logs] == ["call.before", "call.error"]
    assert logs[1]["log_level"] == "error"


def test_wrapped_function_keeps_its_name() -> None:
    assert add.__name__ == "add"
    assert Greeter.greet.__qualname__ == "Greeter.greet"
