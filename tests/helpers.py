"""SDK-shaped test doubles shared by unit and integration tests."""

import asyncio
from collections.abc import Iterable
from types import SimpleNamespace
from typing import Any

import httpx
import openai

THREAD_ID = "thread_test"
RUN_ID = "run_test"


def make_run(status: str, run_id: str = RUN_ID, thread_id: str = THREAD_ID, last_error: Any = None):
    """Build an SDK-shaped run object."""
    return SimpleNamespace(id=run_id, thread_id=thread_id, status=status, last_error=last_error)


def make_message(
    message_id: str,
    role: str,
    text: str,
    thread_id: str = THREAD_ID,
    created_at: int = 1700000000,
):
    """Build an SDK-shaped message object with one text block."""
    block = SimpleNamespace(type="text", text=SimpleNamespace(value=text, annotations=[]))
    return SimpleNamespace(
        id=message_id,
        role=role,
        content=[block],
        thread_id=thread_id,
        created_at=created_at,
    )


def status_error(status_code: int, message: str = "upstream error") -> openai.APIStatusError:
    """Build an SDK status error as raised for an HTTP error response."""
    request = httpx.Request("POST", "https://api.openai.com/v1/threads")
    body = {"error": {"message": message}}
    response = httpx.Response(status_code, request=request, json=body)
    return openai.APIStatusError(message, response=response, body=body)


def connection_error() -> openai.APIConnectionError:
    request = httpx.Request("POST", "https://api.openai.com/v1/threads")
    return openai.APIConnectionError(request=request)


class AsyncPage:
    """Async-iterable stand-in for the SDK's message paginator."""

    def __init__(self, items: Iterable[Any], error: Exception | None = None) -> None:
        self._items = list(items)
        self._error = error

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for item in self._items:
            yield item
        if self._error is not None:
            raise self._error


class FakeClock:
    """Monotonic clock plus sleep that only advances the clock."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds
        await asyncio.sleep(0)
