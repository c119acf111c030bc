"""Pytest fixtures and shared test configuration.

Provides reusable fixtures for unit and integration tests.

Fixtures:
    - assistant_config: Valid AssistantConfig with short polling
    - openai_client: Mocked AsyncOpenAI exposing the Assistants calls
    - fake_clock: Deterministic clock whose sleep advances time
    - async_client: HTTPX client for API testing

SDK-shaped doubles live in tests/helpers.py so tests never touch the
network.
"""

from collections.abc import AsyncGenerator
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

from assistant_gateway.api import app
from assistant_gateway.assistant.config import AssistantConfig
from tests.helpers import AsyncPage, FakeClock, make_message, make_run


@pytest.fixture
def assistant_config() -> AssistantConfig:
    """Valid configuration with a 1s interval and 5s max wait."""
    return AssistantConfig(
        openai_api_key="sk-test-key",
        assistant_id="asst_test",
        poll_interval=1.0,
        max_wait=5.0,
        backoff="constant",
        message_order="asc",
    )


@pytest.fixture
def thread_messages() -> list[SimpleNamespace]:
    return [
        make_message("msg_1", "user", "What is in the report?", created_at=1700000000),
        make_message("msg_2", "assistant", "The report covers Q3.", created_at=1700000005),
    ]


@pytest.fixture
def openai_client(thread_messages: list[SimpleNamespace]) -> MagicMock:
    """Mocked AsyncOpenAI whose run completes on the second status read."""
    client = MagicMock()
    client.beta.threads.create = AsyncMock(return_value=SimpleNamespace(id="thread_new"))
    client.beta.threads.messages.create = AsyncMock(return_value=SimpleNamespace(id="msg_new"))
    client.beta.threads.runs.create = AsyncMock(return_value=make_run("queued"))
    client.beta.threads.runs.retrieve = AsyncMock(
        side_effect=[make_run("in_progress"), make_run("completed")]
    )
    client.beta.threads.runs.cancel = AsyncMock(return_value=make_run("cancelling"))
    client.beta.threads.messages.list = MagicMock(
        side_effect=lambda **kwargs: AsyncPage(thread_messages)
    )
    client.close = AsyncMock()
    return client


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
async def async_client() -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for API testing.

    Dependency overrides set by a test are cleared afterwards.

    Yields:
        Configured AsyncClient for making test requests.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
