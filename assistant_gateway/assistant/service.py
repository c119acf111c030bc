"""Chat service tying thread resolution, run orchestration and result collection.

Core module for the gateway's conversation handling.

Architecture Decisions:

1. **AsyncOpenAI with max_retries=0** - The SDK retries failed requests by
   default, including thread, message and run creation. Those calls are not
   idempotent, so SDK-level retries are switched off; the only retry left is
   the optional run status read retry in the orchestrator.

2. **Singleton Pattern** - One client connection pool and one orchestrator are
   shared by all requests, so the per-thread run lock and the concurrency cap
   see every request.

3. **Service Wrapper** - Decouples the HTTP layer from the Assistants API.
   Routes only deal with `ChatResult` and the error taxonomy.

4. **Explicit state machine** - Each turn is tracked as an `Exchange`, which
   makes the logs for a failed turn show exactly how far it got.
"""

import logging
from dataclasses import replace

from openai import AsyncOpenAI
from pydantic import BaseModel

from assistant_gateway.assistant.config import AssistantConfig, get_assistant_config
from assistant_gateway.assistant.messages import ResultCollector
from assistant_gateway.assistant.runs import RunOptions, RunOrchestrator
from assistant_gateway.assistant.threads import AssistantThreadStore
from assistant_gateway.assistant.types import Exchange, ExchangeState, Message, RunResult

logger = logging.getLogger(__name__)


class ChatResult(BaseModel):
    """Outcome of one chat turn.

    Attributes:
        thread_id: Thread the turn ran on; reuse it for follow-up turns.
        messages: Full thread history in the configured order.
        run: Run bookkeeping for the turn.
    """

    thread_id: str
    messages: list[Message]
    run: RunResult


def create_client(config: AssistantConfig) -> AsyncOpenAI:
    """Create the Assistants API client.

    Args:
        config: Assistant configuration.

    Returns:
        AsyncOpenAI client with SDK retries disabled.
    """
    return AsyncOpenAI(
        api_key=config.openai_api_key,
        base_url=config.base_url,
        timeout=config.request_timeout,
        max_retries=0,
    )


class ChatService:
    """Runs one user turn against the assistant.

    Flow: resolve thread -> submit message and wait for the run ->
    fetch the thread's messages.
    """

    def __init__(
        self,
        config: AssistantConfig | None = None,
        client: AsyncOpenAI | None = None,
    ) -> None:
        """Initialize the chat service.

        Args:
            config: Optional assistant configuration.
                    Loads from environment if not provided.
            client: Optional preconfigured client, mainly for tests.
        """
        self._config = config or get_assistant_config()
        self._client = client or create_client(self._config)
        self._threads = AssistantThreadStore(self._client)
        self._orchestrator = RunOrchestrator(self._client, self._config)
        self._collector = ResultCollector(self._client, order=self._config.message_order)

    @property
    def config(self) -> AssistantConfig:
        return self._config

    @property
    def threads(self) -> AssistantThreadStore:
        return self._threads

    @property
    def orchestrator(self) -> RunOrchestrator:
        return self._orchestrator

    @property
    def collector(self) -> ResultCollector:
        return self._collector

    async def chat(
        self,
        message: str,
        thread_id: str | None = None,
        options: RunOptions | None = None,
    ) -> ChatResult:
        """Send a user message and return the updated thread history.

        Args:
            message: The user's message.
            thread_id: Existing thread, or None to start a new one.
            options: Per-call run options. A fresh ``Exchange`` is used unless
                the options carry one, which lets callers inspect the turn.

        Returns:
            ChatResult with the thread id and all of its messages.

        Raises:
            AssistantError: Any workflow failure; no partial result is returned.
            asyncio.CancelledError: The caller cancelled the turn.
        """
        options = options or RunOptions()
        exchange = options.exchange or Exchange()
        options = replace(options, exchange=exchange)

        try:
            resolved = await self._threads.resolve(thread_id)
            exchange.thread_id = resolved
            exchange.advance(ExchangeState.THREAD_RESOLVED)

            result = await self._orchestrator.submit_and_wait(resolved, message, options)

            messages = await self._collector.fetch_messages(resolved)
            exchange.advance(ExchangeState.MESSAGES_FETCHED)
        finally:
            path = " -> ".join(state.value for state in exchange.history)
            logger.debug(f"Exchange on thread {exchange.thread_id}: {path}")

        return ChatResult(thread_id=resolved, messages=messages, run=result)

    async def history(self, thread_id: str) -> list[Message]:
        """Return the messages of an existing thread."""
        return await self._collector.fetch_messages(thread_id)

    async def aclose(self) -> None:
        """Release the client's connection pool."""
        await self._client.close()


# Module-level singleton instance
_chat_service: ChatService | None = None


def get_chat_service() -> ChatService:
    """Get or create the global chat service.

    Uses singleton pattern for resource efficiency.

    Returns:
        The ChatService instance.
    """
    global _chat_service
    if _chat_service is None:
        _chat_service = ChatService()
    return _chat_service


async def shutdown_chat_service() -> None:
    """Close and forget the global chat service, if one was created."""
    global _chat_service
    if _chat_service is not None:
        await _chat_service.aclose()
        _chat_service = None
