"""Thread resolution for a conversation."""

import logging

import openai
from openai import AsyncOpenAI

from assistant_gateway.assistant.errors import ThreadCreationError, translate_upstream_error

logger = logging.getLogger(__name__)


class AssistantThreadStore:
    """Resolves the thread a conversation continues on.

    A caller-supplied thread id is trusted as-is. Without one, a new thread is
    created upstream. Creation is never retried since a blind retry could
    leave duplicate threads behind.
    """

    def __init__(self, client: AsyncOpenAI) -> None:
        self._client = client

    async def resolve(self, thread_id: str | None = None) -> str:
        """Return ``thread_id`` unchanged, or create a thread when absent.

        Args:
            thread_id: Existing thread identifier, if the caller has one.

        Returns:
            The thread identifier to use for this exchange.

        Raises:
            ThreadCreationError: The upstream rejected thread creation.
            UpstreamUnavailableError: The upstream was unreachable or failed.
        """
        if thread_id:
            return thread_id

        try:
            thread = await self._client.beta.threads.create()
        except openai.OpenAIError as e:
            logger.warning(f"Thread creation failed: {e}")
            raise translate_upstream_error(e, ThreadCreationError, "create_thread") from e

        logger.info(f"Created thread {thread.id}")
        return thread.id
