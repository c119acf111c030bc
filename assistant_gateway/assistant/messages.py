"""Message history retrieval."""

import logging
from typing import Literal

import openai
from openai import AsyncOpenAI

from assistant_gateway.assistant.errors import MessageFetchError, translate_upstream_error
from assistant_gateway.assistant.types import Message

logger = logging.getLogger(__name__)

# Upstream maximum page size for message listing.
PAGE_SIZE = 100

MessageOrder = Literal["asc", "desc"]


class ResultCollector:
    """Reads the complete message history of a thread.

    Ordering is always explicit: ``asc`` returns oldest-first, which is what
    the chat widget renders; ``desc`` returns newest-first. Pagination is
    followed until the thread is exhausted. Reads are not retried.
    """

    def __init__(self, client: AsyncOpenAI, order: MessageOrder = "asc") -> None:
        self._client = client
        self._order = order

    @property
    def order(self) -> MessageOrder:
        return self._order

    async def fetch_messages(
        self,
        thread_id: str,
        order: MessageOrder | None = None,
    ) -> list[Message]:
        """Fetch every message in a thread.

        Args:
            thread_id: Thread to read.
            order: Overrides the configured ordering for this call.

        Returns:
            Messages in the requested order.

        Raises:
            MessageFetchError: The upstream rejected the listing.
            UpstreamUnavailableError: The upstream was unreachable or failed.
        """
        order = order or self._order
        messages: list[Message] = []

        try:
            # The SDK paginator follows cursors across pages.
            async for item in self._client.beta.threads.messages.list(
                thread_id=thread_id,
                order=order,
                limit=PAGE_SIZE,
            ):
                messages.append(Message.from_upstream(item))
        except openai.OpenAIError as e:
            logger.warning(f"Listing messages of thread {thread_id} failed: {e}")
            raise translate_upstream_error(e, MessageFetchError, "list_messages") from e

        logger.info(f"Fetched {len(messages)} messages from thread {thread_id}")
        return messages
