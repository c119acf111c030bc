"""Chat endpoints.

Each POST is one user turn: the message is posted to the thread (created on
first use), the assistant run is awaited, and the full thread history is
returned. Workflow failures are rendered by the `AssistantError` handler
registered in `create_app`.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import ValidationError

from assistant_gateway.assistant.service import ChatService, get_chat_service
from assistant_gateway.models.schemas import ChatRequest, ChatResponse, HistoryResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chat", tags=["chat"])


def chat_service() -> ChatService:
    """Dependency returning the chat service, or 503 when it is not configured."""
    try:
        return get_chat_service()
    except ValidationError as e:
        logger.error(f"Assistant is not configured: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Assistant is not configured. Set OPENAI_API_KEY and ASSISTANT_ID.",
        ) from e


@router.post("", response_model=ChatResponse)
async def chat(
    request: ChatRequest,
    service: ChatService = Depends(chat_service),
) -> ChatResponse:
    """Send a message to the assistant.

    Args:
        request: Message text and optional thread id.

    Returns:
        ChatResponse with the thread id and its messages, oldest first.

    Raises:
        422: Empty or missing message.
        502: The run failed or the upstream rejected a call.
        503: Upstream unreachable, or the assistant is not configured.
        504: The run did not finish in time.
    """
    result = await service.chat(request.message, request.thread_id)
    return ChatResponse(thread_id=result.thread_id, messages=result.messages)


@router.get("/threads/{thread_id}/messages", response_model=HistoryResponse)
async def thread_messages(
    thread_id: str,
    service: ChatService = Depends(chat_service),
) -> HistoryResponse:
    """Return the message history of an existing thread."""
    messages = await service.history(thread_id)
    return HistoryResponse(thread_id=thread_id, messages=messages)
