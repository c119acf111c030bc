"""Assistant-run orchestration over the OpenAI Assistants API.

Responsibilities:
    - Thread resolution (reuse the caller's thread or create one)
    - Message submission and run polling with bounded, cancellable waits
    - Full thread history retrieval in an explicit order
    - Translation of SDK failures into a tagged error taxonomy

Maintains clean separation from the HTTP layer.
"""

from assistant_gateway.assistant.config import AssistantConfig, get_assistant_config
from assistant_gateway.assistant.errors import (
    AssistantError,
    InvalidTransitionError,
    MessageFetchError,
    RunFailedError,
    RunPollError,
    RunSubmissionError,
    RunTimeoutError,
    ThreadCreationError,
    UpstreamError,
    UpstreamUnavailableError,
)
from assistant_gateway.assistant.messages import ResultCollector
from assistant_gateway.assistant.runs import BackoffPolicy, RunOptions, RunOrchestrator
from assistant_gateway.assistant.service import ChatResult, ChatService, get_chat_service
from assistant_gateway.assistant.threads import AssistantThreadStore
from assistant_gateway.assistant.types import (
    Exchange,
    ExchangeState,
    Message,
    Run,
    RunResult,
    RunStatus,
)

__all__ = [
    "AssistantConfig",
    "AssistantError",
    "AssistantThreadStore",
    "BackoffPolicy",
    "ChatResult",
    "ChatService",
    "Exchange",
    "ExchangeState",
    "InvalidTransitionError",
    "Message",
    "MessageFetchError",
    "ResultCollector",
    "Run",
    "RunFailedError",
    "RunOptions",
    "RunOrchestrator",
    "RunPollError",
    "RunResult",
    "RunStatus",
    "RunSubmissionError",
    "RunTimeoutError",
    "ThreadCreationError",
    "UpstreamError",
    "UpstreamUnavailableError",
    "get_assistant_config",
    "get_chat_service",
]
