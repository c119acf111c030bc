"""Pydantic models for API requests and responses.

Provides type safety, validation, and automatic OpenAPI documentation.

Models:
    - ChatRequest: Incoming chat turn with optional thread id
    - ChatResponse: Thread id and full message history
    - ErrorResponse: Structured error for failed chat turns
    - SearchRequest: Search query and page
    - SearchResponse: PDF-filtered search results
"""

from assistant_gateway.models.schemas import (
    ChatRequest,
    ChatResponse,
    ErrorDetail,
    ErrorResponse,
    HistoryResponse,
    SearchRequest,
    SearchResponse,
    SearchResult,
)

__all__ = [
    "ChatRequest",
    "ChatResponse",
    "ErrorDetail",
    "ErrorResponse",
    "HistoryResponse",
    "SearchRequest",
    "SearchResponse",
    "SearchResult",
]
