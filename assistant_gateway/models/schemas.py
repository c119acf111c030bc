"""Request and response models for the chat and search endpoints."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from assistant_gateway.assistant.types import Message


class ChatRequest(BaseModel):
    """Request payload for the chat endpoint.

    Attributes:
        message: User's message.
        thread_id: Optional thread for conversation continuity.
    """

    model_config = ConfigDict(populate_by_name=True)

    message: str = Field(..., min_length=1)
    thread_id: str | None = Field(default=None, alias="threadId")

    @field_validator("message", mode="before")
    @classmethod
    def strip_message(cls, v: str) -> str:
        """Strip whitespace from message before validation."""
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("thread_id", mode="before")
    @classmethod
    def blank_thread_is_none(cls, v: str | None) -> str | None:
        if isinstance(v, str) and not v.strip():
            return None
        return v


class ChatResponse(BaseModel):
    """Thread id plus the full thread history after one chat turn."""

    model_config = ConfigDict(populate_by_name=True)

    thread_id: str = Field(..., alias="threadId")
    messages: list[Message]


class HistoryResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    thread_id: str = Field(..., alias="threadId")
    messages: list[Message]


class ErrorDetail(BaseModel):
    """Structured description of a failed chat turn.

    Attributes:
        type: Error tag, e.g. ``run_failed`` or ``upstream_unavailable``.
        message: Human readable summary.
        status: Terminal run status, for failed runs.
        upstream_status: HTTP status returned by the upstream, if any.
    """

    model_config = ConfigDict(populate_by_name=True)

    type: str
    message: str
    status: str | None = None
    upstream_status: int | None = Field(default=None, alias="upstreamStatus")


class ErrorResponse(BaseModel):
    error: ErrorDetail


class SearchRequest(BaseModel):
    """Request payload for the search proxy.

    Both fields are loosely typed: a missing or blank query is answered with
    400 rather than a validation error, and ``page`` is sanitized by
    `parse_page`.
    """

    query: Any = None
    page: Any = 1


class SearchResult(BaseModel):
    """A single PDF-like search hit."""

    title: str
    url: str
    description: str
    date: str | None = None
    snippet: str | None = None


class SearchResponse(BaseModel):
    """Filtered search results for one page.

    Attributes:
        results: At most one page of PDF-like results.
        total_results: Upstream total, or the filtered count when absent.
        query: The trimmed query.
        page: The sanitized page number.
    """

    model_config = ConfigDict(populate_by_name=True)

    results: list[SearchResult]
    total_results: int = Field(..., alias="totalResults")
    query: str
    page: int
