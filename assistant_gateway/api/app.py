"""FastAPI application factory and configuration.

Main application entry point with lifespan management, middleware,
error handlers and router registration.
"""

import logging
from collections.abc import AsyncGenerator, Iterable
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.types import ASGIApp, Receive, Scope, Send

from assistant_gateway.api.chat import router as chat_router
from assistant_gateway.api.search import SEARCH_PATH, get_origin_policy
from assistant_gateway.api.search import router as search_router
from assistant_gateway.assistant.errors import (
    AssistantError,
    InvalidTransitionError,
    RunTimeoutError,
    UpstreamUnavailableError,
)
from assistant_gateway.assistant.service import shutdown_chat_service
from assistant_gateway.models.schemas import ErrorDetail, ErrorResponse
from assistant_gateway.search.proxy import shutdown_search_proxy

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application startup and shutdown lifecycle.

    Upstream clients are created lazily on first use and closed here.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control to the application while it runs.
    """
    logger.info("Starting Assistant Gateway API...")
    yield
    logger.info("Shutting down Assistant Gateway API...")
    await shutdown_chat_service()
    await shutdown_search_proxy()


class ScopedCORSMiddleware(CORSMiddleware):
    """CORSMiddleware that leaves some paths to their own origin handling.

    The search proxy answers disallowed origins, preflights included, with an
    empty 403 and advertises only its own methods, so it bypasses this layer.
    """

    def __init__(self, app: ASGIApp, *, exclude_paths: Iterable[str] = (), **kwargs: Any) -> None:
        super().__init__(app, **kwargs)
        self.exclude_paths = frozenset(exclude_paths)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http" and scope["path"].rstrip("/") in self.exclude_paths:
            await self.app(scope, receive, send)
            return
        await super().__call__(scope, receive, send)


def _status_for(error: AssistantError) -> int:
    if isinstance(error, UpstreamUnavailableError):
        return status.HTTP_503_SERVICE_UNAVAILABLE
    if isinstance(error, RunTimeoutError):
        return status.HTTP_504_GATEWAY_TIMEOUT
    if isinstance(error, InvalidTransitionError):
        return status.HTTP_500_INTERNAL_SERVER_ERROR
    return status.HTTP_502_BAD_GATEWAY


async def assistant_error_handler(request: Request, exc: AssistantError) -> JSONResponse:
    """Render workflow failures as a structured error body."""
    code = _status_for(exc)
    logger.warning(f"{request.method} {request.url.path} failed with {exc.error_type}: {exc}")
    detail = ErrorDetail(
        type=exc.error_type,
        message=exc.message,
        status=getattr(exc, "status", None),
        upstream_status=getattr(exc, "status_code", None),
    )
    return JSONResponse(
        status_code=code,
        content=ErrorResponse(error=detail).model_dump(by_alias=True),
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    application = FastAPI(
        title="Assistant Gateway API",
        description=(
            "Chat gateway in front of an OpenAI assistant. Each chat turn posts the "
            "user's message to a thread, waits for the assistant run to finish and "
            "returns the thread history. Also proxies web searches to Brave Search, "
            "returning PDF documents only."
        ),
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    policy = get_origin_policy()
    application.add_middleware(
        ScopedCORSMiddleware,
        exclude_paths=[SEARCH_PATH],
        allow_origins=policy.allowed_origins,
        allow_origin_regex=policy.origin_regex(),
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    application.add_exception_handler(AssistantError, assistant_error_handler)

    application.include_router(chat_router)
    application.include_router(search_router)

    @application.get("/health")
    async def health_check() -> dict[str, str]:
        """Check service health status."""
        return {"status": "healthy", "service": "assistant-gateway"}

    return application


app = create_app()
