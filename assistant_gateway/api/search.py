"""PDF search proxy endpoints.

Origin checks happen before the body is read: a disallowed origin gets an
empty 403, preflight included. This path is excluded from the app-wide
CORS middleware, so every response here carries the `OriginPolicy` headers
itself.
"""

import logging
from functools import lru_cache

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import JSONResponse

from assistant_gateway.models.schemas import SearchRequest, SearchResponse
from assistant_gateway.search.config import get_search_config
from assistant_gateway.search.origins import OriginPolicy
from assistant_gateway.search.proxy import UNEXPECTED_ERROR, SearchError, SearchProxy, get_search_proxy

logger = logging.getLogger(__name__)

SEARCH_PATH = "/api/search"

router = APIRouter(prefix=SEARCH_PATH, tags=["search"])


@lru_cache
def get_origin_policy() -> OriginPolicy:
    """Origin policy built once from the environment."""
    return OriginPolicy.from_config(get_search_config())


def _forbidden(origin: str | None) -> Response:
    logger.warning(f"Rejected search request from origin {origin}")
    return Response(status_code=status.HTTP_403_FORBIDDEN)


@router.post("", response_model=SearchResponse)
async def search(
    request: Request,
    proxy: SearchProxy = Depends(get_search_proxy),
    policy: OriginPolicy = Depends(get_origin_policy),
) -> Response:
    """Search the web for PDF documents.

    Body: ``{"query": str, "page": int}``; ``page`` defaults to 1 and is
    capped at 1000.

    Raises:
        400: Missing or blank query.
        401: Upstream rejected the API key.
        403: Origin not allowed (empty body).
        429: Upstream rate limit.
        500: Missing API key or unexpected failure.
    """
    origin = request.headers.get("origin")
    if not policy.is_allowed(origin):
        return _forbidden(origin)

    try:
        payload = SearchRequest.model_validate(await request.json())
    except ValueError:
        payload = SearchRequest()

    headers = policy.cors_headers(origin)
    try:
        result = await proxy.search(payload.query, payload.page)
    except SearchError as e:
        return JSONResponse({"error": e.message}, status_code=e.status_code, headers=headers)
    except Exception:
        logger.exception("Search API error")
        return JSONResponse(
            {"error": UNEXPECTED_ERROR},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            headers=headers,
        )

    return JSONResponse(result.model_dump(by_alias=True), headers=headers)


@router.options("")
async def search_options(
    request: Request,
    policy: OriginPolicy = Depends(get_origin_policy),
) -> Response:
    """Answer CORS preflight checks for the search endpoint."""
    origin = request.headers.get("origin")
    if not policy.is_allowed(origin):
        return _forbidden(origin)
    return Response(status_code=status.HTTP_200_OK, headers=policy.cors_headers(origin))
