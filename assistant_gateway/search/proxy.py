"""Brave Search proxy returning PDF documents only.

Forwards a query to the Brave web search API and keeps only results that
resemble PDF documents. Non-PDF results are dropped, not ranked.
"""

import logging
from typing import Any

import httpx

from assistant_gateway.models.schemas import SearchResponse
from assistant_gateway.search.config import SearchConfig, get_search_config
from assistant_gateway.search.filters import filter_pdf_results, page_offset, parse_page

logger = logging.getLogger(__name__)

UNEXPECTED_ERROR = "An unexpected error occurred while searching. Please try again."


class SearchError(Exception):
    """Raised when a search cannot be answered.

    Attributes:
        message: Error text returned to the caller.
        status_code: HTTP status to answer with.
    """

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class SearchProxy:
    """Client for the Brave web search API with PDF filtering."""

    def __init__(
        self,
        config: SearchConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._config = config or get_search_config()
        self._client = client or httpx.AsyncClient(timeout=self._config.timeout)

    @property
    def config(self) -> SearchConfig:
        return self._config

    async def search(self, query: Any, page: Any = 1) -> SearchResponse:
        """Search for PDF documents.

        Args:
            query: Search text; must be a non-blank string.
            page: Requested page, sanitized to ``1..max_page``.

        Returns:
            SearchResponse with at most one page of PDF-like results.

        Raises:
            SearchError: 400 for a missing query, 500 without an API key,
                the upstream status for rejected requests (401, 429, ...),
                500 for anything unexpected.
        """
        validated_page = parse_page(page, self._config.max_page)
        logger.debug(f"Search called with query={query!r} page={page!r} -> {validated_page}")

        if not isinstance(query, str) or not query.strip():
            raise SearchError("Search query is required", 400)

        if not self._config.brave_api_key:
            logger.error("BRAVE_SEARCH_API_KEY is not set")
            raise SearchError(
                "Brave Search API key not configured. "
                "Please add BRAVE_SEARCH_API_KEY to your environment variables.",
                500,
            )

        data = await self._fetch(query, validated_page)
        web = data.get("web") or {}
        results = web.get("results")

        if not results:
            return SearchResponse(
                results=[],
                total_results=0,
                query=query.strip(),
                page=validated_page,
            )

        pdf_results = filter_pdf_results(results, limit=self._config.results_per_page)
        return SearchResponse(
            results=pdf_results,
            total_results=web.get("total_results") or len(pdf_results),
            query=query.strip(),
            page=validated_page,
        )

    async def _fetch(self, query: str, page: int) -> dict[str, Any]:
        per_page = self._config.results_per_page
        params = {
            "q": query,
            "count": str(per_page),
            "offset": str(page_offset(page, per_page)),
            "safesearch": "moderate",
            "freshness": "all",
            "text_decorations": "false",
            "spellcheck": "true",
        }
        headers = {
            "Accept": "application/json",
            "X-Subscription-Token": self._config.brave_api_key,
        }

        try:
            response = await self._client.get(
                self._config.endpoint,
                params=params,
                headers=headers,
                timeout=self._config.timeout,
            )
        except httpx.HTTPError as e:
            logger.error(f"Search request failed: {e}")
            raise SearchError(UNEXPECTED_ERROR, 500) from e

        if not response.is_success:
            logger.error(f"Brave API error: {response.status_code} {response.reason_phrase}")
            if response.status_code == 401:
                raise SearchError(
                    "Invalid Brave Search API key. Please check your API key configuration.",
                    401,
                )
            if response.status_code == 429:
                raise SearchError("API rate limit exceeded. Please try again later.", 429)
            raise SearchError(
                f"Search service error: {response.status_code} {response.reason_phrase}",
                response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"Search response was not JSON: {e}")
            raise SearchError(UNEXPECTED_ERROR, 500) from e

        if not isinstance(data, dict):
            raise SearchError(UNEXPECTED_ERROR, 500)
        return data

    async def aclose(self) -> None:
        await self._client.aclose()


# Module-level singleton instance
_search_proxy: SearchProxy | None = None


def get_search_proxy() -> SearchProxy:
    """Get or create the global search proxy."""
    global _search_proxy
    if _search_proxy is None:
        _search_proxy = SearchProxy()
    return _search_proxy


async def shutdown_search_proxy() -> None:
    global _search_proxy
    if _search_proxy is not None:
        await _search_proxy.aclose()
        _search_proxy = None
