"""Page sanitizing and PDF detection for search results."""

import re
from typing import Any
from urllib.parse import urlsplit

from assistant_gateway.models.schemas import SearchResult

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def parse_page(page: Any, max_page: int = 1000) -> int:
    """Sanitize a client-supplied page number.

    Takes the leading integer of ``str(page)``, so ``"3"``, ``3.7`` and
    ``"3abc"`` all give 3. Anything unparseable or below 1 becomes 1, and the
    result is capped at ``max_page``.
    """
    match = _LEADING_INT.match(str(page))
    if match is None:
        return 1
    value = int(match.group(1))
    if value < 1:
        return 1
    return min(value, max_page)


def page_offset(page: int, per_page: int = 10) -> int:
    return (page - 1) * per_page


def is_pdf_url(url: str) -> bool:
    """Return whether a URL's path points at a PDF.

    Matches a path ending in ``.pdf`` as well as one with a ``.pdf`` segment
    further up, such as ``/documents/report.pdf/view``. URLs that cannot be
    parsed fall back to a plain substring check.
    """
    try:
        path = urlsplit(url).path.lower()
    except ValueError:
        return ".pdf" in url.lower()

    if path.endswith(".pdf"):
        return True
    return any(segment.endswith(".pdf") for segment in path.split("/"))


def looks_like_pdf(result: dict[str, Any]) -> bool:
    """Return whether an upstream result resembles a PDF document."""
    url = result.get("url") or ""
    if is_pdf_url(url):
        return True

    title = (result.get("title") or "").lower()
    description = (result.get("description") or "").lower()
    return "pdf" in title or "pdf" in description


def to_search_result(result: dict[str, Any]) -> SearchResult:
    return SearchResult(
        title=result.get("title") or "PDF Document",
        url=result.get("url") or "",
        description=result.get("description") or result.get("snippet") or "",
        date=result.get("date"),
        snippet=result.get("snippet"),
    )


def filter_pdf_results(results: list[dict[str, Any]], limit: int = 10) -> list[SearchResult]:
    """Keep PDF-like results only, mapped to `SearchResult`, at most ``limit``."""
    return [to_search_result(r) for r in results if looks_like_pdf(r)][:limit]
