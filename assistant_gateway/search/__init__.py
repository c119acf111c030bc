"""PDF search proxy in front of the Brave web search API.

Responsibilities:
    - Origin validation against the configured allow-list
    - Page sanitizing and upstream pagination
    - Filtering results down to PDF documents
    - Mapping upstream failures to HTTP statuses
"""

from assistant_gateway.search.config import SearchConfig, get_search_config
from assistant_gateway.search.filters import filter_pdf_results, is_pdf_url, parse_page
from assistant_gateway.search.origins import OriginPolicy
from assistant_gateway.search.proxy import SearchError, SearchProxy, get_search_proxy

__all__ = [
    "OriginPolicy",
    "SearchConfig",
    "SearchError",
    "SearchProxy",
    "filter_pdf_results",
    "get_search_config",
    "get_search_proxy",
    "is_pdf_url",
    "parse_page",
]
