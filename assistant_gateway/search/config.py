"""Search proxy configuration with environment variable loading."""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

load_dotenv()

DEFAULT_ALLOWED_ORIGINS = ["http://localhost:5173", "http://localhost:4173"]


def _split_origins(raw: str | None) -> list[str]:
    if not raw:
        return list(DEFAULT_ALLOWED_ORIGINS)
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


class SearchConfig(BaseModel):
    """Configuration for the PDF search proxy.

    A missing API key is not a configuration error: the proxy answers each
    search with a 500 explaining what to set, so the chat side keeps working.

    Attributes:
        brave_api_key: Subscription token for the Brave Search API.
        endpoint: Brave web search endpoint.
        allowed_origins: Exact origins allowed to call the proxy.
        trusted_domain: Production domain whose host is always allowed.
        trusted_subdomains: Subdomains of ``trusted_domain`` that are allowed.
        development: Allow any ``http://localhost:<port>`` origin.
        timeout: Upstream request timeout in seconds.
        results_per_page: Upstream page size, also the result cap per call.
        max_page: Highest page a caller may request.
    """

    model_config = ConfigDict(validate_default=True)

    brave_api_key: str = Field(
        default_factory=lambda: os.getenv("BRAVE_SEARCH_API_KEY", ""),
        description="Brave Search subscription token",
    )
    endpoint: str = Field(
        default_factory=lambda: os.getenv(
            "BRAVE_SEARCH_ENDPOINT", "https://api.search.brave.com/res/v1/web/search"
        ),
    )
    allowed_origins: list[str] = Field(
        default_factory=lambda: _split_origins(os.getenv("ALLOWED_ORIGINS")),
        description="Origins allowed to call the search proxy",
    )
    trusted_domain: str | None = Field(
        default_factory=lambda: os.getenv("SEARCH_TRUSTED_DOMAIN", "leed.my") or None,
    )
    trusted_subdomains: list[str] = Field(
        default_factory=lambda: ["app", "beta", "staging", "www"],
    )
    development: bool = Field(
        default_factory=lambda: os.getenv("APP_ENV", "production").lower() == "development",
    )
    timeout: float = Field(default=10.0, gt=0.0)
    results_per_page: int = Field(default=10, ge=1, le=20)
    max_page: int = Field(default=1000, ge=1)

    @field_validator("brave_api_key")
    @classmethod
    def strip_api_key(cls, v: str) -> str:
        return v.strip()

    @field_validator("trusted_domain")
    @classmethod
    def normalize_domain(cls, v: str | None) -> str | None:
        return v.strip().lower() if v else None


def get_search_config() -> SearchConfig:
    """Create search configuration from environment."""
    return SearchConfig()
