"""Origin validation for cross-origin callers of the search proxy.

Requests without an ``Origin`` header are same-origin and always allowed.
Otherwise an origin is accepted when any of these hold, checked in order:

    1. development mode and the origin is ``http://localhost:<port>``
    2. its host is the trusted domain or one of its listed subdomains
    3. it is listed verbatim in the allow-list
"""

import re
from urllib.parse import urlsplit

from assistant_gateway.search.config import SearchConfig

ALLOW_METHODS = "POST, OPTIONS"
ALLOW_HEADERS = "Content-Type"


class OriginPolicy:
    """Decides which browser origins may call the search proxy."""

    def __init__(
        self,
        allowed_origins: list[str],
        trusted_domain: str | None = None,
        trusted_subdomains: list[str] | None = None,
        development: bool = False,
    ) -> None:
        self.allowed_origins = list(allowed_origins)
        self.trusted_domain = trusted_domain.lower() if trusted_domain else None
        self.trusted_subdomains = [s.lower() for s in trusted_subdomains or []]
        self.development = development

    @classmethod
    def from_config(cls, config: SearchConfig) -> "OriginPolicy":
        return cls(
            allowed_origins=config.allowed_origins,
            trusted_domain=config.trusted_domain,
            trusted_subdomains=config.trusted_subdomains,
            development=config.development,
        )

    def is_allowed(self, origin: str | None) -> bool:
        """Return whether a request carrying ``origin`` may be served."""
        if not origin:
            return True
        if self.development and origin.startswith("http://localhost:"):
            return True
        if self._is_trusted_host(origin):
            return True
        return origin in self.allowed_origins

    def _is_trusted_host(self, origin: str) -> bool:
        if not self.trusted_domain:
            return False
        try:
            hostname = urlsplit(origin).hostname
        except ValueError:
            return False
        if not hostname:
            return False

        if hostname == self.trusted_domain:
            return True
        suffix = f".{self.trusted_domain}"
        if hostname.endswith(suffix):
            return hostname[: -len(suffix)] in self.trusted_subdomains
        return False

    def cors_headers(self, origin: str | None) -> dict[str, str]:
        """CORS headers for an allowed cross-origin request; empty when same-origin."""
        if not origin:
            return {}
        return {
            "Access-Control-Allow-Origin": origin,
            "Access-Control-Allow-Methods": ALLOW_METHODS,
            "Access-Control-Allow-Headers": ALLOW_HEADERS,
            "Vary": "Origin",
        }

    def origin_regex(self) -> str | None:
        """Regex equivalent of the non-list rules, for Starlette's CORSMiddleware."""
        patterns: list[str] = []
        if self.trusted_domain:
            domain = re.escape(self.trusted_domain)
            if self.trusted_subdomains:
                subdomains = "|".join(re.escape(s) for s in self.trusted_subdomains)
                host = rf"(?:(?:{subdomains})\.)?{domain}"
            else:
                host = domain
            patterns.append(rf"[a-z][a-z0-9+.\-]*://{host}(?::\d+)?")
        if self.development:
            patterns.append(r"http://localhost:.*")
        if not patterns:
            return None
        return "(?i)" + "|".join(f"(?:{p})" for p in patterns)
