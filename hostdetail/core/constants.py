"""Centralized constants for internal implementation details.

Environment-specific values live in `hostdetail/core/config.py`; the values
here are fixed by the service contract.

Categories:
- Client IP headers: precedence order used by the IP extractor
- Cache: key namespaces and default TTLs
- Timeouts: default deadlines for the enrichment backends
- Limits: truncation and safety limits
"""

# =============================================================================
# Client IP Extraction
# =============================================================================

CLIENT_IP_HEADERS: tuple[str, ...] = (
    "x-forwarded-for",
    "x-real-ip",
    "x-client-ip",
    "cf-connecting-ip",
    "x-forwarded",
    "forwarded-for",
    "x-cluster-client-ip",
)
"""Proxy headers consulted for the client IP, highest precedence first."""

PEER_SOURCE: str = "connection"
"""Provenance tag used when the IP comes from the peer socket address."""

UNRESOLVED_IP_MESSAGE: str = "Could not determine client IP"
"""Marker returned to callers when no client IP could be extracted."""


# =============================================================================
# HTTP
# =============================================================================

ALB_HEALTH_CHECK_PATH: str = "/alb-health-check"
"""Load-balancer probe path (access-logged as "health check")."""

NOT_FOUND_BODY: str = "404: Page not Found"
"""Plain-text body returned for unknown routes."""

SERVER_ERROR_BODY: str = "500: Internal Server Error"
"""Plain-text body returned for unhandled errors."""


# =============================================================================
# Cache
# =============================================================================

DNS_CACHE_NAMESPACE: str = "dns"
"""Key namespace for cached reverse-DNS names."""

GEO_CACHE_NAMESPACE: str = "geo"
"""Key namespace for cached geolocation records."""

DEFAULT_CACHE_TTL_SECONDS: int = 30 * 24 * 60 * 60
"""Default TTL for both namespaces (30 days)."""


# =============================================================================
# Timeouts
# =============================================================================

GEO_TIMEOUT_DEFAULT: float = 2.0
"""Hard deadline for one geolocation lookup in seconds."""

DNS_TIMEOUT_DEFAULT: float = 2.0
"""Deadline applied to one reverse-DNS lookup in seconds."""


# =============================================================================
# Limits
# =============================================================================

RESPONSE_BODY_MAX_LENGTH: int = 500
"""Maximum backend response body length kept in error details."""

USER_AGENT_LOG_MAX_LENGTH: int = 200
"""Maximum user-agent length written to logs."""

USER_AGENT_TALLY_MAX_ENTRIES: int = 10_000
"""Default number of distinct user agents kept by the tally."""

DNS_LOOKUP_MAX_WORKERS: int = 8
"""Worker threads reserved for blocking reverse-DNS lookups."""

REDACTED_HEADERS: frozenset[str] = frozenset({"authorization", "cookie"})
"""Request headers whose values are never logged."""
