"""Cache protocol for the enrichment pipeline.

Defines the cache interface the pipeline needs, without knowing about any
specific store. Infrastructure adapters implement it structurally.

Architecture:
- Protocol-based (structural typing)
- All operations return Result types, never raise
- Fail-open: a Failure from get is a cache miss, a Failure from set is a
  skipped write. The cache is a latency optimisation, never a correctness
  dependency.
"""

from typing import Any, Protocol

from hostdetail.core.errors import DomainError
from hostdetail.core.result import Result


class CacheProtocol(Protocol):
    """Cache protocol - what the pipeline needs from a key/value store."""

    @property
    def is_ready(self) -> bool:
        """Whether the store is currently believed reachable."""
        ...

    async def get(self, key: str) -> Result[str | None, DomainError]:
        """Get value from cache.

        Args:
            key: Cache key.

        Returns:
            Result with value if found, None if not found, or CacheError.

        Example:
            match await cache.get("dns:8.8.8.8"):
                case Success(value=str() as hostname):
                    ...
                case Success(value=None) | Failure():
                    # Miss (or store unavailable) - resolve directly
                    ...
        """
        ...

    async def get_json(self, key: str) -> Result[dict[str, Any] | None, DomainError]:
        """Get JSON object from cache.

        Args:
            key: Cache key.

        Returns:
            Result with parsed dict if found, None if not found, or CacheError
            (including for values that are not valid JSON).
        """
        ...

    async def set(
        self,
        key: str,
        value: str,
        ttl: int | None = None,
    ) -> Result[None, DomainError]:
        """Set value in cache.

        Args:
            key: Cache key.
            value: Value to cache (string).
            ttl: Time to live in seconds (None = no expiration).

        Returns:
            Result with None on success, or CacheError.
        """
        ...

    async def set_json(
        self,
        key: str,
        value: dict[str, Any],
        ttl: int | None = None,
    ) -> Result[None, DomainError]:
        """Set JSON object in cache.

        Args:
            key: Cache key.
            value: Dict to cache (will be JSON serialized).
            ttl: Time to live in seconds (None = no expiration).

        Returns:
            Result with None on success, or CacheError.
        """
        ...

    async def ping(self) -> Result[bool, DomainError]:
        """Check cache connectivity and refresh readiness.

        Returns:
            Result with True if the store is reachable, or CacheError.
        """
        ...

    async def close(self) -> None:
        """Release connections held by the store (called on shutdown)."""
        ...
