"""Redis adapter implementing CacheProtocol.

Wraps an async Redis client and maps every Redis failure to CacheError
inside a Result, so callers never see an exception from the cache.

Architecture:
- Implements CacheProtocol without inheritance (structural typing)
- Returns Result types for all operations
- Fail-open: the cache may be absent for the whole process lifetime
- Readiness flag: after a connection-level failure the adapter stops
  talking to Redis for a cool-down period, so an unreachable store costs
  nothing on the response path
"""

import json
import time
from collections.abc import Callable
from typing import Any

from redis.asyncio import Redis
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import RedisError
from redis.exceptions import TimeoutError as RedisTimeoutError

from hostdetail.core.enums import ErrorCode
from hostdetail.core.result import Failure, Result, Success
from hostdetail.infrastructure.enums import InfrastructureErrorCode
from hostdetail.infrastructure.errors import CacheError


class RedisAdapter:
    """Redis implementation of CacheProtocol.

    Note: Does NOT inherit from CacheProtocol (uses structural typing).

    Attributes:
        _redis: Async Redis client, or None when no cache is configured.
        _retry_cooldown: Seconds to bypass Redis after a connection failure.
        _clock: Monotonic clock (injectable for tests).
        _unavailable_until: Clock value before which Redis is bypassed.
    """

    def __init__(
        self,
        redis_client: Redis | None,
        *,
        retry_cooldown: float = 5.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize Redis adapter.

        Args:
            redis_client: Async Redis client, or None to run without a cache.
            retry_cooldown: Seconds to bypass Redis after a connection failure.
            clock: Monotonic clock used for the cool-down.
        """
        self._redis = redis_client
        self._retry_cooldown = retry_cooldown
        self._clock = clock
        self._unavailable_until: float | None = None

    @property
    def is_ready(self) -> bool:
        """Whether Redis is configured and not inside a failure cool-down."""
        if self._redis is None:
            return False
        if self._unavailable_until is None:
            return True
        return self._clock() >= self._unavailable_until

    async def get(self, key: str) -> Result[str | None, CacheError]:
        """Get value from Redis.

        Args:
            key: Cache key.

        Returns:
            Result with value if found, None if not found, or CacheError.
        """
        unavailable = self._check_ready(key)
        if unavailable is not None:
            return unavailable

        try:
            value = await self._redis.get(key)  # type: ignore[union-attr]
            self._mark_available()
            if value is None:
                return Success(value=None)
            decoded = value.decode("utf-8") if isinstance(value, bytes) else value
            return Success(value=decoded)
        except (RedisConnectionError, RedisTimeoutError, OSError) as e:
            return self._connection_failure(
                key, e, InfrastructureErrorCode.CACHE_GET_ERROR
            )
        except RedisError as e:
            return Failure(
                error=CacheError(
                    code=ErrorCode.CACHE_UNAVAILABLE,
                    infrastructure_code=InfrastructureErrorCode.CACHE_GET_ERROR,
                    message=f"Failed to get key '{key}' from cache",
                    details={"key": key, "error": str(e)},
                )
            )
        except UnicodeDecodeError as e:
            return Failure(
                error=CacheError(
                    code=ErrorCode.CACHE_UNAVAILABLE,
                    infrastructure_code=InfrastructureErrorCode.CACHE_DECODE_ERROR,
                    message=f"Cached value for key '{key}' is not valid UTF-8",
                    details={"key": key, "error": str(e)},
                )
            )

    async def get_json(self, key: str) -> Result[dict[str, Any] | None, CacheError]:
        """Get JSON object from Redis.

        Args:
            key: Cache key.

        Returns:
            Result with parsed dict if found, None if not found, or CacheError
            when the stored value is not a JSON object.
        """
        result = await self.get(key)

        match result:
            case Success(value=None):
                return Success(value=None)
            case Success(value=str() as raw):
                try:
                    parsed = json.loads(raw)
                except json.JSONDecodeError as e:
                    return self._decode_failure(key, str(e))
                if not isinstance(parsed, dict):
                    return self._decode_failure(
                        key, f"expected object, got {type(parsed).__name__}"
                    )
                return Success(value=parsed)
            case Failure(error=err):
                return Failure(error=err)
            case _:
                # Unreachable but needed for type checker
                return Success(value=None)

    async def set(
        self,
        key: str,
        value: str,
        ttl: int | None = None,
    ) -> Result[None, CacheError]:
        """Set value in Redis (SETEX when a TTL is given).

        Args:
            key: Cache key.
            value: Value to cache.
            ttl: Time to live in seconds (None = no expiration).

        Returns:
            Result with None on success, or CacheError.
        """
        unavailable = self._check_ready(key)
        if unavailable is not None:
            return unavailable

        try:
            if ttl is not None:
                await self._redis.setex(key, ttl, value)  # type: ignore[union-attr]
            else:
                await self._redis.set(key, value)  # type: ignore[union-attr]
            self._mark_available()
            return Success(value=None)
        except (RedisConnectionError, RedisTimeoutError, OSError) as e:
            return self._connection_failure(
                key, e, InfrastructureErrorCode.CACHE_SET_ERROR
            )
        except RedisError as e:
            return Failure(
                error=CacheError(
                    code=ErrorCode.CACHE_UNAVAILABLE,
                    infrastructure_code=InfrastructureErrorCode.CACHE_SET_ERROR,
                    message=f"Failed to set key '{key}' in cache",
                    details={"key": key, "ttl": ttl, "error": str(e)},
                )
            )

    async def set_json(
        self,
        key: str,
        value: dict[str, Any],
        ttl: int | None = None,
    ) -> Result[None, CacheError]:
        """Set JSON object in Redis.

        Args:
            key: Cache key.
            value: Dict to cache (will be JSON serialized).
            ttl: Time to live in seconds (None = no expiration).

        Returns:
            Result with None on success, or CacheError.
        """
        try:
            serialized = json.dumps(value)
        except (TypeError, ValueError) as e:
            return Failure(
                error=CacheError(
                    code=ErrorCode.CACHE_UNAVAILABLE,
                    infrastructure_code=InfrastructureErrorCode.CACHE_SET_ERROR,
                    message=f"Failed to serialize value for key '{key}'",
                    details={"key": key, "error": str(e)},
                )
            )
        return await self.set(key, serialized, ttl)

    async def ping(self) -> Result[bool, CacheError]:
        """Check Redis connectivity and refresh the readiness flag.

        Unlike get/set, ping always contacts Redis (when configured), so it
        can end a cool-down early.

        Returns:
            Result with True if Redis is reachable, or CacheError.
        """
        if self._redis is None:
            return Failure(error=self._not_configured_error())

        try:
            await self._redis.ping()  # type: ignore[misc]
            self._mark_available()
            return Success(value=True)
        except (RedisError, OSError) as e:
            self._mark_unavailable()
            return Failure(
                error=CacheError(
                    code=ErrorCode.CACHE_UNAVAILABLE,
                    infrastructure_code=InfrastructureErrorCode.CACHE_CONNECTION_ERROR,
                    message="Redis health check failed",
                    details={"error": str(e), "type": type(e).__name__},
                )
            )

    async def close(self) -> None:
        """Release the Redis connection pool."""
        if self._redis is not None:
            await self._redis.aclose()

    def _check_ready(self, key: str) -> Failure[CacheError] | None:
        """Short-circuit when Redis is absent or cooling down.

        Args:
            key: Cache key of the attempted operation.

        Returns:
            Failure when the call must not reach Redis, None otherwise.
        """
        if self._redis is None:
            return Failure(error=self._not_configured_error())
        if not self.is_ready:
            return Failure(
                error=CacheError(
                    code=ErrorCode.CACHE_UNAVAILABLE,
                    infrastructure_code=InfrastructureErrorCode.CACHE_NOT_READY,
                    message="Cache is not ready",
                    details={"key": key},
                )
            )
        return None

    def _connection_failure(
        self,
        key: str,
        error: Exception,
        infrastructure_code: InfrastructureErrorCode,
    ) -> Failure[CacheError]:
        self._mark_unavailable()
        return Failure(
            error=CacheError(
                code=ErrorCode.CACHE_UNAVAILABLE,
                infrastructure_code=infrastructure_code,
                message=f"Cache connection failed for key '{key}'",
                details={"key": key, "error": str(error), "type": type(error).__name__},
            )
        )

    def _decode_failure(self, key: str, reason: str) -> Failure[CacheError]:
        return Failure(
            error=CacheError(
                code=ErrorCode.CACHE_UNAVAILABLE,
                infrastructure_code=InfrastructureErrorCode.CACHE_DECODE_ERROR,
                message=f"Failed to parse JSON for key '{key}'",
                details={"key": key, "error": reason},
            )
        )

    def _not_configured_error(self) -> CacheError:
        return CacheError(
            code=ErrorCode.CACHE_UNAVAILABLE,
            infrastructure_code=InfrastructureErrorCode.CACHE_NOT_CONFIGURED,
            message="Cache is not configured",
        )

    def _mark_available(self) -> None:
        self._unavailable_until = None

    def _mark_unavailable(self) -> None:
        self._unavailable_until = self._clock() + self._retry_cooldown
