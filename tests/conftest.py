"""Shared pytest fixtures and test doubles.

Provides:
1. mock_logger: Mock implementing LoggerProtocol
2. InMemoryCache: CacheProtocol double with call recording and failure modes
3. StubResolver: resolver double with call counting, canned results, delays
4. ManualClock: deterministic monotonic clock
5. fake_redis / cache_adapter: RedisAdapter over an in-memory fakeredis server
"""

import asyncio
import inspect
import json
from typing import Any
from unittest.mock import Mock

import pytest
import pytest_asyncio
from fakeredis import FakeAsyncRedis

from hostdetail.core.enums import ErrorCode
from hostdetail.core.result import Failure, Result, Success
from hostdetail.domain.value_objects import GeoRecord
from hostdetail.infrastructure.cache.redis_adapter import RedisAdapter
from hostdetail.infrastructure.enums import InfrastructureErrorCode
from hostdetail.infrastructure.errors import CacheError


# =============================================================================
# Test doubles
# =============================================================================


class ManualClock:
    """Monotonic clock advanced explicitly by tests."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class InMemoryCache:
    """Dict-backed CacheProtocol implementation for unit tests.

    Args:
        ready: When False, every get/set fails with CACHE_NOT_READY.
        fail_writes: When True, set/set_json fail with CACHE_SET_ERROR.
    """

    def __init__(self, *, ready: bool = True, fail_writes: bool = False) -> None:
        self.data: dict[str, str] = {}
        self.ttls: dict[str, int | None] = {}
        self.ready = ready
        self.fail_writes = fail_writes
        self.get_calls: list[str] = []
        self.set_calls: list[str] = []
        self.closed = False

    @property
    def is_ready(self) -> bool:
        return self.ready

    def _not_ready(self, key: str) -> Failure[CacheError]:
        return Failure(
            error=CacheError(
                code=ErrorCode.CACHE_UNAVAILABLE,
                infrastructure_code=InfrastructureErrorCode.CACHE_NOT_READY,
                message="Cache is not ready",
                details={"key": key},
            )
        )

    async def get(self, key: str) -> Result[str | None, CacheError]:
        self.get_calls.append(key)
        if not self.ready:
            return self._not_ready(key)
        return Success(value=self.data.get(key))

    async def get_json(self, key: str) -> Result[dict[str, Any] | None, CacheError]:
        result = await self.get(key)
        if isinstance(result, Failure) or result.value is None:
            return result
        try:
            parsed = json.loads(result.value)
        except json.JSONDecodeError as e:
            return Failure(
                error=CacheError(
                    code=ErrorCode.CACHE_UNAVAILABLE,
                    infrastructure_code=InfrastructureErrorCode.CACHE_DECODE_ERROR,
                    message=f"Failed to parse JSON for key '{key}'",
                    details={"key": key, "error": str(e)},
                )
            )
        return Success(value=parsed)

    async def set(
        self, key: str, value: str, ttl: int | None = None
    ) -> Result[None, CacheError]:
        self.set_calls.append(key)
        if not self.ready:
            return self._not_ready(key)
        if self.fail_writes:
            return Failure(
                error=CacheError(
                    code=ErrorCode.CACHE_UNAVAILABLE,
                    infrastructure_code=InfrastructureErrorCode.CACHE_SET_ERROR,
                    message=f"Failed to set key '{key}' in cache",
                    details={"key": key},
                )
            )
        self.data[key] = value
        self.ttls[key] = ttl
        return Success(value=None)

    async def set_json(
        self, key: str, value: dict[str, Any], ttl: int | None = None
    ) -> Result[None, CacheError]:
        return await self.set(key, json.dumps(value), ttl)

    async def ping(self) -> Result[bool, CacheError]:
        if not self.ready:
            return self._not_ready("ping")
        return Success(value=True)

    async def close(self) -> None:
        self.closed = True


class StubResolver:
    """Resolver double returning a canned Result.

    Args:
        result: Result returned by resolve().
        delay: Seconds to sleep before answering.
        exc: Exception raised instead of answering.
    """

    def __init__(
        self,
        result: Result[Any, Any] | None = None,
        *,
        delay: float = 0.0,
        exc: Exception | None = None,
    ) -> None:
        self.result = result
        self.delay = delay
        self.exc = exc
        self.calls: list[str] = []

    async def resolve(self, ip: str) -> Result[Any, Any]:
        self.calls.append(ip)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.exc is not None:
            raise self.exc
        assert self.result is not None
        return self.result


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def mock_logger():
    """Mock logger implementing LoggerProtocol."""
    logger = Mock()
    logger.debug = Mock()
    logger.info = Mock()
    logger.warning = Mock()
    logger.error = Mock()
    logger.critical = Mock()
    logger.bind = Mock(return_value=logger)
    return logger


@pytest.fixture
def manual_clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def memory_cache() -> InMemoryCache:
    return InMemoryCache()


@pytest.fixture
def sample_geo() -> GeoRecord:
    return GeoRecord(
        country="United States",
        country_code="US",
        region="California",
        city="Mountain View",
        timezone="America/Los_Angeles",
        isp="Google LLC",
        lat=37.4056,
        lon=-122.0775,
    )


@pytest_asyncio.fixture
async def fake_redis():
    """Fresh in-memory Redis per test."""
    client = FakeAsyncRedis()
    yield client
    await client.flushall()
    await client.aclose()


@pytest_asyncio.fixture
async def cache_adapter(fake_redis, manual_clock):
    """RedisAdapter over fakeredis with a controllable cool-down clock."""
    return RedisAdapter(fake_redis, retry_cooldown=5.0, clock=manual_clock)


# =============================================================================
# Pytest configuration
# =============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests with mocked dependencies")
    config.addinivalue_line(
        "markers", "integration: Integration tests against in-memory Redis"
    )
    config.addinivalue_line("markers", "api: HTTP tests through TestClient")


def pytest_collection_modifyitems(config, items):
    """Automatically add asyncio marker to async test functions."""
    for item in items:
        function = getattr(item, "function", None)
        if function is not None and inspect.iscoroutinefunction(function):
            item.add_marker(pytest.mark.asyncio)
