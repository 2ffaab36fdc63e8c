"""Enrichment orchestrator: cache-aside reverse-DNS and geolocation lookups.

For a resolved client IP, runs two independent enrichment streams
concurrently. Each stream:

1. reads its key (`dns:<ip>` / `geo:<ip>`) from the cache;
2. on a clean hit, uses the cached value and stops;
3. on a miss, an unavailable cache, or a malformed entry, calls its
   resolver under the stream's own deadline;
4. on resolver success, writes the value back with the namespace TTL
   (write failures are logged and ignored);
5. on resolver failure, leaves its field absent.

Neither stream can fail the other or the request: enrich() never raises and
a partial or empty result is a complete, valid answer.
"""

import asyncio
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from hostdetail.core.constants import (
    DEFAULT_CACHE_TTL_SECONDS,
    DNS_TIMEOUT_DEFAULT,
    GEO_TIMEOUT_DEFAULT,
)
from hostdetail.core.enums import ErrorCode
from hostdetail.core.errors import DomainError
from hostdetail.core.result import Failure, Result, Success
from hostdetail.domain.errors import ResolverError, ResolverTimeoutError
from hostdetail.domain.protocols.cache_protocol import CacheProtocol
from hostdetail.domain.protocols.logger_protocol import LoggerProtocol
from hostdetail.domain.protocols.resolver_protocol import (
    GeolocationResolverProtocol,
    ReverseDnsResolverProtocol,
)
from hostdetail.domain.value_objects import (
    ClientAddress,
    EnrichmentOutcome,
    EnrichmentResult,
    EnrichmentTimings,
    GeoRecord,
)
from hostdetail.infrastructure.cache.cache_keys import CacheKeys
from hostdetail.infrastructure.enums import InfrastructureErrorCode

T = TypeVar("T")

# Cache errors that only mean "no cache right now"; logged at debug level.
QUIET_CACHE_CODES = frozenset(
    {
        InfrastructureErrorCode.CACHE_NOT_CONFIGURED,
        InfrastructureErrorCode.CACHE_NOT_READY,
    }
)


@dataclass(frozen=True, slots=True, kw_only=True)
class StreamOutcome(Generic[T]):
    """What one enrichment stream produced.

    Attributes:
        value: Enriched value, or None when absent.
        outcome: How the value was obtained.
        elapsed_ms: Stream duration in milliseconds.
    """

    value: T | None
    outcome: EnrichmentOutcome
    elapsed_ms: float


@dataclass(frozen=True, slots=True, kw_only=True)
class _Stream(Generic[T]):
    """Static description of one cache-aside stream."""

    name: str
    resolver_name: str
    key: str
    ttl: int
    timeout: float
    resolve: Callable[[str], Awaitable[Result[T, ResolverError]]]
    encode: Callable[[T], dict[str, Any]]
    decode: Callable[[dict[str, Any]], T]


def _encode_hostname(hostname: str) -> dict[str, Any]:
    return {"hostname": hostname}


def _decode_hostname(data: dict[str, Any]) -> str:
    hostname = data["hostname"]
    if not isinstance(hostname, str) or not hostname:
        raise ValueError("cached hostname must be a non-empty string")
    return hostname


class EnrichmentOrchestrator:
    """Cache-aside orchestration of reverse-DNS and geolocation enrichment.

    All collaborators are injected; nothing here reads global state.

    Args:
        cache: Key/value store (advisory only).
        dns_resolver: Reverse-DNS resolver.
        geo_resolver: Geolocation resolver.
        logger: Structured logger.
        cache_keys: Key builder for the dns/geo namespaces.
        dns_cache_ttl: TTL of cached reverse names in seconds.
        geo_cache_ttl: TTL of cached geolocation records in seconds.
        dns_timeout: Deadline of one reverse-DNS lookup in seconds.
        geo_timeout: Deadline of one geolocation lookup in seconds.
        clock: Monotonic clock used for timings (injectable for tests).
    """

    def __init__(
        self,
        *,
        cache: CacheProtocol,
        dns_resolver: ReverseDnsResolverProtocol,
        geo_resolver: GeolocationResolverProtocol,
        logger: LoggerProtocol,
        cache_keys: CacheKeys | None = None,
        dns_cache_ttl: int = DEFAULT_CACHE_TTL_SECONDS,
        geo_cache_ttl: int = DEFAULT_CACHE_TTL_SECONDS,
        dns_timeout: float = DNS_TIMEOUT_DEFAULT,
        geo_timeout: float = GEO_TIMEOUT_DEFAULT,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self._cache = cache
        self._dns_resolver = dns_resolver
        self._geo_resolver = geo_resolver
        self._logger = logger
        self._keys = cache_keys or CacheKeys()
        self._dns_cache_ttl = dns_cache_ttl
        self._geo_cache_ttl = geo_cache_ttl
        self._dns_timeout = dns_timeout
        self._geo_timeout = geo_timeout
        self._clock = clock

    async def enrich(self, ip: str | None) -> EnrichmentResult:
        """Enrich a client IP with its reverse name and geolocation.

        Args:
            ip: Client IP literal, or None when extraction failed.

        Returns:
            EnrichmentResult; fields the backends could not provide are None.
        """
        if not ip:
            return EnrichmentResult.empty(ip)

        if not ClientAddress(ip=ip, source=None).is_valid_ip:
            self._logger.warning(
                "enrichment_skipped",
                client_ip=ip[:100],
                reason=ErrorCode.INVALID_IP_ADDRESS.value,
            )
            return EnrichmentResult.empty(ip)

        dns_stream = _Stream(
            name="dns",
            resolver_name="reverse_dns",
            key=self._keys.reverse_dns(ip),
            ttl=self._dns_cache_ttl,
            timeout=self._dns_timeout,
            resolve=self._dns_resolver.resolve,
            encode=_encode_hostname,
            decode=_decode_hostname,
        )
        geo_stream = _Stream(
            name="geo",
            resolver_name="geolocation",
            key=self._keys.geolocation(ip),
            ttl=self._geo_cache_ttl,
            timeout=self._geo_timeout,
            resolve=self._geo_resolver.resolve,
            encode=GeoRecord.to_dict,
            decode=GeoRecord.from_dict,
        )

        # Each stream catches its own failures, so the group never aborts.
        async with asyncio.TaskGroup() as group:
            dns_task = group.create_task(self._run_stream(ip, dns_stream))
            geo_task = group.create_task(self._run_stream(ip, geo_stream))

        dns = dns_task.result()
        geo = geo_task.result()

        return EnrichmentResult(
            ip=ip,
            reverse_name=dns.value,
            geo=geo.value,
            timings=EnrichmentTimings(dns_ms=dns.elapsed_ms, geo_ms=geo.elapsed_ms),
            dns_outcome=dns.outcome,
            geo_outcome=geo.outcome,
        )

    async def _run_stream(self, ip: str, stream: _Stream[T]) -> StreamOutcome[T]:
        """Run one stream, converting any unexpected error into "absent"."""
        started = self._clock()
        try:
            value, outcome = await self._cache_aside(ip, stream)
        except Exception as e:
            # Fail-open: a bug in one stream must not take down the response
            self._logger.error(
                f"{stream.name}_enrichment_error",
                error=e,
                client_ip=ip,
            )
            value, outcome = None, EnrichmentOutcome.FAILED
        elapsed_ms = round((self._clock() - started) * 1000, 2)
        return StreamOutcome(value=value, outcome=outcome, elapsed_ms=elapsed_ms)

    async def _cache_aside(
        self, ip: str, stream: _Stream[T]
    ) -> tuple[T | None, EnrichmentOutcome]:
        cached = await self._read_cache(stream)
        if cached is not None:
            self._logger.debug(
                f"{stream.name}_cache_hit",
                client_ip=ip,
                cache_key=stream.key,
            )
            return cached, EnrichmentOutcome.CACHE_HIT

        lookup_started = self._clock()
        result = await self._resolve_with_deadline(ip, stream)
        lookup_ms = round((self._clock() - lookup_started) * 1000, 2)

        match result:
            case Success(value=value):
                self._logger.info(
                    f"{stream.name}_lookup_success",
                    client_ip=ip,
                    lookup_time_ms=lookup_ms,
                )
                await self._write_cache(stream, value)
                return value, EnrichmentOutcome.RESOLVED
            case Failure(error=error):
                self._logger.warning(
                    f"{stream.name}_lookup_failure",
                    client_ip=ip,
                    lookup_time_ms=lookup_ms,
                    error_code=error.code.value,
                    error=error.message,
                )
        return None, EnrichmentOutcome.FAILED

    async def _read_cache(self, stream: _Stream[T]) -> T | None:
        """Read and decode a cached value; every problem counts as a miss."""
        result = await self._cache.get_json(stream.key)

        match result:
            case Success(value=None):
                return None
            case Success(value=data):
                try:
                    return stream.decode(data)
                except (KeyError, TypeError, ValueError) as e:
                    self._logger.warning(
                        "cache_entry_malformed",
                        cache_key=stream.key,
                        error=str(e),
                    )
                    return None
            case Failure(error=error):
                self._log_cache_error("cache_read_failed", stream.key, error)
        return None

    async def _write_cache(self, stream: _Stream[T], value: T) -> None:
        result = await self._cache.set_json(
            stream.key, stream.encode(value), ttl=stream.ttl
        )
        if isinstance(result, Failure):
            self._log_cache_error("cache_write_failed", stream.key, result.error)

    async def _resolve_with_deadline(
        self, ip: str, stream: _Stream[T]
    ) -> Result[T, ResolverError]:
        """Call the stream's resolver, cancelling it once its deadline passes."""
        try:
            async with asyncio.timeout(stream.timeout):
                return await stream.resolve(ip)
        except TimeoutError:
            return Failure(
                error=ResolverTimeoutError(
                    code=ErrorCode.RESOLVER_TIMEOUT,
                    message=f"{stream.name} lookup exceeded {stream.timeout}s",
                    resolver_name=stream.resolver_name,
                    timeout_seconds=stream.timeout,
                    details={"ip": ip},
                )
            )

    def _log_cache_error(self, message: str, key: str, error: DomainError) -> None:
        infrastructure_code = getattr(error, "infrastructure_code", None)
        context = {
            "cache_key": key,
            "error": error.message,
            "reason": infrastructure_code.value if infrastructure_code else None,
        }
        if infrastructure_code in QUIET_CACHE_CODES:
            self._logger.debug(message, **context)
        else:
            self._logger.warning(message, **context)
