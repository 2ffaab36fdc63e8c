"""Dependency factories (composition root).

Application-scoped singletons for the enrichment pipeline:
- Logging (structlog console adapter)
- Cache (Redis, optional)
- Reverse-DNS and geolocation resolvers
- Enrichment orchestrator
- User-agent tally

Only this module reads settings and builds concrete adapters; everything
else receives its collaborators as arguments. FastAPI routes resolve them
through Depends(), so tests override them with app.dependency_overrides.

Usage:
    from hostdetail.core.container import get_enrichment_orchestrator

    orchestrator = get_enrichment_orchestrator()
    result = await orchestrator.enrich("8.8.8.8")
"""

from functools import lru_cache
from socket import gethostname
from typing import TYPE_CHECKING

from hostdetail.core.config import settings

if TYPE_CHECKING:
    from hostdetail.application.services import EnrichmentOrchestrator, UserAgentTally
    from hostdetail.domain.protocols.cache_protocol import CacheProtocol
    from hostdetail.domain.protocols.logger_protocol import LoggerProtocol
    from hostdetail.domain.protocols.resolver_protocol import (
        GeolocationResolverProtocol,
    )
    from hostdetail.infrastructure.resolvers import SystemReverseDnsResolver


# ============================================================================
# Logging (Application-Scoped)
# ============================================================================


@lru_cache()
def get_logger() -> "LoggerProtocol":
    """Return the application-scoped logger singleton.

    - development: human-readable colored console
    - everywhere else: JSON lines (Loki/Promtail friendly)

    Returns:
        LoggerProtocol: Logger instance implementing the protocol.
    """
    from hostdetail.infrastructure.logging.console_adapter import ConsoleAdapter

    return ConsoleAdapter(
        use_json=not settings.is_development,
        level=settings.log_level,
        service_metadata={
            "service": settings.app_name,
            "version": settings.app_version,
            "environment": settings.environment.value,
            "host": settings.instance_id or gethostname(),
        },
    )


# ============================================================================
# Cache (Application-Scoped)
# ============================================================================


@lru_cache()
def get_cache() -> "CacheProtocol":
    """Get cache client singleton (app-scoped).

    Returns a RedisAdapter sharing one connection pool across the
    application. Without REDIS_URL the adapter has no client and every
    operation fails fast (the pipeline then runs uncached).

    Returns:
        Cache client implementing CacheProtocol.
    """
    from redis.asyncio import ConnectionPool, Redis

    from hostdetail.infrastructure.cache.redis_adapter import RedisAdapter

    if not settings.cache_enabled:
        return RedisAdapter(
            redis_client=None,
            retry_cooldown=settings.cache_retry_cooldown_seconds,
        )

    pool = ConnectionPool.from_url(
        settings.redis_url,
        max_connections=50,
        decode_responses=False,
        socket_connect_timeout=settings.cache_socket_timeout_seconds,
        socket_timeout=settings.cache_socket_timeout_seconds,
        socket_keepalive=True,
    )
    redis_client = Redis(connection_pool=pool)
    return RedisAdapter(
        redis_client=redis_client,
        retry_cooldown=settings.cache_retry_cooldown_seconds,
    )


# ============================================================================
# Resolvers (Application-Scoped)
# ============================================================================


@lru_cache()
def get_reverse_dns_resolver() -> "SystemReverseDnsResolver":
    """Get the system reverse-DNS resolver singleton.

    Returned as the concrete type: the lifespan releases its lookup pool
    on shutdown.

    Returns:
        Resolver implementing ReverseDnsResolverProtocol.
    """
    from hostdetail.infrastructure.resolvers import SystemReverseDnsResolver

    return SystemReverseDnsResolver()


@lru_cache()
def get_geolocation_resolver() -> "GeolocationResolverProtocol":
    """Get the geolocation resolver singleton.

    Returns:
        Resolver implementing GeolocationResolverProtocol.
    """
    from hostdetail.infrastructure.resolvers import IpApiGeolocationResolver

    return IpApiGeolocationResolver(
        base_url=settings.geo_api_base_url,
        timeout=settings.geo_timeout_seconds,
    )


# ============================================================================
# Pipeline (Application-Scoped)
# ============================================================================


@lru_cache()
def get_enrichment_orchestrator() -> "EnrichmentOrchestrator":
    """Get the enrichment orchestrator singleton.

    Returns:
        EnrichmentOrchestrator wired with the cache, both resolvers and the
        configured TTLs and deadlines.
    """
    from hostdetail.application.services import EnrichmentOrchestrator
    from hostdetail.infrastructure.cache.cache_keys import CacheKeys

    return EnrichmentOrchestrator(
        cache=get_cache(),
        dns_resolver=get_reverse_dns_resolver(),
        geo_resolver=get_geolocation_resolver(),
        logger=get_logger(),
        cache_keys=CacheKeys(prefix=settings.cache_key_prefix),
        dns_cache_ttl=settings.dns_cache_ttl_seconds,
        geo_cache_ttl=settings.geo_cache_ttl_seconds,
        dns_timeout=settings.dns_timeout_seconds,
        geo_timeout=settings.geo_timeout_seconds,
    )


@lru_cache()
def get_user_agent_tally() -> "UserAgentTally":
    """Get the process-wide user-agent tally singleton.

    Returns:
        UserAgentTally bounded by the configured maximum.
    """
    from hostdetail.application.services import UserAgentTally

    return UserAgentTally(max_entries=settings.user_agent_tally_max_entries)
