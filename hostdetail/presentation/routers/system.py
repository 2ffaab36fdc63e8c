"""System router for probe and health endpoints.

These endpoints are intentionally lightweight and side-effect free to
support load-balancer probes and basic diagnostics.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from hostdetail.core.constants import ALB_HEALTH_CHECK_PATH
from hostdetail.core.container import get_cache
from hostdetail.domain.protocols.cache_protocol import CacheProtocol

system_router = APIRouter(tags=["System"])


@system_router.get(ALB_HEALTH_CHECK_PATH, response_class=PlainTextResponse)
async def alb_health_check() -> str:
    """Load-balancer probe.

    Returns:
        str: Always "ok".
    """
    return "ok"


@system_router.get("/health")
async def health(cache: CacheProtocol = Depends(get_cache)) -> dict[str, str]:
    """Health check endpoint for monitoring.

    The service is healthy with or without its cache; the cache state is
    reported for information only and is read without contacting Redis.

    Returns:
        dict[str, str]: Health status and cache readiness.
    """
    return {
        "status": "healthy",
        "cache": "ready" if cache.is_ready else "unavailable",
    }
