"""
Main FastAPI application entry point.

Wires the routers, the access-log middleware and the exception handlers,
and owns the process lifecycle: cache warm-up check and periodic metrics
on startup, metrics task and connection pool teardown on shutdown.

Run with:
    uvicorn hostdetail.main:app --host 0.0.0.0 --port 3000
"""

import os
import platform
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from hostdetail.application.services import MetricsReporter
from hostdetail.core.config import settings
from hostdetail.core.container import (
    get_cache,
    get_logger,
    get_reverse_dns_resolver,
    get_user_agent_tally,
)
from hostdetail.core.result import Success
from hostdetail.presentation.errors import register_exception_handlers
from hostdetail.presentation.middleware import RequestLoggingMiddleware
from hostdetail.presentation.routers import host_detail_router, system_router


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan context manager.

    Handles startup and shutdown events:
    - Startup: probe the cache, log service_startup, start periodic metrics
    - Shutdown: stop periodic metrics, close the cache connection pool,
      release the reverse-DNS lookup pool

    A cache that cannot be reached at startup is not fatal; the service
    runs uncached until Redis answers again.

    Args:
        app: FastAPI application instance.

    Yields:
        None during application lifetime.
    """
    logger = get_logger()
    cache = get_cache()

    ping_result = await cache.ping()
    cache_ready = isinstance(ping_result, Success)

    logger.info(
        "service_startup",
        port=settings.port,
        python_version=platform.python_version(),
        environment=settings.environment.value,
        process_id=os.getpid(),
        cache_enabled=settings.cache_enabled,
        cache_ready=cache_ready,
    )

    reporter: MetricsReporter | None = None
    if settings.metrics_interval_seconds > 0:
        reporter = MetricsReporter(
            tally=get_user_agent_tally(),
            cache=cache,
            logger=logger,
            interval=settings.metrics_interval_seconds,
        )
        reporter.start()

    yield

    if reporter is not None:
        await reporter.stop()
    await cache.close()
    get_reverse_dns_resolver().shutdown()
    logger.info("service_shutdown")


# Initialize FastAPI application with settings and lifespan
app = FastAPI(
    title=settings.app_name,
    description="Client IP, reverse DNS and geolocation lookup service",
    version=settings.app_version,
    docs_url="/docs",
    redoc_url="/redoc",
    debug=settings.debug,
    lifespan=lifespan,
)

# Wire access-log middleware (trace IDs + per-request log line)
app.add_middleware(RequestLoggingMiddleware)

# Register global exception handlers (plain-text 404/500)
register_exception_handlers(app)

app.include_router(system_router)
app.include_router(host_detail_router)
