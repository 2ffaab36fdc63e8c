"""Access-log middleware with per-request trace IDs.

- Adds X-Trace-Id response header (reuses an incoming one)
- Exposes get_trace_id() for logging calls inside request handlers
- Logs one access line per request:
    2xx -> info, 3xx -> not logged, 4xx -> warning, 5xx -> error
  The load-balancer probe is logged as "health check" instead of
  "<METHOD> <url>".
"""

from __future__ import annotations

import time
from contextvars import ContextVar
from typing import Awaitable, Callable
from uuid import uuid4

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from hostdetail.core.constants import ALB_HEALTH_CHECK_PATH
from hostdetail.core.container import get_logger

trace_id_context: ContextVar[str | None] = ContextVar("trace_id", default=None)


def get_trace_id() -> str | None:
    """Return the current trace ID.

    Returns None when called outside of request context.

    Returns:
        str | None: The current request trace ID, or None if no active request.
    """
    return trace_id_context.get()


def _request_url(request: Request) -> str:
    query = request.url.query
    return f"{request.url.path}?{query}" if query else request.url.path


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Starlette middleware that traces and access-logs each request."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        """Run the request, then log it at a level derived from its status.

        Args:
            request (Request): Incoming request.
            call_next (Callable[[Request], Awaitable[Response]]): Next handler.

        Returns:
            Response: Response with X-Trace-Id header added.
        """
        trace_id = request.headers.get("X-Trace-Id") or str(uuid4())
        trace_id_context.set(trace_id)
        logger = get_logger()
        url = _request_url(request)
        context = {
            "trace_id": trace_id,
            "method": request.method,
            "url": url,
            "client_ip": request.client.host if request.client else None,
            "user_agent": request.headers.get("user-agent"),
        }
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                f"{request.method} {url} - {e}",
                error=e,
                status_code=500,
                response_time_ms=round((time.perf_counter() - started) * 1000, 2),
                **context,
            )
            raise
        finally:
            # Clear context after request to prevent leakage
            trace_id_context.set(None)

        response.headers["X-Trace-Id"] = trace_id
        response_time_ms = round((time.perf_counter() - started) * 1000, 2)
        status_code = response.status_code

        if request.url.path == ALB_HEALTH_CHECK_PATH:
            message = "health check"
        else:
            message = f"{request.method} {url}"

        if status_code >= 500:
            logger.error(
                message,
                status_code=status_code,
                response_time_ms=response_time_ms,
                **context,
            )
        elif status_code >= 400:
            logger.warning(
                message,
                status_code=status_code,
                response_time_ms=response_time_ms,
                **context,
            )
        elif status_code < 300:
            logger.info(
                message,
                status_code=status_code,
                response_time_ms=response_time_ms,
                **context,
            )

        return response
