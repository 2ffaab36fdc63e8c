"""HTTP middleware."""

from hostdetail.presentation.middleware.request_logging_middleware import (
    RequestLoggingMiddleware,
    get_trace_id,
)

__all__ = ["RequestLoggingMiddleware", "get_trace_id"]
