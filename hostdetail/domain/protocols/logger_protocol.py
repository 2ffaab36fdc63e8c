"""LoggerProtocol definition for structured logging.

Standardizes structured logging across the service while remaining
backend-agnostic. Every call is a message plus key-value context; the
adapter adds timestamp, level and service metadata.

Log Levels:
    - DEBUG: Cache hits and other per-request detail
    - INFO: Normal operational events (ip_detection, dns_lookup_success)
    - WARNING: Degraded enrichment (lookup failures, cache unavailable)
    - ERROR: Request failed
    - CRITICAL: Service-wide failure

Security:
    - NEVER log authorization or cookie header values

Usage:
    from hostdetail.core.container import get_logger

    logger = get_logger()
    logger.info("ip_detection", client_ip=ip, ip_source=source)

    request_logger = logger.bind(client_ip=ip)
    request_logger.warning("dns_lookup_failure", error=str(error))
"""

from __future__ import annotations

from typing import Any, Protocol


class LoggerProtocol(Protocol):
    """Protocol for structured logging adapters."""

    def debug(self, message: str, /, **context: Any) -> None:
        """Log a debug-level message.

        Args:
            message: Event name or short message (use context for data).
            **context: Structured key-value context fields.
        """
        ...

    def info(self, message: str, /, **context: Any) -> None:
        """Log an info-level message.

        Args:
            message: Event name or short message (use context for data).
            **context: Structured key-value context fields.
        """
        ...

    def warning(self, message: str, /, **context: Any) -> None:
        """Log a warning-level message.

        Args:
            message: Event name or short message (use context for data).
            **context: Structured key-value context fields.
        """
        ...

    def error(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None:
        """Log an error-level message with optional exception details.

        Args:
            message: Event name or short message (use context for data).
            error: Optional exception instance; the adapter adds error_type
                and error_message fields.
            **context: Structured key-value context fields.
        """
        ...

    def critical(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None:
        """Log a critical-level message.

        Args:
            message: Event name or short message (use context for data).
            error: Optional exception instance.
            **context: Structured key-value context fields.
        """
        ...

    def bind(self, **context: Any) -> "LoggerProtocol":
        """Return new logger with permanently bound context.

        Args:
            **context: Context to bind to all future logs.

        Returns:
            New logger instance with bound context.
        """
        ...
