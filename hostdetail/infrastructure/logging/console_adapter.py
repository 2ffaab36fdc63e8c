"""Console logging adapter.

Outputs structured logs to stdout using structlog.
- Development: human-readable console renderer with colors
- Everywhere else: line-delimited JSON for Loki/Promtail ingestion

Every record carries service metadata (service, version, environment,
host) and an ISO UTC timestamp. Authorization and cookie header values are
redacted wherever a header mapping is logged.

Implementation intentionally does NOT inherit from LoggerProtocol (PEP 544
structural subtyping).
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Mapping
from typing import Any

import structlog

from hostdetail.core.constants import REDACTED_HEADERS

REDACTED_VALUE = "[Redacted]"

HEADER_FIELDS = ("headers", "all_headers")


def redact_headers(
    _logger: Any, _method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """structlog processor replacing sensitive header values.

    Args:
        _logger: Wrapped logger (unused).
        _method_name: Log method name (unused).
        event_dict: Event being processed.

    Returns:
        Event dict with sensitive header values redacted.
    """
    for field in HEADER_FIELDS:
        headers = event_dict.get(field)
        if isinstance(headers, Mapping):
            event_dict[field] = {
                name: REDACTED_VALUE if name.lower() in REDACTED_HEADERS else value
                for name, value in headers.items()
            }
    return event_dict


class ConsoleAdapter:
    """Console logger.

    Args:
        use_json (bool): JSON output when True, human-readable when False (dev).
        level (str): Minimum level name (DEBUG, INFO, ...).
        service_metadata (Mapping[str, Any] | None): Fields added to every record.
    """

    def __init__(
        self,
        *,
        use_json: bool = True,
        level: str = "INFO",
        service_metadata: Mapping[str, Any] | None = None,
    ) -> None:
        """Initialize the console adapter and configure structlog.

        Args:
            use_json (bool): JSON output when True, human-readable when False (dev).
            level (str): Minimum level name.
            service_metadata (Mapping[str, Any] | None): Fields added to every record.
        """
        processors: list[structlog.types.Processor] = [
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            redact_headers,
        ]

        if use_json:
            processors.append(structlog.processors.JSONRenderer())
        else:
            processors.append(structlog.dev.ConsoleRenderer(colors=True))

        structlog.configure(
            processors=processors,
            wrapper_class=structlog.make_filtering_bound_logger(
                logging.getLevelNamesMapping().get(level.upper(), logging.INFO)
            ),
            context_class=dict,
            logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
            cache_logger_on_first_use=True,
        )

        self._logger = structlog.get_logger().bind(**dict(service_metadata or {}))

    def debug(self, message: str, /, **context: Any) -> None:
        """Log a debug message.

        Args:
            message (str): Message text.
            **context: Structured key-value context.
        """
        self._logger.debug(message, **context)

    def info(self, message: str, /, **context: Any) -> None:
        """Log an info message.

        Args:
            message (str): Message text.
            **context: Structured key-value context.
        """
        self._logger.info(message, **context)

    def warning(self, message: str, /, **context: Any) -> None:
        """Log a warning message.

        Args:
            message (str): Message text.
            **context: Structured key-value context.
        """
        self._logger.warning(message, **context)

    def error(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None:
        """Log an error message with optional exception details.

        Args:
            message (str): Message text.
            error (Exception | None): Optional exception instance.
            **context: Structured key-value context.
        """
        if error is not None:
            context["error_type"] = type(error).__name__
            context["error_message"] = str(error)
        self._logger.error(message, **context)

    def critical(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None:
        """Log a critical message with optional exception details.

        Args:
            message (str): Message text.
            error (Exception | None): Optional exception instance.
            **context: Structured key-value context.
        """
        if error is not None:
            context["error_type"] = type(error).__name__
            context["error_message"] = str(error)
        self._logger.critical(message, **context)

    def bind(self, **context: Any) -> ConsoleAdapter:
        """Return new adapter with bound context.

        Args:
            **context: Context to bind to all subsequent logs.

        Returns:
            ConsoleAdapter: New adapter instance with bound context.
        """
        bound_adapter = ConsoleAdapter.__new__(ConsoleAdapter)
        bound_adapter._logger = self._logger.bind(**context)
        return bound_adapter
