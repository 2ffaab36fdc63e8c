"""Infrastructure-specific error codes.

Internal codes for tracking infrastructure failures. They travel next to
the domain ErrorCode so logs can tell a refused connection from a bad key.
"""

from enum import Enum


class InfrastructureErrorCode(Enum):
    """Infrastructure-specific error codes."""

    # Cache errors
    CACHE_NOT_CONFIGURED = "cache_not_configured"
    CACHE_NOT_READY = "cache_not_ready"
    CACHE_CONNECTION_ERROR = "cache_connection_error"
    CACHE_GET_ERROR = "cache_get_error"
    CACHE_SET_ERROR = "cache_set_error"
    CACHE_DECODE_ERROR = "cache_decode_error"
