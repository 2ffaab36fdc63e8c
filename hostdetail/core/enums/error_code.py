"""Machine-readable error codes.

Error codes follow the SUBJECT_REASON naming convention and travel inside
DomainError instances carried by Result types.
"""

from enum import Enum


class ErrorCode(Enum):
    """Machine-readable error codes."""

    # Validation
    INVALID_IP_ADDRESS = "invalid_ip_address"

    # Cache
    CACHE_UNAVAILABLE = "cache_unavailable"

    # Resolvers (reverse DNS, geolocation)
    RESOLVER_TIMEOUT = "resolver_timeout"
    RESOLVER_TRANSPORT_ERROR = "resolver_transport_error"
    RESOLVER_APPLICATION_FAILURE = "resolver_application_failure"
