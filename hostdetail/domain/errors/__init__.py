"""Domain errors package.

Usage:
    from hostdetail.domain.errors import ResolverError, ResolverTimeoutError
"""

from hostdetail.domain.errors.resolver_error import (
    ResolverApplicationFailure,
    ResolverError,
    ResolverTimeoutError,
    ResolverTransportError,
)

__all__ = [
    "ResolverError",
    "ResolverTimeoutError",
    "ResolverTransportError",
    "ResolverApplicationFailure",
]
