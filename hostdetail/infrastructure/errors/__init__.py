"""Infrastructure errors package.

Usage:
    from hostdetail.infrastructure.errors import CacheError
"""

from hostdetail.infrastructure.errors.infrastructure_error import (
    CacheError,
    InfrastructureError,
)

__all__ = [
    "InfrastructureError",
    "CacheError",
]
