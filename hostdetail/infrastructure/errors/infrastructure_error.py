"""Infrastructure layer error types.

Infrastructure errors represent failures of external systems (the cache).
Adapters catch library exceptions and return these inside Failure.
"""

from dataclasses import dataclass

from hostdetail.core.errors import DomainError
from hostdetail.infrastructure.enums import InfrastructureErrorCode


@dataclass(frozen=True, slots=True, kw_only=True)
class InfrastructureError(DomainError):
    """Base infrastructure error.

    Attributes:
        code: Domain ErrorCode.
        message: Human-readable message.
        infrastructure_code: Original infrastructure error code.
        details: Additional context.
    """

    infrastructure_code: InfrastructureErrorCode | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class CacheError(InfrastructureError):
    """Cache-specific errors.

    Wraps Redis exceptions, unavailability and undecodable cached data.
    """

    pass
