"""Infrastructure enums package."""

from hostdetail.infrastructure.enums.infrastructure_error_code import (
    InfrastructureErrorCode,
)

__all__ = ["InfrastructureErrorCode"]
