"""Core enums package.

Usage:
    from hostdetail.core.enums import ErrorCode, Environment
"""

from hostdetail.core.enums.environment import Environment
from hostdetail.core.enums.error_code import ErrorCode

__all__ = ["ErrorCode", "Environment"]
