"""Core errors package.

Usage:
    from hostdetail.core.errors import DomainError
"""

from hostdetail.core.errors.domain_error import DomainError

__all__ = ["DomainError"]
