"""Result types for railway-oriented error handling.

Resolvers and the cache adapter report failure as data instead of raising,
so the enrichment pipeline can downgrade any failure to an absent field
without try/except blocks at every call site.

Usage:
    async def resolve(ip: str) -> Result[str, ResolverError]:
        if not names:
            return Failure(error=ResolverTransportError(...))
        return Success(value=names[0])

    match await resolver.resolve("8.8.8.8"):
        case Success(value=hostname):
            print(hostname)
        case Failure(error=error):
            print(error.message)
"""

from dataclasses import dataclass
from typing import Generic, TypeAlias, TypeVar

T = TypeVar("T")  # Success type
E = TypeVar("E")  # Error type


@dataclass(frozen=True, slots=True, kw_only=True)
class Success(Generic[T]):
    """Outcome of an operation that produced a value.

    Attributes:
        value: The produced value (may itself be None, e.g. a cache miss).
    """

    value: T


@dataclass(frozen=True, slots=True, kw_only=True)
class Failure(Generic[E]):
    """Outcome of an operation that failed.

    Attributes:
        error: Error describing the failure.
    """

    error: E


Result: TypeAlias = Success[T] | Failure[E]
