"""Resolver error types for the enrichment resolver protocols.

These errors are part of the resolver protocol contract: they are the
failure cases a reverse-DNS or geolocation resolver may return. The
enrichment orchestrator downgrades every one of them to an absent field.

Usage:
    from hostdetail.domain.errors import ResolverTimeoutError
    from hostdetail.core.enums import ErrorCode
    from hostdetail.core.result import Failure

    return Failure(
        error=ResolverTimeoutError(
            code=ErrorCode.RESOLVER_TIMEOUT,
            message="Geolocation lookup exceeded 2.0s",
            resolver_name="geolocation",
            timeout_seconds=2.0,
        )
    )
"""

from dataclasses import dataclass

from hostdetail.core.errors import DomainError


@dataclass(frozen=True, slots=True, kw_only=True)
class ResolverError(DomainError):
    """Base enrichment resolver error.

    Attributes:
        code: Domain ErrorCode.
        message: Human-readable message.
        resolver_name: Resolver that failed ("reverse_dns", "geolocation").
        details: Additional context.
    """

    resolver_name: str


@dataclass(frozen=True, slots=True, kw_only=True)
class ResolverTimeoutError(ResolverError):
    """Lookup exceeded its deadline.

    Reported regardless of what the backend would eventually have answered.

    Attributes:
        timeout_seconds: Deadline that was exceeded.
    """

    timeout_seconds: float


@dataclass(frozen=True, slots=True, kw_only=True)
class ResolverTransportError(ResolverError):
    """Backend could not be reached or answered with an unusable response.

    Covers DNS lookup errors, HTTP connection errors, non-2xx statuses and
    undecodable bodies.

    Attributes:
        status_code: HTTP status code, when the failure was an HTTP status.
    """

    status_code: int | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class ResolverApplicationFailure(ResolverError):
    """Backend answered successfully at transport level but reported failure.

    The geolocation API signals this with `{"status": "fail", "message": ...}`
    (private ranges, reserved ranges, invalid queries).

    Attributes:
        backend_message: Failure reason reported by the backend.
    """

    backend_message: str | None = None
