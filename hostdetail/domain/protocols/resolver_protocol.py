"""Resolver protocols (ports) for IP enrichment.

Two independent, slow and unreliable backends enrich a client IP: the
system reverse-DNS facility and a remote geolocation API. Both report
failure as ResolverError inside a Result.

Reference:
    - hostdetail/application/services/enrichment_orchestrator.py
"""

from typing import Protocol

from hostdetail.core.result import Result
from hostdetail.domain.errors import ResolverError
from hostdetail.domain.value_objects import GeoRecord


class ReverseDnsResolverProtocol(Protocol):
    """Reverse-DNS resolver port.

    Behavior:
        - Returns the first hostname the system resolver reports
        - Sets no deadline of its own (the caller owns cancellation)
    """

    async def resolve(self, ip: str) -> Result[str, ResolverError]:
        """Map an IP address back to a hostname.

        Args:
            ip: IPv4 or IPv6 literal.

        Returns:
            Success(hostname) or Failure(ResolverError).
        """
        ...


class GeolocationResolverProtocol(Protocol):
    """Geolocation resolver port.

    Behavior:
        - One remote call per lookup, bounded by a hard deadline
        - Distinguishes timeouts, transport errors and backend-reported
          failures
    """

    async def resolve(self, ip: str) -> Result[GeoRecord, ResolverError]:
        """Resolve an IP address to a geolocation record.

        Args:
            ip: IPv4 or IPv6 literal.

        Returns:
            Success(GeoRecord) or Failure(ResolverError).
        """
        ...
