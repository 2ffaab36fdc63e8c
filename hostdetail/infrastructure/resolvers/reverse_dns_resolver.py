"""Reverse-DNS resolver using the system resolver.

Implements ReverseDnsResolverProtocol with socket.gethostbyaddr, offloaded
to a dedicated worker pool so the event loop keeps serving other requests.

Behavior:
    - Ordered names are [primary hostname, *aliases]; the first wins
    - No deadline here: the enrichment orchestrator owns cancellation
    - A cancelled lookup keeps its worker thread until gethostbyaddr
      returns; the pool is private and bounded, so hung lookups can only
      exhaust this pool, never the loop's default executor
"""

import asyncio
import socket
from collections.abc import Callable
from typing import TypeAlias
from concurrent.futures import ThreadPoolExecutor

from hostdetail.core.constants import DNS_LOOKUP_MAX_WORKERS
from hostdetail.core.enums import ErrorCode
from hostdetail.core.result import Failure, Result, Success
from hostdetail.domain.errors import ResolverError, ResolverTransportError

RESOLVER_NAME = "reverse_dns"

HostLookup: TypeAlias = Callable[[str], tuple[str, list[str], list[str]]]


class SystemReverseDnsResolver:
    """Reverse-DNS resolver backed by the operating system resolver.

    Implements ReverseDnsResolverProtocol (structural typing).

    Args:
        lookup: Blocking reverse lookup with the socket.gethostbyaddr
            signature (injectable for tests).
        max_workers: Size of the private lookup thread pool.
    """

    def __init__(
        self,
        lookup: HostLookup = socket.gethostbyaddr,
        max_workers: int = DNS_LOOKUP_MAX_WORKERS,
    ) -> None:
        self._lookup = lookup
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="reverse-dns",
        )

    async def resolve(self, ip: str) -> Result[str, ResolverError]:
        """Map an IP address back to its first hostname.

        Args:
            ip: IPv4 or IPv6 literal.

        Returns:
            Success(hostname), or Failure(ResolverTransportError) when the
            lookup fails or yields no names.
        """
        loop = asyncio.get_running_loop()
        try:
            hostname, aliases, _ = await loop.run_in_executor(
                self._executor, self._lookup, ip
            )
        except (OSError, UnicodeError) as e:
            # socket.herror / socket.gaierror are OSError subclasses
            return Failure(
                error=ResolverTransportError(
                    code=ErrorCode.RESOLVER_TRANSPORT_ERROR,
                    message=f"Reverse DNS lookup failed for {ip}",
                    resolver_name=RESOLVER_NAME,
                    details={"ip": ip, "error": str(e), "type": type(e).__name__},
                )
            )

        names = [name for name in (hostname, *aliases) if name]
        if not names:
            return Failure(
                error=ResolverTransportError(
                    code=ErrorCode.RESOLVER_TRANSPORT_ERROR,
                    message=f"Reverse DNS lookup returned no names for {ip}",
                    resolver_name=RESOLVER_NAME,
                    details={"ip": ip},
                )
            )
        return Success(value=names[0])

    def shutdown(self) -> None:
        """Release the lookup pool.

        Queued lookups are cancelled; running ones are not waited for.
        """
        self._executor.shutdown(wait=False, cancel_futures=True)
