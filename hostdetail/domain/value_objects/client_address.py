"""Client address value object.

Holds the best-guess client IP of one request together with its provenance
(which proxy header, or the peer socket, supplied it).
"""

import ipaddress
from dataclasses import dataclass

from hostdetail.core.constants import PEER_SOURCE


@dataclass(frozen=True, slots=True, kw_only=True)
class ClientAddress:
    """Client IP plus provenance tag.

    Attributes:
        ip: Extracted IP string, or None when nothing could be resolved.
        source: Header name that supplied the IP, or "connection" for the
            peer socket fallback.
    """

    ip: str | None
    source: str | None

    @property
    def is_resolved(self) -> bool:
        """Whether any IP value was extracted."""
        return bool(self.ip)

    @property
    def is_valid_ip(self) -> bool:
        """Whether the extracted value is an IPv4 or IPv6 literal."""
        if not self.ip:
            return False
        try:
            ipaddress.ip_address(self.ip)
        except ValueError:
            return False
        return True

    @property
    def from_proxy_header(self) -> bool:
        """Whether the IP came from a proxy header rather than the socket."""
        return self.source is not None and self.source != PEER_SOURCE
