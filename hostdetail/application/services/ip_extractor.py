"""Client IP extraction from proxy headers.

Walks a fixed precedence list of proxy headers and returns the first one
carrying a value, normalized per header. Falls back to the peer socket
address. Pure function: never raises, never does I/O.
"""

from collections.abc import Mapping

from hostdetail.core.constants import CLIENT_IP_HEADERS, PEER_SOURCE
from hostdetail.domain.value_objects import ClientAddress


def _normalize(header: str, value: str) -> str:
    """Apply header-specific normalization to a raw header value."""
    if header == "x-forwarded-for":
        # Full proxy chain: only the originating (left-most) entry counts
        return value.split(",")[0].strip()
    if header == "x-real-ip" and value.startswith("\\"):
        # Some upstream proxies escape the value with one backslash
        return value[1:]
    return value


def extract_client_address(
    headers: Mapping[str, str],
    peer_address: str | None,
) -> ClientAddress:
    """Extract the best-guess client IP and its provenance.

    Args:
        headers: Request headers. Lookup is case-insensitive; Starlette's
            Headers already is, plain dicts are lower-cased here.
        peer_address: Peer socket address, if known.

    Returns:
        ClientAddress with the first present header's normalized value, or
        the peer address tagged "connection". ip is None when neither yields
        a value.
    """
    lowered = {name.lower(): value for name, value in headers.items()}

    for header in CLIENT_IP_HEADERS:
        value = lowered.get(header)
        if not value:
            continue
        ip = _normalize(header, value)
        if ip:
            return ClientAddress(ip=ip, source=header)
        break

    return ClientAddress(ip=peer_address or None, source=PEER_SOURCE)
