"""Enrichment resolver adapters.

Resolvers:
    - SystemReverseDnsResolver: system reverse-DNS lookup
    - IpApiGeolocationResolver: ip-api.com compatible JSON endpoint
"""

from hostdetail.infrastructure.resolvers.geolocation_resolver import (
    IpApiGeolocationResolver,
)
from hostdetail.infrastructure.resolvers.reverse_dns_resolver import (
    SystemReverseDnsResolver,
)

__all__ = [
    "IpApiGeolocationResolver",
    "SystemReverseDnsResolver",
]
