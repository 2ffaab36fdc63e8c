"""Cache key construction utilities.

Centralizes cache key construction so the two enrichment namespaces never
collide: a reverse name and a geolocation record for the same IP live under
different keys.

Usage:
    keys = CacheKeys(prefix=settings.cache_key_prefix)
    keys.reverse_dns("8.8.8.8")   # "dns:8.8.8.8"
    keys.geolocation("8.8.8.8")   # "geo:8.8.8.8"
"""

from dataclasses import dataclass

from hostdetail.core.constants import DNS_CACHE_NAMESPACE, GEO_CACHE_NAMESPACE


@dataclass(frozen=True)
class CacheKeys:
    """Cache key builder for the enrichment namespaces.

    Attributes:
        prefix: Optional key prefix (empty string = no prefix).

    Example:
        keys = CacheKeys(prefix="hostdetail")
        keys.geolocation("1.2.3.4")  # "hostdetail:geo:1.2.3.4"
    """

    prefix: str = ""

    def reverse_dns(self, ip: str) -> str:
        """Reverse-DNS cache key.

        Pattern: [{prefix}:]dns:{ip}

        Args:
            ip: IP address literal.

        Returns:
            Cache key string.
        """
        return self._build(DNS_CACHE_NAMESPACE, ip)

    def geolocation(self, ip: str) -> str:
        """Geolocation cache key.

        Pattern: [{prefix}:]geo:{ip}

        Args:
            ip: IP address literal.

        Returns:
            Cache key string.
        """
        return self._build(GEO_CACHE_NAMESPACE, ip)

    def _build(self, namespace: str, ip: str) -> str:
        if self.prefix:
            return f"{self.prefix}:{namespace}:{ip}"
        return f"{namespace}:{ip}"
