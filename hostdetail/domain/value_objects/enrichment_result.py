"""Enrichment result value objects.

An EnrichmentResult is built once per request by the enrichment
orchestrator and discarded after the response is sent. Every enrichment
field is optional: a fully enriched and a completely unenriched result have
the same shape.
"""

from dataclasses import dataclass, field
from enum import Enum

from hostdetail.domain.value_objects.geo_record import GeoRecord


class EnrichmentOutcome(str, Enum):
    """How one enrichment stream obtained (or failed to obtain) its value."""

    CACHE_HIT = "cache_hit"
    RESOLVED = "resolved"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass(frozen=True, slots=True, kw_only=True)
class EnrichmentTimings:
    """Wall-clock time spent per enrichment stream, in milliseconds.

    Attributes:
        dns_ms: Reverse-DNS stream duration (None when skipped).
        geo_ms: Geolocation stream duration (None when skipped).
    """

    dns_ms: float | None = None
    geo_ms: float | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class EnrichmentResult:
    """Merged output of the reverse-DNS and geolocation streams.

    Attributes:
        ip: IP that was enriched (None when no IP was available).
        reverse_name: Reverse-DNS hostname, if resolved.
        geo: Geolocation record, if resolved.
        timings: Per-stream durations.
        dns_outcome: How the reverse name was obtained.
        geo_outcome: How the geolocation record was obtained.
    """

    ip: str | None
    reverse_name: str | None = None
    geo: GeoRecord | None = None
    timings: EnrichmentTimings = field(default_factory=EnrichmentTimings)
    dns_outcome: EnrichmentOutcome = EnrichmentOutcome.SKIPPED
    geo_outcome: EnrichmentOutcome = EnrichmentOutcome.SKIPPED

    @classmethod
    def empty(cls, ip: str | None) -> "EnrichmentResult":
        """Result for a request whose IP cannot be enriched."""
        return cls(ip=ip)
