"""Domain value objects.

Usage:
    from hostdetail.domain.value_objects import ClientAddress, GeoRecord
"""

from hostdetail.domain.value_objects.client_address import ClientAddress
from hostdetail.domain.value_objects.enrichment_result import (
    EnrichmentOutcome,
    EnrichmentResult,
    EnrichmentTimings,
)
from hostdetail.domain.value_objects.geo_record import GeoRecord

__all__ = [
    "ClientAddress",
    "EnrichmentOutcome",
    "EnrichmentResult",
    "EnrichmentTimings",
    "GeoRecord",
]
