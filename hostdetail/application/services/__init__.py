"""Application services: the IP resolution and enrichment pipeline.

Usage:
    from hostdetail.application.services import (
        EnrichmentOrchestrator,
        UserAgentTally,
        extract_client_address,
        is_browser,
    )
"""

from hostdetail.application.services.browser_classifier import is_browser
from hostdetail.application.services.enrichment_orchestrator import (
    EnrichmentOrchestrator,
)
from hostdetail.application.services.ip_extractor import extract_client_address
from hostdetail.application.services.metrics_reporter import MetricsReporter
from hostdetail.application.services.user_agent_tally import (
    TallyStats,
    TallyUpdate,
    UserAgentTally,
)

__all__ = [
    "EnrichmentOrchestrator",
    "MetricsReporter",
    "TallyStats",
    "TallyUpdate",
    "UserAgentTally",
    "extract_client_address",
    "is_browser",
]
