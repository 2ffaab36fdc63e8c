"""Host-detail router.

Endpoints:
    GET /             - Client IP, reverse DNS and geolocation of the caller
    GET /user-agents  - User-agent occurrence counts since process start

The root endpoint answers with JSON for programmatic clients and with an
HTML page for browsers; `?format=json|html` overrides the detection.
"""

import time
from datetime import datetime, timezone
from typing import Literal

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import HTMLResponse, JSONResponse, Response

from hostdetail.application.services import (
    EnrichmentOrchestrator,
    UserAgentTally,
    extract_client_address,
    is_browser,
)
from hostdetail.core.constants import USER_AGENT_LOG_MAX_LENGTH
from hostdetail.core.container import (
    get_enrichment_orchestrator,
    get_logger,
    get_user_agent_tally,
)
from hostdetail.domain.protocols.logger_protocol import LoggerProtocol
from hostdetail.presentation.middleware.request_logging_middleware import (
    get_trace_id,
)
from hostdetail.presentation.renderers import build_payload, render_html

router = APIRouter(tags=["Host Detail"])


@router.get(
    "/",
    response_model=None,
    responses={
        200: {
            "description": "Client details (JSON, or HTML for browsers)",
            "content": {"application/json": {}, "text/html": {}},
        },
    },
)
async def host_detail(
    request: Request,
    output_format: Literal["json", "html"] | None = Query(
        default=None,
        alias="format",
        description="Force the response encoding",
    ),
    orchestrator: EnrichmentOrchestrator = Depends(get_enrichment_orchestrator),
    tally: UserAgentTally = Depends(get_user_agent_tally),
    logger: LoggerProtocol = Depends(get_logger),
) -> Response:
    """Describe the calling client.

    GET / → 200 OK

    Never fails because of an enrichment backend: fields the cache,
    reverse DNS or geolocation could not provide are null.

    Args:
        request: FastAPI request object.
        output_format: "json" or "html" to bypass browser detection.
        orchestrator: Enrichment orchestrator (injected).
        tally: User-agent tally (injected).
        logger: Structured logger (injected).

    Returns:
        JSONResponse or HTMLResponse with the same data.
    """
    started = time.perf_counter()
    trace_id = get_trace_id()
    headers = dict(request.headers)
    peer_address = request.client.host if request.client else None
    user_agent = headers.get("user-agent")

    update = tally.record(user_agent)
    stats = tally.stats()
    logger.info(
        "user_agent_tracking",
        user_agent=(user_agent or "")[:USER_AGENT_LOG_MAX_LENGTH],
        is_new_user_agent=update.is_new,
        total_occurrences=update.count,
        total_unique_user_agents=stats.unique,
        trace_id=trace_id,
    )

    address = extract_client_address(headers, peer_address)
    logger.info(
        "ip_detection",
        client_ip=address.ip,
        ip_source=address.source,
        has_proxy_headers=address.from_proxy_header,
        trace_id=trace_id,
    )

    if not address.is_resolved:
        logger.warning(
            "ip_detection_failure",
            headers=sorted(headers),
            remote_address=peer_address,
            trace_id=trace_id,
        )

    enrichment = await orchestrator.enrich(address.ip)

    payload = build_payload(
        headers=headers,
        address=address,
        enrichment=enrichment,
        now=datetime.now(timezone.utc),
        peer_address=peer_address,
    )

    logger.info(
        "request_performance",
        total_request_time_ms=round((time.perf_counter() - started) * 1000, 2),
        dns_lookup_time_ms=enrichment.timings.dns_ms,
        geo_lookup_time_ms=enrichment.timings.geo_ms,
        dns_outcome=enrichment.dns_outcome.value,
        geo_outcome=enrichment.geo_outcome.value,
        client_ip=address.ip,
        has_reverse_dns=enrichment.reverse_name is not None,
        has_geo=enrichment.geo is not None,
        trace_id=trace_id,
    )

    if output_format is None:
        output_format = "html" if is_browser(user_agent) else "json"

    if output_format == "html":
        return HTMLResponse(content=render_html(payload))
    return JSONResponse(content=payload)


@router.get("/user-agents")
async def user_agents(
    tally: UserAgentTally = Depends(get_user_agent_tally),
    logger: LoggerProtocol = Depends(get_logger),
) -> dict[str, int]:
    """Return how often each user agent called GET /.

    GET /user-agents → 200 OK

    Args:
        tally: User-agent tally (injected).
        logger: Structured logger (injected).

    Returns:
        Mapping of user-agent string to occurrence count.
    """
    snapshot = tally.snapshot()
    logger.info(
        "user_agents_endpoint_accessed",
        unique_user_agents=len(snapshot),
        total_requests=sum(snapshot.values()),
        trace_id=get_trace_id(),
    )
    return snapshot
