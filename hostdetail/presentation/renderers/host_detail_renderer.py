"""Response rendering for the host-detail endpoint.

Builds the JSON payload (request headers merged with the enrichment
fields) and the equivalent HTML page for browsers. Both encodings carry
the same data; the choice never affects what is computed.
"""

from datetime import datetime, timezone
from html import escape
from typing import Any

from hostdetail.core.constants import UNRESOLVED_IP_MESSAGE
from hostdetail.domain.value_objects import ClientAddress, EnrichmentResult, GeoRecord


def format_timestamp(moment: datetime) -> str:
    """Format a timestamp as ISO 8601 UTC with millisecond precision.

    Args:
        moment: Aware or naive (assumed UTC) datetime.

    Returns:
        String like "2024-05-01T12:00:00.123Z".
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    utc = moment.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"


def build_payload(
    *,
    headers: dict[str, str],
    address: ClientAddress,
    enrichment: EnrichmentResult,
    now: datetime,
    peer_address: str | None = None,
) -> dict[str, Any]:
    """Build the JSON response body.

    Request headers are spread at the top level first, so the enrichment
    keys always win on a name clash. Enrichment fields the backends could
    not provide are null; the shape never changes.

    Args:
        headers: Request headers (lower-cased names).
        address: Extracted client address.
        enrichment: Enrichment result for the address.
        now: Request timestamp.
        peer_address: Socket peer address (debug marker only).

    Returns:
        JSON-serializable dict.
    """
    payload: dict[str, Any] = {
        **headers,
        "currentTs": format_timestamp(now),
        "ip": address.ip,
        "ipSource": address.source,
        "reverseLookup": enrichment.reverse_name,
        "geo": _geo_payload(enrichment.geo),
        "timings": {
            "dnsMs": enrichment.timings.dns_ms,
            "geoMs": enrichment.timings.geo_ms,
        },
    }

    if not address.is_resolved:
        payload["debug"] = {
            "message": UNRESOLVED_IP_MESSAGE,
            "allHeaders": headers,
            "remoteAddress": peer_address,
        }

    return payload


def _geo_payload(geo: GeoRecord | None) -> dict[str, Any] | None:
    if geo is None:
        return None
    return {
        "country": geo.country,
        "countryCode": geo.country_code,
        "region": geo.region,
        "city": geo.city,
        "timezone": geo.timezone,
        "isp": geo.isp,
        "lat": geo.lat,
        "lon": geo.lon,
    }


def _render_rows(data: dict[str, Any]) -> str:
    rows = []
    for key, value in data.items():
        if isinstance(value, dict):
            cell = f"<table>{_render_rows(value)}</table>"
        else:
            cell = escape("" if value is None else str(value))
        rows.append(f"<tr><th>{escape(str(key))}</th><td>{cell}</td></tr>")
    return "".join(rows)


def render_html(payload: dict[str, Any]) -> str:
    """Render the payload as a standalone HTML page.

    Every value is HTML-escaped; header values are client-controlled.

    Args:
        payload: Body produced by build_payload().

    Returns:
        HTML document.
    """
    ip = escape(payload.get("ip") or "unknown")
    reverse_lookup = escape(payload.get("reverseLookup") or "n/a")
    geo = payload.get("geo") or {}
    location = ", ".join(
        escape(str(part))
        for part in (geo.get("city"), geo.get("region"), geo.get("country"))
        if part
    ) or "unknown"

    return f"""
    <!DOCTYPE html>
    <html>
    <head>
        <title>Host Detail</title>
        <style>
            body {{
                font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
                margin: 40px;
                color: #333;
            }}
            .summary {{
                background: #f8f8f8;
                padding: 20px;
                border-radius: 8px;
                margin-bottom: 20px;
            }}
            .ip {{
                font-family: monospace;
                font-size: 24px;
                color: #667eea;
            }}
            table {{
                border-collapse: collapse;
            }}
            th, td {{
                text-align: left;
                vertical-align: top;
                padding: 4px 12px;
                border-bottom: 1px solid #eee;
                font-size: 14px;
            }}
            th {{
                color: #666;
                font-weight: 600;
            }}
        </style>
    </head>
    <body>
        <div class="summary">
            <div class="ip">{ip}</div>
            <p>Reverse DNS: {reverse_lookup}</p>
            <p>Location: {location}</p>
        </div>
        <table>{_render_rows(payload)}</table>
    </body>
    </html>
    """
