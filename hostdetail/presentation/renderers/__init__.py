"""Response renderers (JSON payload and HTML page)."""

from hostdetail.presentation.renderers.host_detail_renderer import (
    build_payload,
    format_timestamp,
    render_html,
)

__all__ = ["build_payload", "format_timestamp", "render_html"]
