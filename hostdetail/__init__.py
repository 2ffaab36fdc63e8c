"""hostdetail: client IP resolution and enrichment service."""

__version__ = "1.0.0"
