# src/__init__.py — v1
"""favicache: favicon acquisition and two-tier caching.

Usage:
    from favicache import create_favicon_service
    async with create_favicon_service() as service:
        icon = await service.fetch_icon("https://example.com/page")
"""

from __future__ import annotations

from favicache.service.favicon_service import FaviconService, create_favicon_service
from favicache.version import __version__

__all__ = ["FaviconService", "create_favicon_service", "__version__"]
