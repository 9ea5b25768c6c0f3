# src/sources/chain.py — v1
"""Ordered fallback chain of favicon locations for a host.

Ranked most-reliable-first:
  0. duckduckgo:  host-keyed icon API, fast and redirect-free
  1. favicon_ico: the site's own /favicon.ico
  2. apple_touch: the site's own /apple-touch-icon.png, often higher resolution
  3. google_s2:   icon API that redirects to a CDN and negotiates size

A new source is added by inserting a template into _SOURCE_TEMPLATES at the
position matching its priority; callers only ever see the ordered result.
"""

from __future__ import annotations

from urllib.parse import quote

from favicache.cache.keys import to_ascii_host
from favicache.sources.models import SourceCandidate

_SITE_SCHEMES = ("http", "https")

# (name, template); templates receive host, scheme and size.
_SOURCE_TEMPLATES: tuple[tuple[str, str], ...] = (
    ("duckduckgo", "https://icons.duckduckgo.com/ip3/{host}.ico"),
    ("favicon_ico", "{scheme}://{host}/favicon.ico"),
    ("apple_touch", "{scheme}://{host}/apple-touch-icon.png"),
    ("google_s2", "https://www.google.com/s2/favicons?domain={host}&sz={size}"),
)


def build_sources(host: str, scheme: str = "https", size: int = 128) -> list[SourceCandidate]:
    """Build the ordered list of candidates for host.

    Args:
        host: Host (the cache key). Internationalized hosts are converted
            to their ASCII (punycode) form before URLs are built.
        scheme: Scheme of the original identifier; anything other than http
            or https falls back to https for the site's own paths.
        size: Pixel size requested from size-negotiating APIs.

    Returns:
        Candidates in priority order; empty only when host is empty.

    Raises:
        InvalidIdentifier: If a non-ASCII host cannot be IDNA-encoded.
    """
    host = host.strip()
    if not host:
        return []

    host = to_ascii_host(host)
    scheme = scheme.lower() if scheme and scheme.lower() in _SITE_SCHEMES else "https"
    safe_host = quote(host, safe=".-_:")
    if ":" in safe_host:
        safe_host = f"[{safe_host}]"

    return [
        SourceCandidate(
            name=name,
            location_url=template.format(host=safe_host, scheme=scheme, size=size),
            priority=priority,
        )
        for priority, (name, template) in enumerate(_SOURCE_TEMPLATES)
    ]
