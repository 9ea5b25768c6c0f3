# src/fetch/http_fetcher.py — v1
"""aiohttp-based fetcher with bounded timeouts and body size.

One ClientSession is shared by every fetch while the fetcher is started, so
fetches for different keys run in parallel over a common connection pool.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

import aiohttp

from favicache.config.settings import Settings
from favicache.fetch.base_fetcher import BaseFetcher
from favicache.sources.models import SourceCandidate

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 64 * 1024


class HttpFetcher(BaseFetcher):
    """GET one candidate location and return its body on 2xx."""

    def __init__(
        self,
        connect_timeout_s: float = 10.0,
        total_timeout_s: float = 15.0,
        max_bytes: int = 1024 * 1024,
        user_agent: str = "favicache",
    ) -> None:
        self._timeout = aiohttp.ClientTimeout(
            total=total_timeout_s, sock_connect=connect_timeout_s
        )
        self._max_bytes = max_bytes
        self._headers = {"User-Agent": user_agent, "Accept": "image/*,*/*;q=0.8"}
        self._session: Optional[aiohttp.ClientSession] = None
        self._start_lock = asyncio.Lock()

    @classmethod
    def from_settings(cls, settings: Settings) -> HttpFetcher:
        return cls(
            connect_timeout_s=settings.fetch_connect_timeout_s,
            total_timeout_s=settings.fetch_total_timeout_s,
            max_bytes=settings.fetch_max_bytes,
            user_agent=settings.fetch_user_agent,
        )

    async def start(self) -> None:
        """Open the shared HTTP session."""
        async with self._start_lock:
            if self._session is not None and not self._session.closed:
                return
            self._session = aiohttp.ClientSession(
                timeout=self._timeout, headers=self._headers
            )

    async def stop(self) -> None:
        """Close the shared HTTP session."""
        if self._session is not None:
            await self._session.close()
            self._session = None

    async def fetch(self, candidate: SourceCandidate) -> bytes | None:
        if self._session is None or self._session.closed:
            await self.start()
        assert self._session is not None

        url = candidate.location_url
        try:
            async with self._session.get(url, allow_redirects=True) as response:
                if not 200 <= response.status < 300:
                    logger.debug("Source %s returned status %d", url, response.status)
                    return None

                if response.content_length is not None and response.content_length > self._max_bytes:
                    logger.debug(
                        "Source %s declared %d bytes (limit %d)",
                        url, response.content_length, self._max_bytes,
                    )
                    return None

                body = bytearray()
                async for chunk in response.content.iter_chunked(_CHUNK_SIZE):
                    body.extend(chunk)
                    if len(body) > self._max_bytes:
                        logger.debug("Source %s exceeded %d bytes", url, self._max_bytes)
                        return None
        except asyncio.TimeoutError:
            logger.debug("Source %s timed out", url)
            return None
        except aiohttp.ClientError as e:
            logger.debug("Source %s failed: %s", url, e)
            return None

        if not body:
            logger.debug("Source %s returned an empty body", url)
            return None
        return bytes(body)
