# src/fetch/base_fetcher.py — v1
"""Abstract network fetcher interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from favicache.sources.models import SourceCandidate


class BaseFetcher(ABC):
    """Fetches the raw body of one source candidate.

    ``fetch`` returns None for every kind of failure (transport error,
    timeout, non-2xx status, oversize body) and never touches cache state.
    """

    @abstractmethod
    async def fetch(self, candidate: SourceCandidate) -> bytes | None:
        """Issue a single GET for candidate and return the body, or None."""

    async def start(self) -> None:
        """Acquire network resources. No-op by default."""

    async def stop(self) -> None:
        """Release network resources. No-op by default."""

    async def __aenter__(self) -> BaseFetcher:
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.stop()
