# tests/conftest.py — v1
"""Shared test fixtures for all unit and integration tests.

Provides in-memory image factories, a scripted fake fetcher and services
wired to temporary cache directories. No test touches the network.
"""

from __future__ import annotations

import asyncio
import io
from pathlib import Path

import pytest
from PIL import Image

from favicache.cache.disk_store import DiskImageStore
from favicache.cache.memory_store import MemoryImageStore
from favicache.config.settings import Settings
from favicache.fetch.base_fetcher import BaseFetcher
from favicache.service.favicon_service import FaviconService
from favicache.sources.models import SourceCandidate


def make_image_bytes(
    color: tuple[int, int, int, int] = (200, 100, 50, 255),
    size: tuple[int, int] = (32, 32),
    fmt: str = "PNG",
) -> bytes:
    """Encode a solid-color image."""
    mode = "RGBA" if fmt in ("PNG", "ICO", "GIF", "WEBP") else "RGB"
    image = Image.new("RGBA", size, color).convert(mode)
    buffer = io.BytesIO()
    image.save(buffer, format=fmt)
    return buffer.getvalue()


class FakeFetcher(BaseFetcher):
    """Scripted fetcher keyed by source name.

    Values may be bytes, None (source unavailable) or an exception instance
    to raise. Every call is recorded as (source name, url).
    """

    def __init__(
        self,
        responses: dict[str, bytes | None | Exception] | None = None,
        gate: asyncio.Event | None = None,
    ) -> None:
        self.responses = responses or {}
        self.gate = gate
        self.calls: list[tuple[str, str]] = []
        self.started = 0
        self.stopped = 0

    async def fetch(self, candidate: SourceCandidate) -> bytes | None:
        self.calls.append((candidate.name, candidate.location_url))
        if self.gate is not None:
            await self.gate.wait()
        result = self.responses.get(candidate.name)
        if isinstance(result, Exception):
            raise result
        return result

    async def start(self) -> None:
        self.started += 1

    async def stop(self) -> None:
        self.stopped += 1

    @property
    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]


# === FIXTURES: Images ===


@pytest.fixture
def png_bytes() -> bytes:
    """32x32 opaque PNG of RGB (200, 100, 50)."""
    return make_image_bytes()


# === FIXTURES: Temp dirs & settings ===


@pytest.fixture
def tmp_cache_dir(tmp_path: Path) -> Path:
    """Temporary favicon cache directory (not yet created)."""
    return tmp_path / "cache" / "Favicons"


@pytest.fixture
def test_settings(tmp_cache_dir: Path) -> Settings:
    """Settings isolated from any .env file and the real cache directory."""
    return Settings(_env_file=None, cache_dir=tmp_cache_dir)


# === FIXTURES: Service ===


@pytest.fixture
def fake_fetcher() -> FakeFetcher:
    return FakeFetcher()


@pytest.fixture
def service(fake_fetcher: FakeFetcher, tmp_cache_dir: Path) -> FaviconService:
    """FaviconService over a fake fetcher and temporary disk tier."""
    return FaviconService(
        fetcher=fake_fetcher,
        memory_store=MemoryImageStore(max_entries=100, max_bytes=50 * 1024 * 1024),
        disk_store=DiskImageStore(tmp_cache_dir),
    )
