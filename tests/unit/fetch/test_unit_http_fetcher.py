# tests/unit/fetch/test_unit_http_fetcher.py — v1
"""Tests for fetch/http_fetcher.py — aiohttp responses are mocked."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import aiohttp
import pytest

from favicache.config.settings import Settings
from favicache.fetch.base_fetcher import BaseFetcher
from favicache.fetch.http_fetcher import HttpFetcher
from favicache.sources.models import SourceCandidate

CANDIDATE = SourceCandidate(
    name="favicon_ico", location_url="https://example.com/favicon.ico", priority=1
)


def _response(status: int = 200, chunks: tuple[bytes, ...] = (b"icon",), content_length: int | None = None):
    response = MagicMock()
    response.status = status
    response.content_length = content_length

    async def iter_chunked(_size):
        for chunk in chunks:
            yield chunk

    response.content.iter_chunked = iter_chunked
    return response


def _session(response=None, error: BaseException | None = None):
    session = MagicMock()
    session.closed = False
    if error is not None:
        session.get.side_effect = error
    else:
        session.get.return_value.__aenter__ = AsyncMock(return_value=response)
        session.get.return_value.__aexit__ = AsyncMock(return_value=False)
    return session


class TestHttpFetcher:
    def test_is_base_fetcher(self):
        assert issubclass(HttpFetcher, BaseFetcher)

    def test_from_settings(self):
        s = Settings(_env_file=None, fetch_connect_timeout_s=2.0, fetch_total_timeout_s=3.0, fetch_max_bytes=10)
        fetcher = HttpFetcher.from_settings(s)
        assert fetcher._timeout.sock_connect == 2.0
        assert fetcher._timeout.total == 3.0
        assert fetcher._max_bytes == 10

    @pytest.mark.asyncio
    async def test_success_returns_body(self):
        fetcher = HttpFetcher()
        with patch.object(fetcher, "_session", _session(_response(chunks=(b"ab", b"cd")))) as session:
            assert await fetcher.fetch(CANDIDATE) == b"abcd"
        session.get.assert_called_once_with(CANDIDATE.location_url, allow_redirects=True)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [204, 301, 404, 500])
    async def test_non_success_status(self, status):
        fetcher = HttpFetcher()
        body = (b"",) if status == 204 else (b"x",)
        with patch.object(fetcher, "_session", _session(_response(status=status, chunks=body))):
            assert await fetcher.fetch(CANDIDATE) is None

    @pytest.mark.asyncio
    async def test_timeout_returns_none(self):
        fetcher = HttpFetcher()
        with patch.object(fetcher, "_session", _session(error=asyncio.TimeoutError())):
            assert await fetcher.fetch(CANDIDATE) is None

    @pytest.mark.asyncio
    async def test_client_error_returns_none(self):
        fetcher = HttpFetcher()
        with patch.object(fetcher, "_session", _session(error=aiohttp.ClientConnectionError("refused"))):
            assert await fetcher.fetch(CANDIDATE) is None

    @pytest.mark.asyncio
    async def test_declared_oversize_rejected(self):
        fetcher = HttpFetcher(max_bytes=10)
        with patch.object(fetcher, "_session", _session(_response(content_length=11))):
            assert await fetcher.fetch(CANDIDATE) is None

    @pytest.mark.asyncio
    async def test_streamed_oversize_rejected(self):
        fetcher = HttpFetcher(max_bytes=10)
        with patch.object(fetcher, "_session", _session(_response(chunks=(b"x" * 6, b"y" * 6)))):
            assert await fetcher.fetch(CANDIDATE) is None

    @pytest.mark.asyncio
    async def test_empty_body_returns_none(self):
        fetcher = HttpFetcher()
        with patch.object(fetcher, "_session", _session(_response(chunks=()))):
            assert await fetcher.fetch(CANDIDATE) is None

    @pytest.mark.asyncio
    async def test_start_stop_lifecycle(self):
        fetcher = HttpFetcher()
        async with fetcher:
            session = fetcher._session
            assert session is not None and not session.closed
            await fetcher.start()
            assert fetcher._session is session
        assert fetcher._session is None
        assert session.closed
        await fetcher.stop()
