"""
Tests for src/services/lists/fetcher.py

Covers HttpListFetcher against a mocked aiohttp session.
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import aiohttp
import pytest

from src.core.errors import RemoteFetchError
from src.services.lists.fetcher import FetchResponse, HttpListFetcher

URL = "https://lists.example.com/known-bots.txt"


def _response(status, text):
    resp = MagicMock()
    resp.status = status
    resp.text = AsyncMock(return_value=text)

    ctx = MagicMock()
    ctx.__aenter__ = AsyncMock(return_value=resp)
    ctx.__aexit__ = AsyncMock(return_value=False)
    return ctx


def _fetcher_with_session(get):
    session = MagicMock()
    session.closed = False
    session.get = get
    session.close = AsyncMock()

    fetcher = HttpListFetcher(timeout=5)
    fetcher._session = session
    return fetcher, session


class TestFetch:
    """Tests for HttpListFetcher.fetch."""

    @pytest.mark.asyncio
    async def test_body_returned(self):
        fetcher, session = _fetcher_with_session(MagicMock(return_value=_response(200, "bot1\r\nbot2")))

        response = await fetcher.fetch(URL)

        assert response == FetchResponse(status=200, text="bot1\r\nbot2")
        session.get.assert_called_once_with(URL)

    @pytest.mark.asyncio
    async def test_not_found_is_returned_not_raised(self):
        fetcher, _ = _fetcher_with_session(MagicMock(return_value=_response(404, "Not Found")))

        response = await fetcher.fetch(URL)

        assert response.status == 404
        assert response.text == "Not Found"

    @pytest.mark.asyncio
    async def test_client_error_raises(self):
        get = MagicMock(side_effect=aiohttp.ClientConnectionError("connection refused"))
        fetcher, _ = _fetcher_with_session(get)

        with pytest.raises(RemoteFetchError) as exc_info:
            await fetcher.fetch(URL)

        assert exc_info.value.status is None
        assert exc_info.value.url == URL
        assert isinstance(exc_info.value.__cause__, aiohttp.ClientError)

    @pytest.mark.asyncio
    async def test_timeout_raises(self):
        ctx = _response(200, "")
        ctx.__aenter__ = AsyncMock(side_effect=asyncio.TimeoutError())
        fetcher, _ = _fetcher_with_session(MagicMock(return_value=ctx))

        with pytest.raises(RemoteFetchError, match="timed out") as exc_info:
            await fetcher.fetch(URL)

        assert exc_info.value.status is None

    @pytest.mark.asyncio
    async def test_body_read_failure_raises(self):
        ctx = _response(200, "")
        resp = ctx.__aenter__.return_value
        resp.text = AsyncMock(side_effect=aiohttp.ClientPayloadError("truncated"))
        fetcher, _ = _fetcher_with_session(MagicMock(return_value=ctx))

        with pytest.raises(RemoteFetchError):
            await fetcher.fetch(URL)


class TestLifecycle:
    """Tests for session handling."""

    @pytest.mark.asyncio
    async def test_context_manager_closes_session(self):
        fetcher, session = _fetcher_with_session(MagicMock(return_value=_response(200, "a")))

        async with fetcher as f:
            await f.fetch(URL)

        session.close.assert_awaited_once()
        assert fetcher._session is None

    @pytest.mark.asyncio
    async def test_close_without_session(self):
        fetcher = HttpListFetcher()
        await fetcher.close()
        assert fetcher._session is None
