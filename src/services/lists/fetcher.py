"""
MassBan - Remote List Fetcher
=============================

Downloads the raw text of a remote user list.

DESIGN:
    The reconciler only needs a status code and a body, so the contract
    is the small ListFetcher protocol. HttpListFetcher is the aiohttp
    implementation; tests pass their own object with the same method.
"""

import asyncio
from dataclasses import dataclass
from typing import Optional, Protocol

import aiohttp

from src.core.constants import HTTP_TIMEOUT
from src.core.errors import RemoteFetchError
from src.core.logger import logger


@dataclass(frozen=True)
class FetchResponse:
    """Status code and decoded body of a list download."""

    status: int
    text: str


class ListFetcher(Protocol):
    async def fetch(self, url: str) -> FetchResponse:
        ...


class HttpListFetcher:
    """
    aiohttp-backed ListFetcher.

    Use as an async context manager so the session is always closed:

        async with HttpListFetcher() as fetcher:
            response = await fetcher.fetch(url)
    """

    def __init__(self, timeout: float = HTTP_TIMEOUT, user_agent: str = "MassBan") -> None:
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._headers = {"User-Agent": user_agent, "Accept": "text/plain"}
        self._session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self) -> "HttpListFetcher":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self._timeout, headers=self._headers)
        return self._session

    async def fetch(self, url: str) -> FetchResponse:
        """
        GET the list at url.

        Non-2xx statuses are returned, not raised; the reconciler decides
        which statuses it accepts.

        Raises:
            RemoteFetchError: On network failure or timeout.
        """
        session = self._get_session()
        try:
            async with session.get(url) as resp:
                text = await resp.text(encoding="utf-8", errors="replace")
                logger.debug(f"GET {url} -> {resp.status} ({len(text)} chars)")
                return FetchResponse(status=resp.status, text=text)
        except asyncio.TimeoutError as e:
            raise RemoteFetchError(url, reason="timed out") from e
        except aiohttp.ClientError as e:
            raise RemoteFetchError(url, reason=type(e).__name__) from e

    async def close(self) -> None:
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None


__all__ = ["FetchResponse", "ListFetcher", "HttpListFetcher"]
