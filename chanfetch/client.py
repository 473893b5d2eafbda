"""4chan API client – owns the HTTP connection pool and the global rate limiter."""

from __future__ import annotations

import logging

import httpx

from .config import ClientConfig
from .fetch import ConditionalFetcher
from .ratelimit import RateLimiter
from .resources import Archive, BoardList, Catalog, Thread, ThreadList

logger = logging.getLogger("chanfetch.client")


class ChanClient:
    """Entry point for fetching API resources.

    Every request made through one client, whatever the resource, shares a
    single RateLimiter.  Create it inside a running event loop and close it
    with ``aclose()`` (or ``async with``) so the limiter's timer stops.
    """

    def __init__(self, cfg: ClientConfig | None = None) -> None:
        self.cfg = cfg or ClientConfig()
        self._closed = False
        self._http = httpx.AsyncClient(
            timeout=self.cfg.api.timeout,
            headers={"User-Agent": self.cfg.api.user_agent},
            follow_redirects=True,
        )
        self.limiter = RateLimiter(
            period=self.cfg.api.request_interval,
            initial=self.cfg.api.initial_tokens,
            ceiling=self.cfg.api.token_ceiling,
        )
        self.fetcher = ConditionalFetcher(self._http, self.limiter)

    def url(self, path: str) -> str:
        return f"{self.cfg.api.api_base}{path}"

    def cooldown(self, kind: str) -> float:
        return getattr(self.cfg.cooldowns, kind)

    # ── public API ───────────────────────────────────────────────

    async def boards(self) -> BoardList:
        """Fetch all boards from boards.json."""
        return await BoardList.new(self)

    async def catalog(self, board: str) -> Catalog:
        """Fetch the catalog for a board (pages with threads)."""
        return await Catalog.new(self, board)

    async def thread_list(self, board: str) -> ThreadList:
        """Fetch threads.json for a board (lightweight thread list)."""
        return await ThreadList.new(self, board)

    async def thread(self, board: str, no: int) -> Thread:
        """Fetch a full thread (OP + all replies)."""
        return await Thread.new(self, board, no)

    async def archive(self, board: str) -> Archive:
        """Fetch the archive list for a board."""
        return await Archive.new(self, board)

    # ── lifecycle ────────────────────────────────────────────────

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True
        await self.limiter.aclose()
        await self._http.aclose()
        logger.debug("Client closed")

    async def __aenter__(self) -> ChanClient:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()
