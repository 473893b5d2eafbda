"""Request pacing – one token per interval, shared by every outbound request."""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from dataclasses import dataclass

from .errors import RateLimiterClosed

logger = logging.getLogger("chanfetch.ratelimit")


@dataclass(frozen=True)
class RateToken:
    """Permit for exactly one request.  ``issued_at`` is event-loop time."""
    issued_at: float


class RateLimiter:
    """Token source refilled by a background task on a fixed schedule.

    Every ``period`` seconds one token is minted, provided no more than
    ``ceiling`` tokens are already standing.  With the default ceiling of 0
    the limiter holds at most one token, i.e. it paces rather than bursts.
    Waiters are served in arrival order and consecutive grants are never
    closer than ``period``.
    """

    def __init__(self, period: float = 1.0, initial: int = 0, ceiling: int = 0) -> None:
        if period <= 0:
            raise ValueError("period must be positive")
        if initial < 0 or ceiling < 0:
            raise ValueError("initial and ceiling must not be negative")
        self.period = period
        self.ceiling = ceiling
        self._tokens = initial
        self._waiters: deque[asyncio.Future[RateToken]] = deque()
        self._last_grant: float | None = None
        self._task: asyncio.Task[None] | None = None
        self._closed = False
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running event loop; replenisher starts on first acquire")
        else:
            self._start()

    @property
    def available(self) -> int:
        return self._tokens

    @property
    def waiting(self) -> int:
        return len(self._waiters)

    @property
    def closed(self) -> bool:
        return self._closed

    # ── replenishment ────────────────────────────────────────────

    def _start(self) -> None:
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._replenish(), name="chanfetch-rate-limiter")
        logger.debug("Rate limiter started (period=%.3fs, ceiling=%d)", self.period, self.ceiling)

    async def _replenish(self) -> None:
        loop = asyncio.get_running_loop()
        tick = loop.time()
        while True:
            hold = self._hold_off(loop.time())
            while hold > 0:
                # The previous grant went out late; keep grants one period apart.
                await asyncio.sleep(hold)
                hold = self._hold_off(loop.time())
            self._tick(loop.time())
            tick += self.period
            now = loop.time()
            if now >= tick + self.period:
                # Missed ticks are skipped, not replayed as a burst.
                tick += ((now - tick) // self.period) * self.period
            await asyncio.sleep(max(0.0, tick - now))

    def _hold_off(self, now: float) -> float:
        if self._last_grant is None:
            return 0.0
        return max(0.0, self._last_grant + self.period - now)

    def _tick(self, now: float) -> None:
        while self._waiters:
            waiter = self._waiters.popleft()
            if not waiter.done():
                self._last_grant = now
                waiter.set_result(RateToken(now))
                return
        if self._tokens <= self.ceiling:
            self._tokens += 1

    def _hand_back(self, token: RateToken) -> None:
        while self._waiters:
            waiter = self._waiters.popleft()
            if not waiter.done():
                waiter.set_result(token)
                return
        if self._tokens <= self.ceiling:
            self._tokens += 1
        else:
            logger.debug("Dropping returned token, %d already standing", self._tokens)

    # ── acquisition ──────────────────────────────────────────────

    async def acquire(self) -> RateToken:
        """Wait for a token.  Raises RateLimiterClosed once the limiter is shut down."""
        if self._closed:
            raise RateLimiterClosed()
        if self._task is None:
            self._start()
        loop = asyncio.get_running_loop()
        if self._tokens > 0 and not self._waiters:
            self._tokens -= 1
            token = RateToken(loop.time())
            self._last_grant = token.issued_at
            return token

        waiter: asyncio.Future[RateToken] = loop.create_future()
        self._waiters.append(waiter)
        try:
            return await waiter
        except asyncio.CancelledError:
            if waiter.done() and not waiter.cancelled() and waiter.exception() is None:
                # The token arrived together with the cancellation.
                self._hand_back(waiter.result())
            raise
        finally:
            if waiter in self._waiters:
                self._waiters.remove(waiter)

    # ── lifecycle ────────────────────────────────────────────────

    def close(self) -> None:
        """Stop the replenisher and fail every queued waiter."""
        if self._closed:
            return
        self._closed = True
        if self._task is not None:
            self._task.cancel()
        while self._waiters:
            waiter = self._waiters.popleft()
            if not waiter.done():
                waiter.set_exception(RateLimiterClosed())
        logger.debug("Rate limiter closed")

    async def aclose(self) -> None:
        self.close()
        if self._task is not None and not self._task.done():
            await asyncio.wait([self._task])

    async def __aenter__(self) -> RateLimiter:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()
