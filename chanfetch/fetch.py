"""Conditional fetch executor – one rate-limited, If-Modified-Since aware GET."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Generic, TypeVar, Union

import httpx
from pydantic import TypeAdapter, ValidationError

from .errors import ChanError, MissingHeader, ParseError, TransportError, UnexpectedStatus
from .ratelimit import RateLimiter

logger = logging.getLogger("chanfetch.fetch")

T = TypeVar("T")


@dataclass(frozen=True)
class Fresh(Generic[T]):
    payload: T
    last_modified: str


@dataclass(frozen=True)
class NotModified:
    # Servers may repeat Last-Modified on a 304; None when they don't.
    last_modified: str | None = None


@dataclass(frozen=True)
class Failure:
    error: ChanError


FetchOutcome = Union[Fresh[T], NotModified, Failure]


@lru_cache(maxsize=None)
def _adapter(model: Any) -> TypeAdapter[Any]:
    return TypeAdapter(model)


class ConditionalFetcher:
    """Performs single-attempt GETs through a shared RateLimiter.

    No retries and no backoff happen here; a failed attempt is reported as a
    ``Failure`` outcome and the caller decides what to do with it.
    """

    def __init__(self, http: httpx.AsyncClient, limiter: RateLimiter) -> None:
        self.http = http
        self.limiter = limiter

    async def fetch(self, url: str, model: Any, last_modified: str | None = None) -> FetchOutcome[Any]:
        """GET ``url`` and validate a 200 body against ``model``.

        ``last_modified`` is sent back verbatim as If-Modified-Since.
        Raises RateLimiterClosed if the limiter has been shut down.
        """
        headers = {}
        if last_modified is not None:
            headers["If-Modified-Since"] = last_modified

        await self.limiter.acquire()
        logger.debug("GET %s (If-Modified-Since: %s)", url, last_modified)
        try:
            async with self.http.stream("GET", url, headers=headers) as resp:
                logger.debug("%s -> %d", url, resp.status_code)
                if resp.status_code == 304:
                    return NotModified(resp.headers.get("Last-Modified"))
                if resp.status_code != 200:
                    return Failure(UnexpectedStatus(url, resp.status_code))
                body = await resp.aread()
                new_last_modified = resp.headers.get("Last-Modified")
        except httpx.HTTPError as exc:
            logger.warning("Request to %s failed: %s", url, exc)
            return Failure(TransportError(url, exc))

        try:
            payload = _adapter(model).validate_json(body)
        except ValidationError as exc:
            return Failure(ParseError(url, exc))
        if new_last_modified is None:
            return Failure(MissingHeader(url, "Last-Modified"))
        return Fresh(payload, new_last_modified)
