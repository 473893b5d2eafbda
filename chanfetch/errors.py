"""Exceptions raised by the API client."""

from __future__ import annotations

from datetime import datetime, timezone
from email.utils import format_datetime


class ChanError(Exception):
    """Base class for every error the client raises."""


class TransportError(ChanError):
    """The request never produced an HTTP response (DNS, TLS, timeout, ...)."""

    def __init__(self, url: str, cause: BaseException) -> None:
        super().__init__(f"request to {url} failed: {cause}")
        self.url = url
        self.cause = cause


class UnexpectedStatus(ChanError):
    def __init__(self, url: str, status_code: int) -> None:
        super().__init__(f"unexpected status {status_code} for {url}")
        self.url = url
        self.status_code = status_code


class MissingHeader(ChanError):
    def __init__(self, url: str, header: str) -> None:
        super().__init__(f"missing header {header} in response from {url}")
        self.url = url
        self.header = header


class ParseError(ChanError):
    """The response body could not be decoded into the expected payload."""

    def __init__(self, url: str, cause: BaseException) -> None:
        super().__init__(f"failed to parse response from {url}: {cause}")
        self.url = url
        self.cause = cause


class RateLimiterClosed(ChanError):
    def __init__(self) -> None:
        super().__init__("rate limiter has been shut down")


class ThreadArchived(ChanError):
    """Archived threads never change again, so refreshing them is refused."""

    def __init__(self, board: str, no: int, archived_on: int | None) -> None:
        if archived_on is not None:
            when = format_datetime(datetime.fromtimestamp(archived_on, tz=timezone.utc), usegmt=True)
        else:
            when = "an unknown time"
        super().__init__(f"thread /{board}/{no} got archived at: {when}")
        self.board = board
        self.no = no
        self.archived_on = archived_on


class CooldownError(ChanError):
    def __init__(self, elapsed: float, cooldown: float) -> None:
        super().__init__(f"cannot compute cooldown wait ({elapsed=:.3f}s, {cooldown=:.3f}s)")
        self.elapsed = elapsed
        self.cooldown = cooldown
