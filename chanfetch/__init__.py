"""
chanfetch – rate-limited, conditionally-cached client for the 4chan JSON API.

Supports:
  • Board lists, catalogs, thread lists, threads and archives
  • 1 request per second across the whole client
  • If-Modified-Since refreshes (304s keep the cached payload)
  • Per-resource refresh cooldowns (10 s for threads and catalogs)
"""

from .client import ChanClient
from .config import ApiConfig, ClientConfig, CooldownConfig
from .errors import (
    ChanError,
    CooldownError,
    MissingHeader,
    ParseError,
    RateLimiterClosed,
    ThreadArchived,
    TransportError,
    UnexpectedStatus,
)
from .fetch import ConditionalFetcher, Failure, FetchOutcome, Fresh, NotModified
from .ratelimit import RateLimiter, RateToken
from .resources import Archive, BoardList, Catalog, Resource, ResourceMetadata, Thread, ThreadList

__all__ = [
    "ApiConfig",
    "Archive",
    "BoardList",
    "Catalog",
    "ChanClient",
    "ChanError",
    "ClientConfig",
    "ConditionalFetcher",
    "CooldownConfig",
    "CooldownError",
    "Failure",
    "FetchOutcome",
    "Fresh",
    "MissingHeader",
    "NotModified",
    "ParseError",
    "RateLimiter",
    "RateLimiterClosed",
    "RateToken",
    "Resource",
    "ResourceMetadata",
    "Thread",
    "ThreadArchived",
    "ThreadList",
    "TransportError",
    "UnexpectedStatus",
]
