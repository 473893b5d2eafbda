"""Configuration and environment settings for the API client."""

from __future__ import annotations

import os
from dataclasses import dataclass, field


@dataclass(frozen=True)
class ApiConfig:
    """4chan API configuration.  Respects the 1-request-per-second guideline."""
    api_base: str = "https://a.4cdn.org"
    image_base: str = "https://i.4cdn.org"
    user_agent: str = "chanfetch/1.0"
    timeout: float = 30.0
    request_interval: float = 1.0  # seconds between API requests
    initial_tokens: int = 0
    token_ceiling: int = 0  # max standing tokens before a refill is skipped

    @classmethod
    def from_env(cls) -> ApiConfig:
        return cls(
            api_base=os.getenv("CHAN_API_BASE", "https://a.4cdn.org"),
            image_base=os.getenv("CHAN_IMAGE_BASE", "https://i.4cdn.org"),
            user_agent=os.getenv("CHAN_USER_AGENT", "chanfetch/1.0"),
            timeout=float(os.getenv("CHAN_TIMEOUT", "30")),
            request_interval=float(os.getenv("CHAN_REQUEST_INTERVAL", "1")),
            initial_tokens=int(os.getenv("CHAN_INITIAL_TOKENS", "0")),
            token_ceiling=int(os.getenv("CHAN_TOKEN_CEILING", "0")),
        )


@dataclass(frozen=True)
class CooldownConfig:
    """Minimum seconds between two refreshes of the same resource."""
    boards: float = 0.0
    catalog: float = 10.0
    threads: float = 0.0
    thread: float = 10.0
    archive: float = 0.0

    @classmethod
    def from_env(cls) -> CooldownConfig:
        return cls(
            boards=float(os.getenv("CHAN_BOARDS_COOLDOWN", "0")),
            catalog=float(os.getenv("CHAN_CATALOG_COOLDOWN", "10")),
            threads=float(os.getenv("CHAN_THREADS_COOLDOWN", "0")),
            thread=float(os.getenv("CHAN_THREAD_COOLDOWN", "10")),
            archive=float(os.getenv("CHAN_ARCHIVE_COOLDOWN", "0")),
        )


@dataclass(frozen=True)
class ClientConfig:
    api: ApiConfig = field(default_factory=ApiConfig)
    cooldowns: CooldownConfig = field(default_factory=CooldownConfig)

    @classmethod
    def from_env(cls) -> ClientConfig:
        return cls(api=ApiConfig.from_env(), cooldowns=CooldownConfig.from_env())
