"""Deezer configuration values."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from .env import env_flag, env_int
from .http_resilience import CacheConfig, ProviderHttpConfig, RateLimit, retry_policy_from_env
from .storage import get_storage_config

DEEZER_BASE_URL: Final[str] = "https://api.deezer.com"
DEEZER_TIMEOUT_SECONDS: Final[float] = 10.0
# Deezer documents 50 calls per 5 seconds per client.
DEEZER_CALLS_PER_MINUTE: Final[int] = 40


@dataclass(frozen=True, slots=True)
class DeezerConfig:
    """The public Deezer API needs no credentials, only transport settings."""

    http: ProviderHttpConfig


def get_deezer_config(*, http: ProviderHttpConfig | None = None) -> DeezerConfig:
    """Transport settings from ``DEEZER_*`` variables.

    ``DEEZER_PERSIST_CACHE=1`` keeps lookups in the data directory between runs.
    """
    if http is not None:
        return DeezerConfig(http=http)
    cache_path = (
        get_storage_config().http_cache_path
        if env_flag("DEEZER_PERSIST_CACHE")
        else None
    )
    return DeezerConfig(
        http=ProviderHttpConfig(
            provider="deezer",
            base_url=DEEZER_BASE_URL,
            timeout_seconds=DEEZER_TIMEOUT_SECONDS,
            rate_limit=RateLimit.per_minute(
                env_int("DEEZER_CALLS_PER_MINUTE", DEEZER_CALLS_PER_MINUTE)
            ),
            retry=retry_policy_from_env("DEEZER"),
            cache=CacheConfig(path=cache_path),
        )
    )
