"""Transport settings shared by the catalog provider clients.

Catalog lookups are idempotent GETs keyed by ISRC, so every provider gets the
same shape of settings: a retry budget, an optional request rate, a response
cache and provider specific response hooks.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final

import httpx

from .env import env_float, env_int

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

type ResponseHook = Callable[[httpx.Response], Awaitable[None] | None]
type PayloadFilter = Callable[[object], bool]

# ISRC to track mappings rarely change; a week keeps reruns off the network.
DEFAULT_LOOKUP_TTL_SECONDS: Final[float] = 7 * 24 * 60 * 60
RETRYABLE_STATUSES: Final[frozenset[int]] = frozenset({429, 500, 502, 503, 504})


class ProviderQuotaError(httpx.HTTPError):
    """A provider answered the request but refused it for quota reasons."""

    def __init__(self, provider: str, *, response: httpx.Response) -> None:
        super().__init__(f"{provider} quota exceeded")
        self.provider = provider
        self.response = response


@dataclass(slots=True, frozen=True)
class RetryPolicy:
    total: int = 4
    backoff_factor: float = 0.5
    max_backoff_wait: float = 60.0
    backoff_jitter: float = 1.0
    honour_retry_after: bool = True
    statuses: frozenset[int] = RETRYABLE_STATUSES

    @property
    def exceptions(self) -> tuple[type[httpx.HTTPError], ...]:
        return (
            httpx.TimeoutException,
            httpx.NetworkError,
            httpx.RemoteProtocolError,
            ProviderQuotaError,
        )


@dataclass(slots=True, frozen=True)
class RateLimit:
    max_calls: int
    per_seconds: float

    @classmethod
    def per_minute(cls, max_calls: int) -> RateLimit:
        return cls(max_calls=max_calls, per_seconds=60.0)


@dataclass(slots=True, frozen=True)
class CacheConfig:
    """Response cache; in memory unless ``path`` points at a SQLite file."""

    path: Path | None = None
    ttl_seconds: float | None = DEFAULT_LOOKUP_TTL_SECONDS
    refresh_ttl_on_access: bool = False
    keep_payload: PayloadFilter | None = None

    @property
    def persistent(self) -> bool:
        return self.path is not None


@dataclass(slots=True, frozen=True)
class ProviderHttpConfig:
    provider: str
    base_url: str
    timeout_seconds: float = 10.0
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    rate_limit: RateLimit | None = None
    cache: CacheConfig | None = field(default_factory=CacheConfig)
    response_hooks: tuple[ResponseHook, ...] = ()
    headers: Mapping[str, str] | None = None


def retry_policy_from_env(prefix: str, default: RetryPolicy | None = None) -> RetryPolicy:
    """Read ``{prefix}_HTTP_RETRIES`` and ``{prefix}_HTTP_BACKOFF`` over ``default``."""

    base = default or RetryPolicy()
    return RetryPolicy(
        total=env_int(f"{prefix}_HTTP_RETRIES", base.total),
        backoff_factor=env_float(f"{prefix}_HTTP_BACKOFF", base.backoff_factor),
        max_backoff_wait=base.max_backoff_wait,
        backoff_jitter=base.backoff_jitter,
        honour_retry_after=base.honour_retry_after,
        statuses=base.statuses,
    )
