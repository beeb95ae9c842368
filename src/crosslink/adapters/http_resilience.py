"""Async httpx client used by the catalog provider adapters.

Requests go through the rate limiter first, then the response cache, then a
retrying transport. Only cacheable provider payloads are stored.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, TypedDict, Unpack

import httpx
from aiolimiter import AsyncLimiter
from hishel import AsyncSqliteStorage, FilterPolicy
from hishel import Response as HishelCacheResponse
from hishel._policies import BaseFilter
from hishel.httpx import AsyncCacheClient
from httpx_retries import Retry, RetryTransport

if TYPE_CHECKING:
    from types import TracebackType

    from httpx._client import UseClientDefault
    from httpx._types import QueryParamTypes, TimeoutTypes, URLTypes

    from crosslink.config.http_resilience import (
        CacheConfig,
        PayloadFilter,
        ProviderHttpConfig,
        ResponseHook,
        RetryPolicy,
    )

log = logging.getLogger(__name__)

IN_MEMORY_CACHE = ":memory:"


class LookupOptions(TypedDict, total=False):
    params: QueryParamTypes | None
    timeout: TimeoutTypes | UseClientDefault


class _ClientOptions(TypedDict, total=False):
    base_url: str
    timeout: TimeoutTypes
    headers: dict[str, str]
    event_hooks: dict[str, list[ResponseHook]]
    transport: httpx.AsyncBaseTransport


def build_retry(policy: RetryPolicy) -> Retry:
    """Catalog lookups are GET only, so only GET is ever retried."""
    return Retry(
        total=policy.total,
        backoff_factor=policy.backoff_factor,
        max_backoff_wait=policy.max_backoff_wait,
        backoff_jitter=policy.backoff_jitter,
        respect_retry_after_header=policy.honour_retry_after,
        allowed_methods=("GET",),
        status_forcelist=tuple(sorted(policy.statuses)),
        retry_on_exceptions=policy.exceptions,
    )


class CatalogHttpClient:
    """One provider's HTTP session; use as an async context manager."""

    def __init__(
        self,
        config: ProviderHttpConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self._limiter = (
            AsyncLimiter(config.rate_limit.max_calls, config.rate_limit.per_seconds)
            if config.rate_limit is not None
            else None
        )
        retrying = RetryTransport(transport=transport, retry=build_retry(config.retry))
        options = _client_options(config, retrying)
        cache = _cache_components(config.cache)
        if cache is None:
            self._client = httpx.AsyncClient(**options)
        else:
            storage, policy = cache
            self._client = AsyncCacheClient(**options, storage=storage, policy=policy)

    async def __aenter__(self) -> CatalogHttpClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def get(self, url: URLTypes, **kwargs: Unpack[LookupOptions]) -> httpx.Response:
        log.debug("%s lookup: GET %s", self.config.provider, url)
        if self._limiter is None:
            return await self._client.get(url, **kwargs)
        async with self._limiter:
            return await self._client.get(url, **kwargs)


def _client_options(
    config: ProviderHttpConfig, transport: httpx.AsyncBaseTransport
) -> _ClientOptions:
    options: _ClientOptions = {
        "base_url": config.base_url,
        "timeout": config.timeout_seconds,
        "transport": transport,
    }
    if config.headers:
        options["headers"] = dict(config.headers)
    if config.response_hooks:
        options["event_hooks"] = {"response": list(config.response_hooks)}
    return options


class _PayloadResponseFilter(BaseFilter[HishelCacheResponse]):
    """Lets a provider veto caching of JSON bodies such as error envelopes."""

    def __init__(self, keep_payload: PayloadFilter) -> None:
        self._keep_payload = keep_payload

    def needs_body(self) -> bool:
        return True

    def apply(self, item: HishelCacheResponse, body: bytes | None) -> bool:  # noqa: ARG002
        if body is None:
            return True
        try:
            payload = json.loads(body)
        except (UnicodeDecodeError, json.JSONDecodeError):
            return True
        return bool(self._keep_payload(payload))


def _cache_components(
    config: CacheConfig | None,
) -> tuple[AsyncSqliteStorage, FilterPolicy | None] | None:
    if config is None:
        return None
    storage = AsyncSqliteStorage(
        database_path=str(config.path) if config.path is not None else IN_MEMORY_CACHE,
        default_ttl=config.ttl_seconds,
        refresh_ttl_on_access=config.refresh_ttl_on_access,
    )
    if config.keep_payload is None:
        return storage, None
    return storage, FilterPolicy(response_filters=[_PayloadResponseFilter(config.keep_payload)])
