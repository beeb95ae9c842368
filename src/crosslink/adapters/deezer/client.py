"""HTTP client for the public Deezer API."""

from __future__ import annotations

import asyncio
from dataclasses import replace
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from crosslink.adapters.http_resilience import CatalogHttpClient
from crosslink.config.http_resilience import ProviderQuotaError

from .schema import DeezerTrack, ErrorResponse

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from crosslink.config.deezer import DeezerConfig
    from crosslink.config.http_resilience import ProviderHttpConfig

log = getLogger(__name__)

NO_DATA_ERROR_CODE = 800
QUOTA_ERROR_CODE = 4


class DeezerAPIError(RuntimeError):
    """Raised when the Deezer API returns an application-level error."""

    def __init__(self, message: str, *, code: int | None = None) -> None:
        super().__init__(message)
        self.code = code


async def raise_on_quota_exceeded(response: httpx.Response) -> None:
    """Deezer reports quota errors with HTTP 200; surface them as HTTP errors."""
    await response.aread()
    try:
        payload = response.json()
    except ValueError:
        return
    if not isinstance(payload, dict) or "error" not in payload:
        return
    error = ErrorResponse.model_validate(payload).error
    if error.code == QUOTA_ERROR_CODE:
        raise ProviderQuotaError("deezer", response=response)


def _is_cacheable_payload(payload: object) -> bool:
    return not (isinstance(payload, dict) and "error" in payload)


def _with_deezer_hooks(http: ProviderHttpConfig) -> ProviderHttpConfig:
    cache = http.cache
    if cache is not None and cache.keep_payload is None:
        cache = replace(cache, keep_payload=_is_cacheable_payload)
    hooks = http.response_hooks
    if raise_on_quota_exceeded not in hooks:
        hooks = (*hooks, raise_on_quota_exceeded)
    return replace(http, cache=cache, response_hooks=hooks)


class DeezerClient:
    """Looks up Deezer tracks by ISRC."""

    def __init__(
        self,
        *,
        config: DeezerConfig,
        client_factory: Callable[[ProviderHttpConfig], CatalogHttpClient] | None = None,
    ) -> None:
        self._config = config
        self._http = _with_deezer_hooks(config.http)
        self._client_factory = client_factory or CatalogHttpClient

    def tracks_by_isrc(self, isrcs: Sequence[str]) -> dict[str, DeezerTrack | None]:
        return asyncio.run(self._tracks_by_isrc_async(isrcs))

    async def _tracks_by_isrc_async(self, isrcs: Sequence[str]) -> dict[str, DeezerTrack | None]:
        results: dict[str, DeezerTrack | None] = {}
        async with self._client_factory(self._http) as client:
            for isrc in isrcs:
                results[isrc] = await self._fetch_track(client, isrc)
        return results

    async def _fetch_track(self, client: CatalogHttpClient, isrc: str) -> DeezerTrack | None:
        response = await client.get(f"/track/isrc:{isrc}")
        response.raise_for_status()

        payload = response.json()
        if not isinstance(payload, dict):
            raise DeezerAPIError("Unexpected Deezer response payload")
        if "error" in payload:
            error = ErrorResponse.model_validate(payload).error
            if error.code == NO_DATA_ERROR_CODE:
                return None
            raise DeezerAPIError(error.message or "Deezer API error", code=error.code)
        try:
            return DeezerTrack.model_validate(payload)
        except ValidationError:
            log.warning("Skipping unparseable Deezer track payload for ISRC %s", isrc)
            return None
