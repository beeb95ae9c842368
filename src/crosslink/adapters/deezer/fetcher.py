"""Deezer catalog fetcher: ISRC lookups through the public API."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

import httpx

from crosslink.config.deezer import get_deezer_config
from crosslink.domain.model import CatalogFetchError, ProviderKey
from crosslink.domain.ports.fetching import CatalogLookup

from .client import DeezerAPIError, DeezerClient
from .translator import translate_track

if TYPE_CHECKING:
    from collections.abc import Sequence

    from crosslink.config.deezer import DeezerConfig
    from crosslink.domain.model import Isrc

log = getLogger(__name__)


@dataclass(slots=True)
class DeezerCatalogFetcher:
    config: DeezerConfig = field(default_factory=get_deezer_config)
    client: DeezerClient | None = None

    @property
    def provider(self) -> str:
        return ProviderKey.DEEZER.value

    def lookup_isrcs(self, isrcs: Sequence[Isrc]) -> CatalogLookup:
        active_client = self.client or DeezerClient(config=self.config)
        try:
            tracks = active_client.tracks_by_isrc(isrcs)
        except (httpx.HTTPError, DeezerAPIError) as exc:
            raise CatalogFetchError(f"Deezer lookup failed: {exc}", provider=self.provider) from exc

        lookup = CatalogLookup(provider=self.provider)
        for isrc, track in tracks.items():
            if track is None:
                continue
            lookup.add(translate_track(track, isrc=isrc))
        log.debug("Deezer matched %d of %d ISRCs", len(lookup.matched_isrcs), len(isrcs))
        return lookup
