"""Spotify catalog fetcher: ISRC search with client credentials."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from requests.exceptions import RequestException
from spotipy.exceptions import SpotifyException

from crosslink.config.spotify import get_spotify_config
from crosslink.domain.model import CatalogFetchError, ProviderKey, normalize_isrc
from crosslink.domain.ports.fetching import CatalogLookup

from .client import SpotifyClient
from .translator import translate_track

if TYPE_CHECKING:
    from collections.abc import Sequence

    from crosslink.config.spotify import SpotifyConfig
    from crosslink.domain.model import Isrc

    from .schema import SpotifyArtist, SpotifyTrack

log = getLogger(__name__)


@dataclass(slots=True)
class SpotifyCatalogFetcher:
    config: SpotifyConfig = field(default_factory=get_spotify_config)
    client: SpotifyClient | None = None
    include_artist_details: bool = True

    @property
    def provider(self) -> str:
        return ProviderKey.SPOTIFY.value

    def lookup_isrcs(self, isrcs: Sequence[Isrc]) -> CatalogLookup:
        active_client = self.client or SpotifyClient(config=self.config)
        try:
            found = {isrc: self._search(active_client, isrc) for isrc in isrcs}
            details = self._artist_details(active_client, found)
        except (SpotifyException, RequestException) as exc:
            msg = f"Spotify lookup failed: {exc}"
            raise CatalogFetchError(msg, provider=self.provider) from exc

        lookup = CatalogLookup(provider=self.provider)
        for isrc, tracks in found.items():
            for track in tracks:
                lookup.add(translate_track(track, isrc=isrc, details=details))
        log.debug("Spotify matched %d of %d ISRCs", len(lookup.matched_isrcs), len(isrcs))
        return lookup

    def _search(self, client: SpotifyClient, isrc: Isrc) -> list[SpotifyTrack]:
        # search is fuzzy; keep only tracks that really carry the ISRC
        return [
            track
            for track in client.search_isrc(isrc)
            if normalize_isrc(track.external_ids.get("isrc")) == isrc
        ]

    def _artist_details(
        self,
        client: SpotifyClient,
        found: dict[Isrc, list[SpotifyTrack]],
    ) -> dict[str, SpotifyArtist]:
        if not self.include_artist_details:
            return {}
        artist_ids: list[str] = []
        for tracks in found.values():
            for track in tracks:
                for artist in track.artists:
                    if artist.id not in artist_ids:
                        artist_ids.append(artist.id)
        if not artist_ids:
            return {}
        return {artist.id: artist for artist in client.artists(artist_ids)}
