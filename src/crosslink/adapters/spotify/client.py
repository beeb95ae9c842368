"""Spotipy-based client wrapper for catalog lookups."""

from __future__ import annotations

from typing import TYPE_CHECKING

import spotipy
from spotipy.oauth2 import SpotifyClientCredentials

from .schema import ArtistsResponse, SpotifyArtist, SpotifyTrack, TrackSearchResponse

if TYPE_CHECKING:
    from collections.abc import Sequence

    from crosslink.config.spotify import SpotifyConfig

ARTISTS_BATCH_LIMIT = 50
SEARCH_LIMIT = 5


class SpotifyClient:
    """Small wrapper around spotipy.Spotify using the client credentials flow."""

    def __init__(self, *, config: SpotifyConfig, client: spotipy.Spotify | None = None) -> None:
        if client is None:
            auth_manager = SpotifyClientCredentials(
                client_id=config.client_id,
                client_secret=config.client_secret,
            )
            client = spotipy.Spotify(auth_manager=auth_manager)
        self._client = client
        self._market = config.market

    def search_isrc(self, isrc: str, *, limit: int = SEARCH_LIMIT) -> list[SpotifyTrack]:
        raw_payload = self._client.search(  # pyright: ignore[reportUnknownMemberType]
            q=f"isrc:{isrc}",
            type="track",
            limit=limit,
            market=self._market,
        )
        return TrackSearchResponse.model_validate(raw_payload).tracks.items

    def artists(self, artist_ids: Sequence[str]) -> list[SpotifyArtist]:
        """Full artist objects (followers, genres) in batches of the API limit."""
        artists: list[SpotifyArtist] = []
        ids = list(artist_ids)
        for start in range(0, len(ids), ARTISTS_BATCH_LIMIT):
            batch = ids[start : start + ARTISTS_BATCH_LIMIT]
            raw_payload = self._client.artists(batch)  # pyright: ignore[reportUnknownMemberType]
            payload = ArtistsResponse.model_validate(raw_payload)
            artists.extend(artist for artist in payload.artists if artist is not None)
        return artists
