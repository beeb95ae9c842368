"""Translate Spotify payloads into catalog hits."""

from __future__ import annotations

from typing import TYPE_CHECKING

from crosslink.domain.ports.fetching import CatalogArtist, CatalogTrackHit

if TYPE_CHECKING:
    from collections.abc import Mapping

    from crosslink.domain.model import Isrc

    from .schema import SpotifyArtist, SpotifyTrack

SPOTIFY_WEB_URL = "https://open.spotify.com"


def translate_artist(
    artist: SpotifyArtist,
    *,
    details: Mapping[str, SpotifyArtist] | None = None,
) -> CatalogArtist:
    """Simplified track artists are enriched from ``details`` when available."""
    full = (details or {}).get(artist.id, artist)
    image_url = full.images[0].url if full.images else None
    return CatalogArtist(
        external_id=artist.id,
        name=full.name,
        url=full.external_urls.get("spotify") or f"{SPOTIFY_WEB_URL}/artist/{artist.id}",
        image_url=image_url,
        followers=full.followers.total if full.followers is not None else None,
        genres=tuple(full.genres),
    )


def translate_track(
    track: SpotifyTrack,
    *,
    isrc: Isrc,
    details: Mapping[str, SpotifyArtist] | None = None,
) -> CatalogTrackHit:
    album = track.album
    return CatalogTrackHit(
        isrc=isrc,
        track_id=track.id,
        track_url=track.external_urls.get("spotify") or f"{SPOTIFY_WEB_URL}/track/{track.id}",
        title=track.name,
        artists=tuple(translate_artist(artist, details=details) for artist in track.artists),
        album_id=album.id,
        album_url=album.external_urls.get("spotify") or f"{SPOTIFY_WEB_URL}/album/{album.id}",
        album_upc=album.external_ids.get("upc") or album.external_ids.get("ean"),
    )
