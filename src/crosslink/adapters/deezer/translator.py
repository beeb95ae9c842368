"""Translate Deezer payloads into catalog hits."""

from __future__ import annotations

from typing import TYPE_CHECKING

from crosslink.domain.ports.fetching import CatalogArtist, CatalogTrackHit

if TYPE_CHECKING:
    from crosslink.domain.model import Isrc

    from .schema import DeezerAlbum, DeezerArtist, DeezerTrack

DEEZER_WEB_URL = "https://www.deezer.com"


def translate_artist(artist: DeezerArtist) -> CatalogArtist:
    return CatalogArtist(
        external_id=str(artist.id),
        name=artist.name,
        url=artist.link or f"{DEEZER_WEB_URL}/artist/{artist.id}",
        image_url=artist.picture_big or artist.picture_medium,
        followers=artist.nb_fan,
    )


def translate_track(track: DeezerTrack, *, isrc: Isrc) -> CatalogTrackHit:
    """``isrc`` is the queried ISRC; Deezer may echo it in a different format."""
    artists = [translate_artist(track.artist)]
    seen = {track.artist.id}
    for contributor in track.contributors:
        if contributor.id in seen:
            continue
        seen.add(contributor.id)
        artists.append(translate_artist(contributor))
    album: DeezerAlbum | None = track.album
    return CatalogTrackHit(
        isrc=isrc,
        track_id=str(track.id),
        track_url=track.link,
        title=track.title,
        artists=tuple(artists),
        album_id=str(album.id) if album is not None else None,
        album_url=(album.link or f"{DEEZER_WEB_URL}/album/{album.id}") if album else None,
        album_upc=album.upc if album is not None else None,
    )
