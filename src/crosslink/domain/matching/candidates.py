"""Group catalog hits by external artist identity."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final

from crosslink.domain.model import normalize_isrc, normalize_upc

if TYPE_CHECKING:
    from collections.abc import Iterable

    from crosslink.domain.model import Isrc, Upc
    from crosslink.domain.ports.fetching import CatalogArtist, CatalogTrackHit

COMPILATION_MARKERS: Final = ("various artists", "compilation")


@dataclass(slots=True)
class ArtistCandidate:
    """Evidence gathered for one external artist across a discovery run."""

    artist: CatalogArtist
    isrcs: set[Isrc] = field(default_factory=set[str])
    upcs: set[Upc] = field(default_factory=set[str])

    @property
    def external_id(self) -> str:
        return self.artist.external_id

    @property
    def matching_isrc_count(self) -> int:
        return len(self.isrcs)

    @property
    def matching_upc_count(self) -> int:
        return len(self.upcs)


def is_compilation_artist(name: str) -> bool:
    lowered = name.lower()
    return any(marker in lowered for marker in COMPILATION_MARKERS)


def group_hits_by_artist(
    hits: Iterable[CatalogTrackHit],
    *,
    home_upcs: Iterable[Upc] = (),
    queried_isrcs: Iterable[Isrc] | None = None,
) -> list[ArtistCandidate]:
    """Aggregate hits per artist id, in first-seen order.

    Every credited artist on a hit gets the hit's normalized ISRC. Hits whose ISRC is
    malformed, or not one of ``queried_isrcs`` when given, are ignored. UPCs only count
    when the album UPC is also one of the home catalog's release UPCs.
    """
    known_upcs = {upc for upc in (normalize_upc(value) for value in home_upcs) if upc}
    shared: set[Isrc] | None = None
    if queried_isrcs is not None:
        shared = {code for code in (normalize_isrc(value) for value in queried_isrcs) if code}
    candidates: dict[str, ArtistCandidate] = {}
    for hit in hits:
        hit_isrc = normalize_isrc(hit.isrc)
        if hit_isrc is None or (shared is not None and hit_isrc not in shared):
            continue
        album_upc = normalize_upc(hit.album_upc)
        for artist in hit.artists:
            if not artist.external_id or is_compilation_artist(artist.name):
                continue
            candidate = candidates.get(artist.external_id)
            if candidate is None:
                candidate = ArtistCandidate(artist=artist)
                candidates[artist.external_id] = candidate
            candidate.isrcs.add(hit_isrc)
            if album_upc is not None and album_upc in known_upcs:
                candidate.upcs.add(album_upc)
    return list(candidates.values())
