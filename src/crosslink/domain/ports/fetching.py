"""Ports for querying external provider catalogs."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from crosslink.domain.model import Isrc


@dataclass(frozen=True, slots=True)
class CatalogArtist:
    """Artist identity as reported by a provider."""

    external_id: str
    name: str
    url: str | None = None
    image_url: str | None = None
    followers: int | None = None
    genres: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class CatalogTrackHit:
    """One provider track found for a queried ISRC."""

    isrc: Isrc
    track_id: str
    track_url: str
    title: str
    artists: tuple[CatalogArtist, ...]
    album_id: str | None = None
    album_url: str | None = None
    album_upc: str | None = None

    @property
    def primary_artist(self) -> CatalogArtist | None:
        return self.artists[0] if self.artists else None


@dataclass(slots=True)
class CatalogLookup:
    """Hits per queried ISRC. ISRCs the provider does not know map to no hits."""

    provider: str
    hits: dict[Isrc, list[CatalogTrackHit]] = field(default_factory=dict)

    def add(self, hit: CatalogTrackHit) -> None:
        self.hits.setdefault(hit.isrc, []).append(hit)

    def extend(self, other: CatalogLookup) -> None:
        for hits in other.hits.values():
            for hit in hits:
                self.add(hit)

    def all_hits(self) -> Iterable[CatalogTrackHit]:
        for hits in self.hits.values():
            yield from hits

    @property
    def matched_isrcs(self) -> set[Isrc]:
        return {isrc for isrc, hits in self.hits.items() if hits}


@runtime_checkable
class CatalogFetcher(Protocol):
    """Port for looking up tracks on one provider by ISRC.

    Implementations raise ``CatalogFetchError`` on transient failures.
    """

    @property
    def provider(self) -> str: ...

    def lookup_isrcs(self, isrcs: Sequence[Isrc]) -> CatalogLookup: ...


__all__ = ["CatalogArtist", "CatalogFetcher", "CatalogLookup", "CatalogTrackHit"]
