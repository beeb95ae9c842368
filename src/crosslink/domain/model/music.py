"""Catalog entities. ``Release`` is the aggregate root and owns its tracks."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar

from crosslink.domain.model.entity import Entity
from crosslink.domain.model.enums import EntityType
from crosslink.domain.model.primitives import normalize_isrc, normalize_upc

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import date
    from uuid import UUID

    from crosslink.domain.model.links import DSPLink
    from crosslink.domain.model.primitives import DurationMs, Isrc, Upc


@dataclass(eq=False, kw_only=True)
class Release(Entity):
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.RELEASE

    profile_id: UUID
    title: str
    release_date: date | None = None
    upc: str | None = None

    # Owned children
    _tracks: list[Track] = field(default_factory=list["Track"], repr=False)

    # Hydrated by the link repository; not part of the ORM row
    links: tuple[DSPLink, ...] = ()

    @property
    def tracks(self) -> tuple[Track, ...]:
        return tuple(sorted(self._tracks, key=_track_position))

    @property
    def valid_upc(self) -> Upc | None:
        return normalize_upc(self.upc)

    def add_track(
        self,
        *,
        name: str,
        track_number: int,
        disc_number: int = 1,
        duration_ms: DurationMs | None = None,
        explicit: bool = False,
        isrc: str | None = None,
    ) -> Track:
        track = Track(
            name=name,
            track_number=track_number,
            disc_number=disc_number,
            duration_ms=duration_ms,
            explicit=explicit,
            isrc=isrc,
        )
        track._release = self  # noqa: SLF001
        if track not in self._tracks:
            self._tracks.append(track)
        return track

    def remove_track(self, track: Track) -> None:
        self._tracks.remove(track)

    def isrcs(self) -> list[Isrc]:
        """Valid track ISRCs in disc/track order, first occurrence only."""
        seen: set[Isrc] = set()
        result: list[Isrc] = []
        for track in self.tracks:
            isrc = track.valid_isrc
            if isrc is None or isrc in seen:
                continue
            seen.add(isrc)
            result.append(isrc)
        return result

    def replace_links(self, links: Iterable[DSPLink]) -> None:
        self.links = tuple(links)

    def link_for(self, provider: str) -> DSPLink | None:
        return next((link for link in self.links if link.provider == provider), None)


@dataclass(eq=False, kw_only=True)
class Track(Entity):
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.TRACK

    name: str
    track_number: int
    disc_number: int = 1
    duration_ms: DurationMs | None = None
    explicit: bool = False
    isrc: str | None = None

    _release: Release | None = field(default=None, repr=False)

    links: tuple[DSPLink, ...] = ()

    @property
    def release(self) -> Release:
        if self._release is None:
            raise ValueError("track is not attached to a release")
        return self._release

    @property
    def valid_isrc(self) -> Isrc | None:
        return normalize_isrc(self.isrc)

    def replace_links(self, links: Iterable[DSPLink]) -> None:
        self.links = tuple(links)


def _track_position(track: Track) -> tuple[int, int]:
    return (track.disc_number, track.track_number)
