"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from collections import defaultdict
from typing import TYPE_CHECKING, cast

from sqlalchemy import delete, func, insert, select, update

from crosslink.adapters.sqlalchemy.mappings import (
    artist_match_table,
    dsp_link_table,
    release_table,
)
from crosslink.domain.model import (
    ArtistMatch,
    DSPLink,
    EntityType,
    LinkSource,
    MatchStatus,
    Release,
)

if TYPE_CHECKING:
    from collections.abc import Collection, Iterable, Sequence
    from datetime import datetime
    from uuid import UUID

    from sqlalchemy import CursorResult, Row
    from sqlalchemy.orm import Session


class SqlAlchemyDspLinkRepository:
    """Link sets stored under a typed owner reference, in merge output order."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def links_for(self, owner_type: EntityType, owner_id: UUID) -> tuple[DSPLink, ...]:
        grouped = self._load(owner_type, [owner_id])
        return tuple(grouped.get(owner_id, ()))

    def replace_links(
        self, owner_type: EntityType, owner_id: UUID, links: Iterable[DSPLink]
    ) -> None:
        self.session.execute(
            delete(dsp_link_table)
            .where(dsp_link_table.c.owner_type == owner_type)
            .where(dsp_link_table.c.owner_id == owner_id)
        )
        rows = [
            {
                "owner_type": owner_type,
                "owner_id": owner_id,
                "position": position,
                "provider": link.provider,
                "url": link.url,
                "source": link.source,
                "confidence": link.confidence,
                "identifier": link.identifier,
                "external_id": link.external_id,
            }
            for position, link in enumerate(links)
        ]
        if rows:
            self.session.execute(insert(dsp_link_table), rows)

    def hydrate(self, release: Release) -> Release:
        release.replace_links(self.links_for(EntityType.RELEASE, release.id))
        tracks = release.tracks
        if tracks:
            grouped = self._load(EntityType.TRACK, [track.id for track in tracks])
            for track in tracks:
                track.replace_links(grouped.get(track.id, ()))
        return release

    def count_releases_with_provider(self, profile_id: UUID, provider: str) -> int:
        stmt = (
            select(func.count(func.distinct(release_table.c.id)))
            .select_from(release_table)
            .join(
                dsp_link_table,
                (dsp_link_table.c.owner_id == release_table.c.id)
                & (dsp_link_table.c.owner_type == EntityType.RELEASE),
            )
            .where(release_table.c.profile_id == profile_id)
            .where(dsp_link_table.c.provider == provider)
        )
        return int(self.session.execute(stmt).scalar_one())

    def _load(self, owner_type: EntityType, owner_ids: Sequence[UUID]) -> dict[UUID, list[DSPLink]]:
        stmt = (
            select(dsp_link_table)
            .where(dsp_link_table.c.owner_type == owner_type)
            .where(dsp_link_table.c.owner_id.in_(owner_ids))
            .order_by(dsp_link_table.c.owner_id, dsp_link_table.c.position)
        )
        grouped: dict[UUID, list[DSPLink]] = defaultdict(list)
        for row in self.session.execute(stmt):
            grouped[row.owner_id].append(_link_from_row(row))
        return grouped


def _link_from_row(row: Row[tuple[object, ...]]) -> DSPLink:
    mapping = row._mapping  # noqa: SLF001
    return DSPLink(
        provider=cast("str", mapping["provider"]),
        url=cast("str", mapping["url"]),
        source=LinkSource(mapping["source"]),
        confidence=float(cast("float", mapping["confidence"])),
        identifier=cast("str | None", mapping["identifier"]),
        external_id=cast("str | None", mapping["external_id"]),
    )


class SqlAlchemyReleaseRepository:
    """Releases come back with tracks loaded and link sets hydrated."""

    def __init__(self, session: Session, links: SqlAlchemyDspLinkRepository | None = None) -> None:
        self.session = session
        self.links = links or SqlAlchemyDspLinkRepository(session)

    def add(self, entity: Release) -> None:
        self.session.add(entity)
        if entity.links:
            self.links.replace_links(EntityType.RELEASE, entity.id, entity.links)
        for track in entity.tracks:
            if track.links:
                self.links.replace_links(EntityType.TRACK, track.id, track.links)

    def get(self, entity_id: UUID) -> Release | None:
        release = self.session.get(Release, entity_id)
        if release is None:
            return None
        return self.links.hydrate(release)

    def list_for_profile(self, profile_id: UUID) -> list[Release]:
        release_date = release_table.c.release_date
        stmt = (
            select(Release)
            .where(release_table.c.profile_id == profile_id)
            .order_by(release_date.is_(None), release_date.desc(), release_table.c.title)
        )
        releases = list(self.session.execute(stmt).scalars())
        return [self.links.hydrate(release) for release in releases]

    def count_for_profile(self, profile_id: UUID) -> int:
        stmt = select(func.count()).select_from(release_table).where(
            release_table.c.profile_id == profile_id
        )
        return int(self.session.execute(stmt).scalar_one())


class SqlAlchemyArtistMatchRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: ArtistMatch) -> None:
        self.session.add(entity)

    def get(self, entity_id: UUID) -> ArtistMatch | None:
        return self.session.get(ArtistMatch, entity_id, populate_existing=True)

    def get_active(self, profile_id: UUID, provider: str) -> ArtistMatch | None:
        stmt = (
            select(ArtistMatch)
            .where(artist_match_table.c.profile_id == profile_id)
            .where(artist_match_table.c.provider == provider)
            .where(artist_match_table.c.status != MatchStatus.REJECTED)
            .limit(1)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def list_for_profile(self, profile_id: UUID) -> list[ArtistMatch]:
        stmt = (
            select(ArtistMatch)
            .where(artist_match_table.c.profile_id == profile_id)
            .order_by(artist_match_table.c.provider, artist_match_table.c.created_at)
        )
        return list(self.session.execute(stmt).scalars())

    def rejected_external_ids(self, profile_id: UUID, provider: str) -> set[str]:
        stmt = (
            select(artist_match_table.c.external_artist_id)
            .where(artist_match_table.c.profile_id == profile_id)
            .where(artist_match_table.c.provider == provider)
            .where(artist_match_table.c.status == MatchStatus.REJECTED)
        )
        return set(self.session.execute(stmt).scalars())

    def transition(
        self,
        match_id: UUID,
        *,
        from_statuses: Collection[MatchStatus],
        to_status: MatchStatus,
        at: datetime,
        confirmed_by: UUID | None = None,
        rejection_reason: str | None = None,
    ) -> bool:
        values: dict[str, object] = {"status": to_status, "updated_at": at}
        if to_status is MatchStatus.CONFIRMED:
            values.update(confirmed_at=at, confirmed_by=confirmed_by)
        elif to_status is MatchStatus.REJECTED:
            values.update(rejected_at=at, rejection_reason=rejection_reason)
        stmt = (
            update(artist_match_table)
            .where(artist_match_table.c.id == match_id)
            .where(artist_match_table.c.status.in_(list(from_statuses)))
            .values(**values)
        )
        result = cast("CursorResult[tuple[()]]", self.session.execute(stmt))
        return result.rowcount == 1
