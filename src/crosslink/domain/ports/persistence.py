"""Ports for persisting releases, their links and artist matches."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from crosslink.domain.model import ArtistMatch, Release

if TYPE_CHECKING:
    from collections.abc import Collection, Iterable
    from datetime import datetime
    from uuid import UUID

    from crosslink.domain.model import DSPLink, EntityType, MatchStatus


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent aggregate store."""

    def add(self, entity: TEntity) -> None: ...

    def get(self, entity_id: UUID) -> TEntity | None: ...


@runtime_checkable
class ReleaseRepository(Repository[Release], Protocol):
    """Releases (with their tracks) of a creator profile, in release date order."""

    def list_for_profile(self, profile_id: UUID) -> list[Release]: ...

    def count_for_profile(self, profile_id: UUID) -> int: ...


@runtime_checkable
class DspLinkRepository(Protocol):
    """Resolved link sets, keyed by a typed owner reference."""

    def links_for(self, owner_type: EntityType, owner_id: UUID) -> tuple[DSPLink, ...]: ...

    def replace_links(
        self, owner_type: EntityType, owner_id: UUID, links: Iterable[DSPLink]
    ) -> None: ...

    def hydrate(self, release: Release) -> Release:
        """Load the release's and its tracks' link sets onto the entities."""
        ...

    def count_releases_with_provider(self, profile_id: UUID, provider: str) -> int: ...


@runtime_checkable
class ArtistMatchRepository(Repository[ArtistMatch], Protocol):
    def get_active(self, profile_id: UUID, provider: str) -> ArtistMatch | None: ...

    def list_for_profile(self, profile_id: UUID) -> list[ArtistMatch]: ...

    def rejected_external_ids(self, profile_id: UUID, provider: str) -> set[str]: ...

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
        """Atomically move a match to ``to_status`` if its current status is allowed.

        Confirming stamps ``confirmed_at``/``confirmed_by``; rejecting stamps
        ``rejected_at``/``rejection_reason``. Returns whether a row changed. Callers
        re-read to tell no-ops from conflicts.
        """
        ...
