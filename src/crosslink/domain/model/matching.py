"""Cross-provider artist match records."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, ClassVar

from crosslink.domain.model.entity import Entity
from crosslink.domain.model.enums import EntityType, MatchStatus

if TYPE_CHECKING:
    from uuid import UUID


def utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass(eq=False, kw_only=True)
class ArtistMatch(Entity):
    """Proposed or confirmed correspondence between a profile and an artist on a provider.

    At most one non-rejected match exists per (profile, provider). Records are never
    deleted; status transitions are the audit trail.
    """

    ENTITY_TYPE: ClassVar[EntityType] = EntityType.ARTIST_MATCH

    profile_id: UUID
    provider: str
    external_artist_id: str
    external_artist_name: str
    external_artist_url: str | None = None
    image_url: str | None = None
    confidence: float = 0.0
    matching_isrc_count: int = 0
    matching_upc_count: int = 0
    total_tracks_checked: int = 0
    breakdown: dict[str, float] = field(default_factory=dict[str, float])
    status: MatchStatus = MatchStatus.SUGGESTED
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)
    confirmed_at: datetime | None = None
    confirmed_by: UUID | None = None
    rejected_at: datetime | None = None
    rejection_reason: str | None = None

    def __post_init__(self) -> None:
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"confidence must be within [0.0, 1.0], got {self.confidence!r}")

    @property
    def is_active(self) -> bool:
        return self.status.is_active

    @property
    def is_mutable_by_discovery(self) -> bool:
        return self.status in {MatchStatus.SUGGESTED, MatchStatus.AUTO_CONFIRMED}
