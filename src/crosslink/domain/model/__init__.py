"""Public domain model surface."""

from __future__ import annotations

from crosslink.domain.model.entity import Entity
from crosslink.domain.model.enums import (
    ConfidenceBand,
    EntityType,
    LinkSource,
    MatchStatus,
    ProviderKey,
    SyncState,
)
from crosslink.domain.model.errors import (
    CatalogFetchError,
    CrosslinkError,
    DiscoveryCancelledError,
    MatchConflictError,
    MatchNotFoundError,
)
from crosslink.domain.model.links import DSPLink
from crosslink.domain.model.matching import ArtistMatch, utc_now
from crosslink.domain.model.music import Release, Track
from crosslink.domain.model.primitives import (
    DurationMs,
    Isrc,
    ProviderName,
    Upc,
    normalize_isrc,
    normalize_upc,
    provider_name,
)

__all__ = [  # noqa: RUF022
    # entities
    "ArtistMatch",
    "Entity",
    "Release",
    "Track",
    # value objects
    "DSPLink",
    # enums
    "ConfidenceBand",
    "EntityType",
    "LinkSource",
    "MatchStatus",
    "ProviderKey",
    "SyncState",
    # errors
    "CatalogFetchError",
    "CrosslinkError",
    "DiscoveryCancelledError",
    "MatchConflictError",
    "MatchNotFoundError",
    # primitives
    "DurationMs",
    "Isrc",
    "ProviderName",
    "Upc",
    "normalize_isrc",
    "normalize_upc",
    "provider_name",
    "utc_now",
]
