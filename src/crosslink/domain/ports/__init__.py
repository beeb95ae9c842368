"""Domain ports."""

from __future__ import annotations

from crosslink.domain.ports.fetching import (
    CatalogArtist,
    CatalogFetcher,
    CatalogLookup,
    CatalogTrackHit,
)
from crosslink.domain.ports.locking import DiscoveryLock
from crosslink.domain.ports.persistence import (
    ArtistMatchRepository,
    DspLinkRepository,
    ReleaseRepository,
    Repository,
)
from crosslink.domain.ports.unit_of_work import (
    MatchingRepositories,
    MatchingUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "ArtistMatchRepository",
    "CatalogArtist",
    "CatalogFetcher",
    "CatalogLookup",
    "CatalogTrackHit",
    "DiscoveryLock",
    "DspLinkRepository",
    "MatchingRepositories",
    "MatchingUnitOfWork",
    "ReleaseRepository",
    "Repository",
    "RepositoryCollection",
    "UnitOfWork",
]
