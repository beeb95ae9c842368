"""Presentation projection of a profile's match status for one provider.

Raw signals are first classified into a small tagged union, then mapped to a state.
Precedence: disconnected or empty catalog, then discovery in progress, then an existing
match, then no match.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, assert_never

from crosslink.domain.model import MatchStatus, SyncState

if TYPE_CHECKING:
    from crosslink.domain.model import ArtistMatch


@dataclass(frozen=True, slots=True)
class SyncSignals:
    home_connected: bool
    releases_count: int
    discovery_in_progress: bool = False
    match_status: MatchStatus | None = None
    releases_with_provider_link: int = 0

    @classmethod
    def from_match(
        cls,
        match: ArtistMatch | None,
        *,
        home_connected: bool,
        releases_count: int,
        discovery_in_progress: bool = False,
        releases_with_provider_link: int = 0,
    ) -> SyncSignals:
        return cls(
            home_connected=home_connected,
            releases_count=releases_count,
            discovery_in_progress=discovery_in_progress,
            match_status=match.status if match is not None else None,
            releases_with_provider_link=releases_with_provider_link,
        )


@dataclass(frozen=True, slots=True)
class Disconnected:
    """No home provider connection, or nothing in the catalog to match."""


@dataclass(frozen=True, slots=True)
class Discovering:
    pass


@dataclass(frozen=True, slots=True)
class MatchPresent:
    status: MatchStatus


@dataclass(frozen=True, slots=True)
class NoMatch:
    has_provider_links: bool


type SyncCondition = Disconnected | Discovering | MatchPresent | NoMatch


@dataclass(frozen=True, slots=True)
class LinkCoverage:
    total_releases: int
    with_provider_link: int

    @property
    def ratio(self) -> float:
        if self.total_releases <= 0:
            return 0.0
        return min(self.with_provider_link / self.total_releases, 1.0)


@dataclass(frozen=True, slots=True)
class SyncProjection:
    state: SyncState
    condition: SyncCondition
    coverage: LinkCoverage


def classify_sync_signals(signals: SyncSignals) -> SyncCondition:
    if not signals.home_connected or signals.releases_count <= 0:
        return Disconnected()
    if signals.discovery_in_progress:
        return Discovering()
    if signals.match_status is not None:
        return MatchPresent(status=signals.match_status)
    return NoMatch(has_provider_links=signals.releases_with_provider_link > 0)


def sync_state_for(condition: SyncCondition) -> SyncState:  # noqa: PLR0911
    if isinstance(condition, Disconnected):
        return SyncState.HIDDEN
    if isinstance(condition, Discovering):
        return SyncState.LOADING
    if isinstance(condition, NoMatch):
        # links already present means the provider is covered another way
        return SyncState.HIDDEN if condition.has_provider_links else SyncState.NO_MATCH
    if isinstance(condition, MatchPresent):
        status = condition.status
        if status is MatchStatus.SUGGESTED:
            return SyncState.SUGGESTED
        if status is MatchStatus.AUTO_CONFIRMED:
            return SyncState.AUTO_CONFIRMED
        if status is MatchStatus.CONFIRMED:
            return SyncState.CONFIRMED
        if status is MatchStatus.REJECTED:
            return SyncState.HIDDEN
        assert_never(status)
    assert_never(condition)


def project_sync_state(signals: SyncSignals) -> SyncProjection:
    condition = classify_sync_signals(signals)
    return SyncProjection(
        state=sync_state_for(condition),
        condition=condition,
        coverage=LinkCoverage(
            total_releases=max(signals.releases_count, 0),
            with_provider_link=max(signals.releases_with_provider_link, 0),
        ),
    )
