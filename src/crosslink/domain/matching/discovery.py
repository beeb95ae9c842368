"""Artist match discovery for one (profile, provider) pair.

A run reads the home catalog, queries the candidate provider in batches, scores every
external artist sharing ISRCs and writes at most one match record. Nothing is written
until every batch has been fetched, so failures and cancellation leave prior state intact.
"""

from __future__ import annotations

import logging
from contextlib import nullcontext
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

from crosslink.domain.matching.candidates import group_hits_by_artist
from crosslink.domain.matching.scoring import (
    AutoConfirmThresholds,
    CandidateSignals,
    ConfidenceWeights,
    qualifies_for_auto_confirm,
    score_candidate,
)
from crosslink.domain.model import (
    ArtistMatch,
    CatalogFetchError,
    DiscoveryCancelledError,
    MatchConflictError,
    MatchStatus,
    utc_now,
)
from crosslink.domain.ports.fetching import CatalogLookup

if TYPE_CHECKING:
    import threading
    from collections.abc import Callable, Sequence
    from contextlib import AbstractContextManager
    from datetime import datetime
    from uuid import UUID

    from crosslink.domain.matching.candidates import ArtistCandidate
    from crosslink.domain.matching.scoring import CandidateScore
    from crosslink.domain.model import Isrc, Release, Upc
    from crosslink.domain.ports.fetching import CatalogFetcher
    from crosslink.domain.ports.locking import DiscoveryLock
    from crosslink.domain.ports.unit_of_work import MatchingUnitOfWork

log = logging.getLogger(__name__)

MIN_TRACKS_FOR_DISCOVERY = 3
MAX_TRACKS_FOR_MATCHING = 20
ISRC_BATCH_SIZE = 25


class DiscoveryOutcome(StrEnum):
    CREATED = "created"
    UPDATED = "updated"
    KEPT_CONFIRMED = "kept_confirmed"
    NO_CANDIDATES = "no_candidates"
    INSUFFICIENT_CATALOG = "insufficient_catalog"
    FETCH_FAILED = "fetch_failed"
    ALREADY_RUNNING = "already_running"
    CONFLICT = "conflict"


@dataclass(frozen=True, slots=True)
class DiscoveryPolicy:
    min_tracks_for_discovery: int = MIN_TRACKS_FOR_DISCOVERY
    max_tracks_for_matching: int = MAX_TRACKS_FOR_MATCHING
    isrc_batch_size: int = ISRC_BATCH_SIZE
    thresholds: AutoConfirmThresholds = field(default_factory=AutoConfirmThresholds)
    weights: ConfidenceWeights = field(default_factory=ConfidenceWeights)


@dataclass(frozen=True, slots=True)
class HomeArtistProfile:
    """What we know about the creator on their home provider; all optional evidence."""

    name: str | None = None
    followers: int | None = None
    genres: tuple[str, ...] = ()


@dataclass(slots=True)
class DiscoveryResult:
    """Outcome of one discovery run."""

    outcome: DiscoveryOutcome
    profile_id: UUID
    provider: str
    match: ArtistMatch | None = None
    tracks_checked: int = 0
    candidates_considered: int = 0
    error: str | None = None

    @property
    def wrote(self) -> bool:
        return self.outcome in {DiscoveryOutcome.CREATED, DiscoveryOutcome.UPDATED}


@dataclass(frozen=True, slots=True)
class ScoredCandidate:
    candidate: ArtistCandidate
    score: CandidateScore


@dataclass(slots=True)
class _HomeCatalog:
    isrcs: list[Isrc]
    upcs: list[Upc]
    rejected_ids: set[str]


def discover_artist_match(  # noqa: PLR0913
    *,
    profile_id: UUID,
    fetcher: CatalogFetcher,
    unit_of_work_factory: Callable[[], MatchingUnitOfWork],
    lock: DiscoveryLock | None = None,
    policy: DiscoveryPolicy | None = None,
    home_artist: HomeArtistProfile | None = None,
    cancel_event: threading.Event | None = None,
    deadline: datetime | None = None,
    clock: Callable[[], datetime] = utc_now,
) -> DiscoveryResult:
    """Run discovery for ``profile_id`` against ``fetcher.provider``.

    Raises ``DiscoveryCancelledError`` when cancelled or past ``deadline``; no record is
    written in that case.
    """
    provider = fetcher.provider
    guard: AbstractContextManager[bool] = (
        lock.hold(profile_id, provider) if lock is not None else nullcontext(True)
    )
    with guard as acquired:
        if not acquired:
            log.info("Discovery already running for profile %s on %s", profile_id, provider)
            return DiscoveryResult(
                outcome=DiscoveryOutcome.ALREADY_RUNNING,
                profile_id=profile_id,
                provider=provider,
            )
        return _run_discovery(
            profile_id=profile_id,
            fetcher=fetcher,
            unit_of_work_factory=unit_of_work_factory,
            policy=policy or DiscoveryPolicy(),
            home_artist=home_artist or HomeArtistProfile(),
            cancel_event=cancel_event,
            deadline=deadline,
            clock=clock,
        )


def _run_discovery(  # noqa: PLR0913
    *,
    profile_id: UUID,
    fetcher: CatalogFetcher,
    unit_of_work_factory: Callable[[], MatchingUnitOfWork],
    policy: DiscoveryPolicy,
    home_artist: HomeArtistProfile,
    cancel_event: threading.Event | None,
    deadline: datetime | None,
    clock: Callable[[], datetime],
) -> DiscoveryResult:
    provider = fetcher.provider
    log.info("Starting artist discovery for profile %s on %s", profile_id, provider)

    home = _load_home_catalog(profile_id, provider, unit_of_work_factory)
    if len(home.isrcs) < policy.min_tracks_for_discovery:
        log.info(
            "Profile %s has %d usable ISRCs, need %d; skipping %s",
            profile_id,
            len(home.isrcs),
            policy.min_tracks_for_discovery,
            provider,
        )
        return DiscoveryResult(
            outcome=DiscoveryOutcome.INSUFFICIENT_CATALOG,
            profile_id=profile_id,
            provider=provider,
            tracks_checked=len(home.isrcs),
        )

    sample = home.isrcs[: policy.max_tracks_for_matching]
    try:
        lookup = _fetch_in_batches(
            fetcher,
            sample,
            batch_size=policy.isrc_batch_size,
            cancel_event=cancel_event,
            deadline=deadline,
            clock=clock,
        )
    except CatalogFetchError as exc:
        log.warning("Catalog lookup on %s failed for profile %s: %s", provider, profile_id, exc)
        return DiscoveryResult(
            outcome=DiscoveryOutcome.FETCH_FAILED,
            profile_id=profile_id,
            provider=provider,
            tracks_checked=len(sample),
            error=str(exc),
        )

    candidates = [
        candidate
        for candidate in group_hits_by_artist(
            lookup.all_hits(), home_upcs=home.upcs, queried_isrcs=sample
        )
        if candidate.external_id not in home.rejected_ids
    ]
    best = select_best_candidate(
        candidates,
        total_tracks_checked=len(sample),
        home_artist=home_artist,
        weights=policy.weights,
    )
    if best is None:
        log.info("No %s artist shares ISRCs with profile %s", provider, profile_id)
        return DiscoveryResult(
            outcome=DiscoveryOutcome.NO_CANDIDATES,
            profile_id=profile_id,
            provider=provider,
            tracks_checked=len(sample),
        )

    _check_cancelled(cancel_event, deadline, clock)
    status = (
        MatchStatus.AUTO_CONFIRMED
        if qualifies_for_auto_confirm(
            best.score.confidence, best.candidate.matching_isrc_count, policy.thresholds
        )
        else MatchStatus.SUGGESTED
    )
    try:
        result = _write_match(
            profile_id=profile_id,
            provider=provider,
            best=best,
            status=status,
            total_tracks_checked=len(sample),
            unit_of_work_factory=unit_of_work_factory,
            now=clock(),
        )
    except MatchConflictError as exc:
        log.warning("Concurrent match write for profile %s on %s: %s", profile_id, provider, exc)
        return DiscoveryResult(
            outcome=DiscoveryOutcome.CONFLICT,
            profile_id=profile_id,
            provider=provider,
            tracks_checked=len(sample),
            error=str(exc),
        )
    result.candidates_considered = len(candidates)
    log.info(
        "Discovery for profile %s on %s finished: %s (%s, confidence %.2f)",
        profile_id,
        provider,
        result.outcome,
        best.candidate.artist.name,
        best.score.confidence,
    )
    return result


def select_best_candidate(
    candidates: Sequence[ArtistCandidate],
    *,
    total_tracks_checked: int,
    home_artist: HomeArtistProfile | None = None,
    weights: ConfidenceWeights | None = None,
) -> ScoredCandidate | None:
    """Highest confidence wins; ties go to more shared ISRCs, then the smaller external id."""
    home_artist = home_artist or HomeArtistProfile()
    scored = [
        ScoredCandidate(
            candidate=candidate,
            score=score_candidate(
                CandidateSignals(
                    matching_isrc_count=candidate.matching_isrc_count,
                    total_tracks_checked=total_tracks_checked,
                    matching_upc_count=candidate.matching_upc_count,
                    home_artist_name=home_artist.name,
                    candidate_name=candidate.artist.name,
                    home_followers=home_artist.followers,
                    candidate_followers=candidate.artist.followers,
                    home_genres=home_artist.genres,
                    candidate_genres=candidate.artist.genres,
                ),
                weights,
            ),
        )
        for candidate in candidates
        if candidate.matching_isrc_count > 0
    ]
    if not scored:
        return None
    return min(
        scored,
        key=lambda item: (
            -item.score.confidence,
            -item.candidate.matching_isrc_count,
            item.candidate.external_id,
        ),
    )


def _load_home_catalog(
    profile_id: UUID,
    provider: str,
    unit_of_work_factory: Callable[[], MatchingUnitOfWork],
) -> _HomeCatalog:
    with unit_of_work_factory() as uow:
        releases = uow.repositories.releases.list_for_profile(profile_id)
        rejected = uow.repositories.matches.rejected_external_ids(profile_id, provider)
    return _HomeCatalog(
        isrcs=collect_catalog_isrcs(releases),
        upcs=[upc for upc in (release.valid_upc for release in releases) if upc],
        rejected_ids=rejected,
    )


def collect_catalog_isrcs(releases: Sequence[Release]) -> list[Isrc]:
    """Valid ISRCs across releases in release/track order, without duplicates."""
    seen: set[Isrc] = set()
    isrcs: list[Isrc] = []
    for release in releases:
        for isrc in release.isrcs():
            if isrc not in seen:
                seen.add(isrc)
                isrcs.append(isrc)
    return isrcs


def _fetch_in_batches(  # noqa: PLR0913
    fetcher: CatalogFetcher,
    isrcs: Sequence[Isrc],
    *,
    batch_size: int,
    cancel_event: threading.Event | None,
    deadline: datetime | None,
    clock: Callable[[], datetime],
) -> CatalogLookup:
    lookup = CatalogLookup(provider=fetcher.provider)
    size = max(batch_size, 1)
    for start in range(0, len(isrcs), size):
        _check_cancelled(cancel_event, deadline, clock)
        lookup.extend(fetcher.lookup_isrcs(isrcs[start : start + size]))
    return lookup


def _check_cancelled(
    cancel_event: threading.Event | None,
    deadline: datetime | None,
    clock: Callable[[], datetime],
) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise DiscoveryCancelledError("Discovery cancelled")
    if deadline is not None and clock() >= deadline:
        raise DiscoveryCancelledError("Discovery deadline exceeded")


def _write_match(  # noqa: PLR0913
    *,
    profile_id: UUID,
    provider: str,
    best: ScoredCandidate,
    status: MatchStatus,
    total_tracks_checked: int,
    unit_of_work_factory: Callable[[], MatchingUnitOfWork],
    now: datetime,
) -> DiscoveryResult:
    artist = best.candidate.artist
    with unit_of_work_factory() as uow:
        matches = uow.repositories.matches
        active = matches.get_active(profile_id, provider)
        if active is not None and not active.is_mutable_by_discovery:
            return DiscoveryResult(
                outcome=DiscoveryOutcome.KEPT_CONFIRMED,
                profile_id=profile_id,
                provider=provider,
                match=active,
                tracks_checked=total_tracks_checked,
            )
        if active is None:
            match = ArtistMatch(
                profile_id=profile_id,
                provider=provider,
                external_artist_id=artist.external_id,
                external_artist_name=artist.name,
                created_at=now,
            )
            matches.add(match)
            outcome = DiscoveryOutcome.CREATED
        else:
            match = active
            outcome = DiscoveryOutcome.UPDATED
        match.external_artist_id = artist.external_id
        match.external_artist_name = artist.name
        match.external_artist_url = artist.url
        match.image_url = artist.image_url
        match.confidence = best.score.confidence
        match.matching_isrc_count = best.candidate.matching_isrc_count
        match.matching_upc_count = best.candidate.matching_upc_count
        match.total_tracks_checked = total_tracks_checked
        match.breakdown = best.score.breakdown.as_dict()
        match.status = status
        match.confirmed_at = now if status is MatchStatus.AUTO_CONFIRMED else None
        match.updated_at = now
        uow.commit()
    return DiscoveryResult(
        outcome=outcome,
        profile_id=profile_id,
        provider=provider,
        match=match,
        tracks_checked=total_tracks_checked,
    )
