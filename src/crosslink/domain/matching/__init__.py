"""Cross-provider artist matching: scoring, discovery, lifecycle and sync state."""

from __future__ import annotations

from crosslink.domain.matching.candidates import (
    ArtistCandidate,
    group_hits_by_artist,
    is_compilation_artist,
)
from crosslink.domain.matching.discovery import (
    DiscoveryOutcome,
    DiscoveryPolicy,
    DiscoveryResult,
    HomeArtistProfile,
    ScoredCandidate,
    collect_catalog_isrcs,
    discover_artist_match,
    select_best_candidate,
)
from crosslink.domain.matching.lifecycle import (
    TransitionKind,
    TransitionResult,
    confirm_match,
    reject_match,
)
from crosslink.domain.matching.scoring import (
    AutoConfirmThresholds,
    CandidateScore,
    CandidateSignals,
    ConfidenceBreakdown,
    ConfidenceWeights,
    confidence_band,
    normalize_artist_name,
    qualifies_for_auto_confirm,
    score_candidate,
)
from crosslink.domain.matching.sync_state import (
    Disconnected,
    Discovering,
    LinkCoverage,
    MatchPresent,
    NoMatch,
    SyncProjection,
    SyncSignals,
    classify_sync_signals,
    project_sync_state,
    sync_state_for,
)

__all__ = [
    "ArtistCandidate",
    "AutoConfirmThresholds",
    "CandidateScore",
    "CandidateSignals",
    "ConfidenceBreakdown",
    "ConfidenceWeights",
    "Disconnected",
    "Discovering",
    "DiscoveryOutcome",
    "DiscoveryPolicy",
    "DiscoveryResult",
    "HomeArtistProfile",
    "LinkCoverage",
    "MatchPresent",
    "NoMatch",
    "ScoredCandidate",
    "SyncProjection",
    "SyncSignals",
    "TransitionKind",
    "TransitionResult",
    "classify_sync_signals",
    "collect_catalog_isrcs",
    "confidence_band",
    "confirm_match",
    "discover_artist_match",
    "group_hits_by_artist",
    "is_compilation_artist",
    "normalize_artist_name",
    "project_sync_state",
    "qualifies_for_auto_confirm",
    "reject_match",
    "score_candidate",
    "select_best_candidate",
    "sync_state_for",
]
