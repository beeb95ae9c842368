"""Confidence scoring for cross-provider artist candidates.

The curve is a tunable parameter, not a contract: every signal lives behind a named
function and the blend is controlled by ``ConfidenceWeights``. The score is monotonic
in both absolute and relative ISRC overlap.
"""

from __future__ import annotations

import math
import re
import unicodedata
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from rapidfuzz.distance import JaroWinkler

from crosslink.domain.model import ConfidenceBand

if TYPE_CHECKING:
    from collections.abc import Collection

NEUTRAL_SCORE: Final = 0.5
EXPECTED_ALBUMS: Final = 5
ISRC_SUPPORT_SATURATION: Final = 10
MIN_RATIO_SCORE: Final = 0.1
MAX_FOLLOWER_RATIO: Final = 10.0

_NAME_PREFIXES: Final = ("the ", "a ", "dj ", "lil ")
_NON_WORD: Final = re.compile(r"[^\w\s]")
_WHITESPACE: Final = re.compile(r"\s+")


@dataclass(frozen=True, slots=True)
class ConfidenceWeights:
    isrc_match: float = 0.45
    isrc_support: float = 0.10
    upc_match: float = 0.15
    name_similarity: float = 0.15
    follower_ratio: float = 0.10
    genre_overlap: float = 0.05

    @property
    def total(self) -> float:
        return (
            self.isrc_match
            + self.isrc_support
            + self.upc_match
            + self.name_similarity
            + self.follower_ratio
            + self.genre_overlap
        )


@dataclass(frozen=True, slots=True)
class AutoConfirmThresholds:
    min_confidence: float = 0.8
    min_matching_isrcs: int = 3


@dataclass(frozen=True, slots=True)
class CandidateSignals:
    """Raw evidence for one external artist identity."""

    matching_isrc_count: int
    total_tracks_checked: int
    matching_upc_count: int = 0
    home_artist_name: str | None = None
    candidate_name: str | None = None
    home_followers: int | None = None
    candidate_followers: int | None = None
    home_genres: tuple[str, ...] = ()
    candidate_genres: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class ConfidenceBreakdown:
    isrc_match: float
    isrc_support: float
    upc_match: float
    name_similarity: float
    follower_ratio: float
    genre_overlap: float

    def as_dict(self) -> dict[str, float]:
        return {
            "isrc_match": self.isrc_match,
            "isrc_support": self.isrc_support,
            "upc_match": self.upc_match,
            "name_similarity": self.name_similarity,
            "follower_ratio": self.follower_ratio,
            "genre_overlap": self.genre_overlap,
        }


@dataclass(frozen=True, slots=True)
class CandidateScore:
    confidence: float
    breakdown: ConfidenceBreakdown


def isrc_match_score(matching: int, total: int) -> float:
    if total <= 0 or matching <= 0:
        return 0.0
    return math.sqrt(min(matching / total, 1.0))


def isrc_support_score(matching: int, saturation: int = ISRC_SUPPORT_SATURATION) -> float:
    if matching <= 0:
        return 0.0
    return min(matching / saturation, 1.0)


def upc_match_score(matching_upcs: int, expected_albums: int = EXPECTED_ALBUMS) -> float:
    if matching_upcs <= 0:
        return 0.0
    return math.sqrt(min(matching_upcs / expected_albums, 1.0))


def normalize_artist_name(name: str) -> str:
    """Lowercase, strip accents and common prefixes, drop punctuation, squash spaces."""
    decomposed = unicodedata.normalize("NFKD", name.lower())
    text = "".join(char for char in decomposed if not unicodedata.combining(char))
    text = _WHITESPACE.sub(" ", _NON_WORD.sub("", text)).strip()
    for prefix in _NAME_PREFIXES:
        if text.startswith(prefix):
            text = text.removeprefix(prefix).strip()
            break
    return text


def name_similarity_score(home_name: str | None, candidate_name: str | None) -> float:
    if not home_name or not candidate_name:
        return NEUTRAL_SCORE
    left = normalize_artist_name(home_name)
    right = normalize_artist_name(candidate_name)
    if not left or not right:
        return NEUTRAL_SCORE
    if left == right:
        return 1.0
    return JaroWinkler.similarity(left, right)


def follower_ratio_score(home: int | None, candidate: int | None) -> float:
    if home is None or candidate is None:
        return NEUTRAL_SCORE
    if home == 0 and candidate == 0:
        return 1.0
    if home == 0 or candidate == 0:
        return MIN_RATIO_SCORE
    ratio = max(home, candidate) / min(home, candidate)
    if ratio >= MAX_FOLLOWER_RATIO:
        return MIN_RATIO_SCORE
    return max(MIN_RATIO_SCORE, 1.0 - math.log10(ratio))


def genre_overlap_score(home: Collection[str], candidate: Collection[str]) -> float:
    if not home or not candidate:
        return NEUTRAL_SCORE
    left = {genre.strip().lower() for genre in home}
    right = {genre.strip().lower() for genre in candidate}
    return len(left & right) / len(left | right)


def score_candidate(
    signals: CandidateSignals,
    weights: ConfidenceWeights | None = None,
) -> CandidateScore:
    weights = weights or ConfidenceWeights()
    breakdown = ConfidenceBreakdown(
        isrc_match=isrc_match_score(signals.matching_isrc_count, signals.total_tracks_checked),
        isrc_support=isrc_support_score(signals.matching_isrc_count),
        upc_match=upc_match_score(signals.matching_upc_count),
        name_similarity=name_similarity_score(signals.home_artist_name, signals.candidate_name),
        follower_ratio=follower_ratio_score(signals.home_followers, signals.candidate_followers),
        genre_overlap=genre_overlap_score(signals.home_genres, signals.candidate_genres),
    )
    weighted = (
        breakdown.isrc_match * weights.isrc_match
        + breakdown.isrc_support * weights.isrc_support
        + breakdown.upc_match * weights.upc_match
        + breakdown.name_similarity * weights.name_similarity
        + breakdown.follower_ratio * weights.follower_ratio
        + breakdown.genre_overlap * weights.genre_overlap
    )
    total = weights.total
    confidence = weighted / total if total > 0 else 0.0
    return CandidateScore(confidence=round(min(max(confidence, 0.0), 1.0), 4), breakdown=breakdown)


def qualifies_for_auto_confirm(
    confidence: float,
    matching_isrc_count: int,
    thresholds: AutoConfirmThresholds | None = None,
) -> bool:
    thresholds = thresholds or AutoConfirmThresholds()
    return (
        confidence >= thresholds.min_confidence
        and matching_isrc_count >= thresholds.min_matching_isrcs
    )


def confidence_band(confidence: float) -> ConfidenceBand:
    if confidence >= 0.85:
        return ConfidenceBand.VERY_HIGH
    if confidence >= 0.75:
        return ConfidenceBand.HIGH
    if confidence >= 0.5:
        return ConfidenceBand.MEDIUM
    return ConfidenceBand.LOW
