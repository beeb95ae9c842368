from __future__ import annotations

import pytest

from crosslink.domain.matching import (
    AutoConfirmThresholds,
    CandidateSignals,
    ConfidenceWeights,
    confidence_band,
    normalize_artist_name,
    qualifies_for_auto_confirm,
    score_candidate,
)
from crosslink.domain.matching.scoring import (
    NEUTRAL_SCORE,
    follower_ratio_score,
    genre_overlap_score,
    isrc_match_score,
    isrc_support_score,
    name_similarity_score,
    upc_match_score,
)
from crosslink.domain.model import ConfidenceBand


def test_default_weights_sum_to_one() -> None:
    assert ConfidenceWeights().total == pytest.approx(1.0)


def test_isrc_scores_are_zero_without_evidence() -> None:
    assert isrc_match_score(0, 20) == 0.0
    assert isrc_match_score(5, 0) == 0.0
    assert isrc_support_score(0) == 0.0
    assert upc_match_score(0) == 0.0


def test_isrc_scores_saturate() -> None:
    assert isrc_match_score(20, 20) == 1.0
    assert isrc_match_score(25, 20) == 1.0
    assert isrc_support_score(10) == 1.0
    assert isrc_support_score(40) == 1.0
    assert upc_match_score(5) == 1.0
    assert upc_match_score(9) == 1.0


def test_confidence_is_monotonic_in_absolute_overlap() -> None:
    scores = [
        score_candidate(CandidateSignals(matching_isrc_count=m, total_tracks_checked=20)).confidence
        for m in range(21)
    ]

    assert scores == sorted(scores)
    assert scores[0] < scores[-1]


def test_confidence_is_monotonic_in_relative_overlap() -> None:
    # same absolute overlap, smaller sample means a higher ratio
    small_sample = score_candidate(CandidateSignals(matching_isrc_count=5, total_tracks_checked=5))
    large_sample = score_candidate(CandidateSignals(matching_isrc_count=5, total_tracks_checked=20))

    assert small_sample.confidence > large_sample.confidence


def test_score_without_optional_signals_uses_neutral_values() -> None:
    score = score_candidate(CandidateSignals(matching_isrc_count=20, total_tracks_checked=20))

    assert score.breakdown.name_similarity == NEUTRAL_SCORE
    assert score.breakdown.follower_ratio == NEUTRAL_SCORE
    assert score.breakdown.genre_overlap == NEUTRAL_SCORE
    assert score.confidence == pytest.approx(0.7)


def test_score_with_all_signals_reaches_one() -> None:
    score = score_candidate(
        CandidateSignals(
            matching_isrc_count=20,
            total_tracks_checked=20,
            matching_upc_count=5,
            home_artist_name="The Band",
            candidate_name="Band",
            home_followers=1000,
            candidate_followers=1000,
            home_genres=("Indie",),
            candidate_genres=("indie",),
        )
    )

    assert score.confidence == 1.0
    assert set(score.breakdown.as_dict()) == {
        "isrc_match",
        "isrc_support",
        "upc_match",
        "name_similarity",
        "follower_ratio",
        "genre_overlap",
    }


def test_custom_weights_are_normalized() -> None:
    weights = ConfidenceWeights(
        isrc_match=2.0,
        isrc_support=0.0,
        upc_match=0.0,
        name_similarity=0.0,
        follower_ratio=0.0,
        genre_overlap=0.0,
    )

    signals = CandidateSignals(matching_isrc_count=5, total_tracks_checked=20)

    score = score_candidate(signals, weights)

    assert score.confidence == pytest.approx(0.5)


def test_zero_weights_give_zero_confidence() -> None:
    weights = ConfidenceWeights(0, 0, 0, 0, 0, 0)

    signals = CandidateSignals(matching_isrc_count=5, total_tracks_checked=5)

    score = score_candidate(signals, weights)

    assert score.confidence == 0.0


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("The Beatles", "beatles"),
        ("Beyoncé", "beyonce"),
        ("  DJ   Shadow ", "shadow"),
        ("A-ha", "aha"),
        ("Lil' Kim", "kim"),
        ("AC/DC", "acdc"),
    ],
)
def test_normalize_artist_name(raw: str, expected: str) -> None:
    assert normalize_artist_name(raw) == expected


def test_name_similarity() -> None:
    assert name_similarity_score("Beyoncé", "BEYONCE") == 1.0
    assert name_similarity_score(None, "Anyone") == NEUTRAL_SCORE
    assert name_similarity_score("!!!", "Chk Chk Chk") == NEUTRAL_SCORE
    assert 0.0 <= name_similarity_score("Radiohead", "Portishead") < 1.0
    assert name_similarity_score("Radiohead", "Radiohed") > name_similarity_score(
        "Radiohead", "Metallica"
    )


def test_follower_ratio() -> None:
    assert follower_ratio_score(None, 10) == NEUTRAL_SCORE
    assert follower_ratio_score(0, 0) == 1.0
    assert follower_ratio_score(0, 10) == pytest.approx(0.1)
    assert follower_ratio_score(100, 100) == 1.0
    assert follower_ratio_score(100, 1000) == pytest.approx(0.1)
    assert follower_ratio_score(100, 200) > follower_ratio_score(100, 500)


def test_genre_overlap() -> None:
    assert genre_overlap_score((), ("rock",)) == NEUTRAL_SCORE
    assert genre_overlap_score(("Rock", "pop"), ("rock", "jazz")) == pytest.approx(1 / 3)
    assert genre_overlap_score(("rock",), ("metal",)) == 0.0


def test_auto_confirm_requires_confidence_and_evidence() -> None:
    assert qualifies_for_auto_confirm(0.8, 3)
    assert not qualifies_for_auto_confirm(0.79, 10)
    assert not qualifies_for_auto_confirm(0.99, 2)
    assert qualifies_for_auto_confirm(0.6, 1, AutoConfirmThresholds(0.5, 1))


@pytest.mark.parametrize(
    ("confidence", "band"),
    [
        (0.95, ConfidenceBand.VERY_HIGH),
        (0.85, ConfidenceBand.VERY_HIGH),
        (0.8, ConfidenceBand.HIGH),
        (0.6, ConfidenceBand.MEDIUM),
        (0.2, ConfidenceBand.LOW),
    ],
)
def test_confidence_band(confidence: float, band: ConfidenceBand) -> None:
    assert confidence_band(confidence) is band
