from __future__ import annotations

import pytest

from crosslink.domain.matching import (
    Disconnected,
    Discovering,
    MatchPresent,
    NoMatch,
    SyncSignals,
    classify_sync_signals,
    project_sync_state,
    sync_state_for,
)
from crosslink.domain.model import MatchStatus, SyncState
from tests.helpers.catalog import make_match


@pytest.mark.parametrize("in_progress", [True, False])
@pytest.mark.parametrize("status", [None, *MatchStatus])
@pytest.mark.parametrize("linked", [0, 3])
def test_disconnected_or_empty_catalog_is_hidden(
    in_progress: bool, status: MatchStatus | None, linked: int
) -> None:
    for connected, releases in [(False, 10), (True, 0), (False, 0)]:
        signals = SyncSignals(
            home_connected=connected,
            releases_count=releases,
            discovery_in_progress=in_progress,
            match_status=status,
            releases_with_provider_link=linked,
        )

        assert classify_sync_signals(signals) == Disconnected()
        assert project_sync_state(signals).state is SyncState.HIDDEN


@pytest.mark.parametrize("status", [None, *MatchStatus])
def test_discovery_in_progress_shows_loading(status: MatchStatus | None) -> None:
    signals = SyncSignals(
        home_connected=True, releases_count=4, discovery_in_progress=True, match_status=status
    )

    assert classify_sync_signals(signals) == Discovering()
    assert project_sync_state(signals).state is SyncState.LOADING


@pytest.mark.parametrize(
    ("status", "state"),
    [
        (MatchStatus.SUGGESTED, SyncState.SUGGESTED),
        (MatchStatus.AUTO_CONFIRMED, SyncState.AUTO_CONFIRMED),
        (MatchStatus.CONFIRMED, SyncState.CONFIRMED),
        (MatchStatus.REJECTED, SyncState.HIDDEN),
    ],
)
def test_match_status_maps_to_state(status: MatchStatus, state: SyncState) -> None:
    signals = SyncSignals(home_connected=True, releases_count=4, match_status=status)

    assert classify_sync_signals(signals) == MatchPresent(status=status)
    assert project_sync_state(signals).state is state


def test_no_match_without_links_is_no_match() -> None:
    signals = SyncSignals(home_connected=True, releases_count=4)

    assert classify_sync_signals(signals) == NoMatch(has_provider_links=False)
    assert project_sync_state(signals).state is SyncState.NO_MATCH


def test_no_match_with_existing_links_is_hidden() -> None:
    signals = SyncSignals(home_connected=True, releases_count=4, releases_with_provider_link=1)

    assert sync_state_for(classify_sync_signals(signals)) is SyncState.HIDDEN


def test_from_match_reads_status() -> None:
    match = make_match(status=MatchStatus.AUTO_CONFIRMED)

    signals = SyncSignals.from_match(match, home_connected=True, releases_count=2)

    assert signals.match_status is MatchStatus.AUTO_CONFIRMED
    assert SyncSignals.from_match(None, home_connected=True, releases_count=2).match_status is None


def test_projection_reports_link_coverage() -> None:
    projection = project_sync_state(
        SyncSignals(home_connected=True, releases_count=4, releases_with_provider_link=3)
    )

    assert projection.coverage.total_releases == 4
    assert projection.coverage.ratio == pytest.approx(0.75)


def test_coverage_of_empty_catalog_is_zero() -> None:
    projection = project_sync_state(SyncSignals(home_connected=False, releases_count=0))

    assert projection.coverage.ratio == 0.0
