from __future__ import annotations

from datetime import UTC, date, datetime
from typing import TYPE_CHECKING
from uuid import uuid4

from crosslink.adapters.sqlalchemy import (
    SqlAlchemyArtistMatchRepository,
    SqlAlchemyDspLinkRepository,
    SqlAlchemyReleaseRepository,
)
from crosslink.domain.model import EntityType, LinkSource, MatchStatus
from tests.helpers.catalog import isrc, make_link, make_match, make_release

if TYPE_CHECKING:
    from sqlalchemy.orm import Session


def test_release_round_trip_keeps_tracks_and_links(sqlite_session: Session) -> None:
    repo = SqlAlchemyReleaseRepository(sqlite_session)
    links = [
        make_link("tidal", source=LinkSource.OVERRIDE),
        make_link("spotify", identifier="012345678905"),
    ]
    release = make_release(
        isrcs=[isrc(1), isrc(2)], upc="012345678905", release_date=date(2020, 5, 1), links=links
    )
    release.tracks[0].replace_links([make_link("deezer", identifier=isrc(1))])

    repo.add(release)
    sqlite_session.commit()
    sqlite_session.expunge_all()

    stored = repo.get(release.id)
    assert stored is not None
    assert stored.title == release.title
    assert stored.release_date == date(2020, 5, 1)
    assert list(stored.links) == links
    assert [track.track_number for track in stored.tracks] == [1, 2]
    assert stored.tracks[0].release is stored
    assert [link.provider for link in stored.tracks[0].links] == ["deezer"]
    assert stored.tracks[1].links == ()


def test_unknown_release_is_none(sqlite_session: Session) -> None:
    assert SqlAlchemyReleaseRepository(sqlite_session).get(uuid4()) is None


def test_releases_are_listed_newest_first(sqlite_session: Session) -> None:
    repo = SqlAlchemyReleaseRepository(sqlite_session)
    profile_id = uuid4()
    undated = make_release(profile_id=profile_id, title="Undated")
    old = make_release(profile_id=profile_id, title="Old", release_date=date(2001, 1, 1))
    new = make_release(profile_id=profile_id, title="New", release_date=date(2022, 1, 1))
    other = make_release(title="Someone else")
    for release in (undated, old, new, other):
        repo.add(release)
    sqlite_session.commit()

    listed = repo.list_for_profile(profile_id)

    assert [release.title for release in listed] == ["New", "Old", "Undated"]
    assert repo.count_for_profile(profile_id) == 3


def test_link_sets_are_replaced_wholesale(sqlite_session: Session) -> None:
    repo = SqlAlchemyDspLinkRepository(sqlite_session)
    owner_id = uuid4()
    repo.replace_links(EntityType.RELEASE, owner_id, [make_link("spotify"), make_link("deezer")])
    sqlite_session.commit()

    repo.replace_links(EntityType.RELEASE, owner_id, [make_link("youtube")])
    sqlite_session.commit()

    assert [link.provider for link in repo.links_for(EntityType.RELEASE, owner_id)] == ["youtube"]
    assert repo.links_for(EntityType.TRACK, owner_id) == ()


def test_count_releases_with_provider(sqlite_session: Session) -> None:
    releases = SqlAlchemyReleaseRepository(sqlite_session)
    profile_id = uuid4()
    releases.add(make_release(profile_id=profile_id, links=[make_link("spotify")]))
    releases.add(
        make_release(profile_id=profile_id, links=[make_link("spotify"), make_link("deezer")])
    )
    releases.add(make_release(profile_id=profile_id))
    releases.add(make_release(links=[make_link("spotify")]))
    sqlite_session.commit()

    assert releases.links.count_releases_with_provider(profile_id, "spotify") == 2
    assert releases.links.count_releases_with_provider(profile_id, "deezer") == 1
    assert releases.links.count_releases_with_provider(profile_id, "tidal") == 0


def test_active_and_rejected_match_queries(sqlite_session: Session) -> None:
    repo = SqlAlchemyArtistMatchRepository(sqlite_session)
    profile_id = uuid4()
    rejected = make_match(profile_id=profile_id, status=MatchStatus.REJECTED)
    active = make_match(profile_id=profile_id, external_artist_id="artist-2")
    repo.add(rejected)
    repo.add(active)
    sqlite_session.commit()

    found = repo.get_active(profile_id, "deezer")
    assert found is not None
    assert found.id == active.id
    assert repo.get_active(profile_id, "spotify") is None
    assert repo.rejected_external_ids(profile_id, "deezer") == {"artist-1"}


def test_transition_is_conditional_on_current_status(sqlite_session: Session) -> None:
    repo = SqlAlchemyArtistMatchRepository(sqlite_session)
    match = make_match()
    repo.add(match)
    sqlite_session.commit()
    at = datetime(2024, 3, 1, tzinfo=UTC)

    applied = repo.transition(
        match.id,
        from_statuses={MatchStatus.SUGGESTED},
        to_status=MatchStatus.CONFIRMED,
        at=at,
    )
    repeated = repo.transition(
        match.id,
        from_statuses={MatchStatus.SUGGESTED},
        to_status=MatchStatus.CONFIRMED,
        at=at,
    )
    sqlite_session.commit()

    assert applied
    assert not repeated
    stored = repo.get(match.id)
    assert stored is not None
    assert stored.status is MatchStatus.CONFIRMED
    assert stored.confirmed_at == at
    assert stored.updated_at == at


def test_match_breakdown_round_trips(sqlite_session: Session) -> None:
    repo = SqlAlchemyArtistMatchRepository(sqlite_session)
    match = make_match()
    match.breakdown = {"isrc_match": 0.9, "name_similarity": 0.5}
    repo.add(match)
    sqlite_session.commit()
    sqlite_session.expunge_all()

    stored = repo.get(match.id)

    assert stored is not None
    assert stored.breakdown == {"isrc_match": 0.9, "name_similarity": 0.5}
