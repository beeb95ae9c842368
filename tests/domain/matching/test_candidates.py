from __future__ import annotations

from crosslink.domain.matching import group_hits_by_artist, is_compilation_artist
from tests.helpers.catalog import isrc, make_artist, make_hit


def test_hits_are_grouped_per_artist_in_first_seen_order() -> None:
    first = make_artist("a-1", "First")
    second = make_artist("a-2", "Second")
    hits = [
        make_hit(isrc(1), first),
        make_hit(isrc(2), second, first),
        make_hit(isrc(3), first),
    ]

    candidates = group_hits_by_artist(hits)

    assert [candidate.external_id for candidate in candidates] == ["a-1", "a-2"]
    assert candidates[0].isrcs == {isrc(1), isrc(2), isrc(3)}
    assert candidates[1].matching_isrc_count == 1


def test_repeated_isrc_counts_once() -> None:
    artist = make_artist()
    hits = [make_hit(isrc(1), artist), make_hit(isrc(1), artist, album_id="album-2")]

    (candidate,) = group_hits_by_artist(hits)

    assert candidate.matching_isrc_count == 1


def test_only_home_upcs_count_as_evidence() -> None:
    artist = make_artist()
    hits = [
        make_hit(isrc(1), artist, album_upc="012345678905"),
        make_hit(isrc(2), artist, album_upc="999999999999"),
        make_hit(isrc(3), artist, album_upc="not-a-upc"),
    ]

    (candidate,) = group_hits_by_artist(hits, home_upcs=["0-12345-67890-5"])

    assert candidate.upcs == {"012345678905"}
    assert candidate.matching_upc_count == 1


def test_only_queried_isrcs_count_and_are_stored_normalized() -> None:
    artist = make_artist()
    hits = [
        make_hit(isrc(1).lower(), artist),
        make_hit("US-ABC-24-00002", artist),
        make_hit(isrc(100), artist),
        make_hit("garbage", artist),
    ]

    (candidate,) = group_hits_by_artist(hits, queried_isrcs=[isrc(1), isrc(2), isrc(3)])

    assert candidate.isrcs == {isrc(1), isrc(2)}
    assert candidate.matching_isrc_count == 2


def test_artist_with_only_foreign_isrcs_is_not_a_candidate() -> None:
    hits = [make_hit(isrc(100), make_artist("a-1")), make_hit(isrc(1), make_artist("a-2"))]

    candidates = group_hits_by_artist(hits, queried_isrcs=[isrc(1)])

    assert [candidate.external_id for candidate in candidates] == ["a-2"]


def test_compilation_and_anonymous_artists_are_skipped() -> None:
    hits = [
        make_hit(isrc(1), make_artist("va", "Various Artists"), make_artist("", "Nobody")),
        make_hit(isrc(2), make_artist("real", "Real Artist")),
    ]

    candidates = group_hits_by_artist(hits)

    assert [candidate.external_id for candidate in candidates] == ["real"]


def test_is_compilation_artist() -> None:
    assert is_compilation_artist("VARIOUS ARTISTS")
    assert is_compilation_artist("Best Of Compilation Vol. 2")
    assert not is_compilation_artist("Various")
