from __future__ import annotations

from crosslink.domain.links import merge_link_sets, merge_links
from crosslink.domain.model import LinkSource
from tests.helpers.catalog import isrc, make_link


def test_merge_of_empty_inputs_is_empty() -> None:
    assert merge_links([], []) == []


def test_canonical_beats_search_regardless_of_confidence() -> None:
    base = [make_link("spotify", source=LinkSource.SEARCH, confidence=0.6)]
    overrides = [
        make_link("spotify", source=LinkSource.CANONICAL, confidence=0.55, identifier=isrc(1))
    ]

    merged = merge_links(base, overrides)

    assert merged == overrides


def test_canonical_beats_search_from_either_side() -> None:
    canonical = make_link("deezer", source=LinkSource.CANONICAL, confidence=0.1)
    search = make_link("deezer", source=LinkSource.SEARCH, confidence=0.99)

    assert merge_links([canonical], [search]) == [canonical]
    assert merge_links([search], [canonical]) == [canonical]


def test_user_override_beats_canonical() -> None:
    canonical = make_link("tidal", source=LinkSource.CANONICAL, identifier=isrc(1))
    override = make_link("tidal", source=LinkSource.OVERRIDE, confidence=0.2)

    assert merge_links([canonical], [override]) == [override]
    assert merge_links([override], [canonical]) == [override]


def test_same_source_prefers_verified_identifier_over_confidence() -> None:
    with_isrc = make_link("spotify", confidence=0.4, identifier=isrc(7))
    without = make_link("spotify", confidence=0.9)
    malformed = make_link("spotify", confidence=0.95, identifier="not-an-isrc")

    assert merge_links([without, malformed], [with_isrc]) == [with_isrc]
    assert merge_links([with_isrc], [without, malformed]) == [with_isrc]


def test_same_source_then_prefers_higher_confidence() -> None:
    low = make_link("youtube", source=LinkSource.SEARCH, confidence=0.3)
    high = make_link("youtube", source=LinkSource.SEARCH, confidence=0.5)

    assert merge_links([low, high], []) == [high]


def test_full_ties_prefer_overrides_then_base_order() -> None:
    first_override = make_link("soundcloud", url="https://a")
    second_override = make_link("soundcloud", url="https://b")
    base = make_link("soundcloud", url="https://c")

    assert merge_links([base], [first_override, second_override]) == [first_override]
    assert merge_links([make_link("soundcloud", url="https://d"), base], []) == [
        make_link("soundcloud", url="https://d")
    ]


def test_single_side_providers_pass_through_unchanged() -> None:
    spotify = make_link("spotify", source=LinkSource.SEARCH, confidence=0.2)
    deezer = make_link("deezer")

    assert merge_links([spotify], [deezer]) == [deezer, spotify]


def test_output_has_one_link_per_provider_in_first_seen_order() -> None:
    base = [
        make_link("spotify"),
        make_link("deezer"),
        make_link("spotify", source=LinkSource.SEARCH, confidence=0.9),
    ]
    overrides = [make_link("tidal"), make_link("deezer", source=LinkSource.OVERRIDE)]

    merged = merge_links(base, overrides)

    assert [link.provider for link in merged] == ["tidal", "deezer", "spotify"]
    assert merged[1].source is LinkSource.OVERRIDE


def test_merge_is_idempotent() -> None:
    base = [
        make_link("spotify", source=LinkSource.SEARCH, confidence=0.6),
        make_link("deezer", confidence=0.7, identifier=isrc(2)),
        make_link("tidal", source=LinkSource.SEARCH),
    ]
    overrides = [
        make_link("spotify", confidence=0.55, identifier=isrc(1)),
        make_link("deezer", confidence=0.9),
        make_link("apple_music", source=LinkSource.OVERRIDE),
    ]

    once = merge_links(base, overrides)

    assert merge_links(once, []) == once
    assert merge_links(base, overrides) == once


def test_merge_link_sets_gives_earlier_sets_priority_on_ties() -> None:
    first = make_link("spotify", url="https://first")
    second = make_link("spotify", url="https://second")
    search = make_link("deezer", source=LinkSource.SEARCH, confidence=0.3)

    merged = merge_link_sets([[first], [second, search]])

    assert merged == [first, search]
