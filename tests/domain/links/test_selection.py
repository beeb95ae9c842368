from __future__ import annotations

from crosslink.domain.links import DEFAULT_PROVIDER_PREFERENCE, pick_link, resolve_redirect
from crosslink.domain.model import LinkSource, ProviderKey
from tests.helpers.catalog import make_link


def test_default_preference_starts_with_spotify_and_has_no_duplicates() -> None:
    assert DEFAULT_PROVIDER_PREFERENCE[0] is ProviderKey.SPOTIFY
    assert len(set(DEFAULT_PROVIDER_PREFERENCE)) == len(DEFAULT_PROVIDER_PREFERENCE)


def test_pick_link_follows_default_preference() -> None:
    links = [make_link("deezer"), make_link("apple_music"), make_link("tidal")]

    picked = pick_link(links)

    assert picked is not None
    assert picked.provider == "apple_music"


def test_pick_link_ignores_confidence() -> None:
    links = [
        make_link("tidal", confidence=1.0),
        make_link("spotify", source=LinkSource.SEARCH, confidence=0.3),
    ]

    picked = pick_link(links)

    assert picked is not None
    assert picked.provider == "spotify"


def test_pick_link_uses_custom_preference() -> None:
    links = [make_link("spotify"), make_link("deezer")]

    picked = pick_link(links, ("bandcamp", ProviderKey.DEEZER, "spotify"))

    assert picked is not None
    assert picked.provider == "deezer"


def test_pick_link_returns_none_when_no_preferred_provider_is_linked() -> None:
    assert pick_link([]) is None
    assert pick_link([make_link("musicbrainz")]) is None
    assert pick_link([make_link("spotify")], ()) is None


def test_provider_override_bypasses_preference() -> None:
    links = [make_link("spotify"), make_link("bandcamp")]

    picked = resolve_redirect(links, provider_override="BandCamp")

    assert picked is not None
    assert picked.provider == "bandcamp"


def test_unknown_override_provider_resolves_to_nothing() -> None:
    links = [make_link("spotify")]

    assert resolve_redirect(links, provider_override="tidal") is None


def test_empty_override_falls_back_to_preference() -> None:
    links = [make_link("deezer"), make_link("spotify")]

    picked = resolve_redirect(links, provider_override="", preference=("deezer",))

    assert picked is not None
    assert picked.provider == "deezer"
