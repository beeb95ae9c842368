from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from requests.exceptions import ConnectionError as RequestsConnectionError
from spotipy.exceptions import SpotifyException

from crosslink.adapters.spotify import SpotifyCatalogFetcher, SpotifyClient
from crosslink.domain.model import CatalogFetchError
from crosslink.domain.ports.fetching import CatalogFetcher
from tests.helpers.catalog import isrc
from tests.helpers.spotify import FakeSpotipyClient

if TYPE_CHECKING:
    from crosslink.config.spotify import SpotifyConfig


def test_fetcher_satisfies_port(
    spotify_config: SpotifyConfig, spotify_client: SpotifyClient
) -> None:
    fetcher = SpotifyCatalogFetcher(config=spotify_config, client=spotify_client)

    assert isinstance(fetcher, CatalogFetcher)
    assert fetcher.provider == "spotify"


def test_lookup_keeps_only_tracks_carrying_the_isrc(
    spotify_config: SpotifyConfig,
    spotify_client: SpotifyClient,
    fake_spotify_client: FakeSpotipyClient,
) -> None:
    fetcher = SpotifyCatalogFetcher(config=spotify_config, client=spotify_client)

    lookup = fetcher.lookup_isrcs([isrc(1), isrc(2), isrc(3)])

    assert fake_spotify_client.queries == [f"isrc:{isrc(n)}" for n in (1, 2, 3)]
    assert lookup.matched_isrcs == {isrc(1), isrc(2)}
    (second,) = lookup.hits[isrc(2)]
    assert second.track_id == f"track-{isrc(2).lower()}"


def test_lookup_enriches_artists_once(
    spotify_config: SpotifyConfig,
    spotify_client: SpotifyClient,
    fake_spotify_client: FakeSpotipyClient,
) -> None:
    fetcher = SpotifyCatalogFetcher(config=spotify_config, client=spotify_client)

    lookup = fetcher.lookup_isrcs([isrc(1), isrc(2)])

    assert fake_spotify_client.artist_batches == [["sp-1", "sp-2"]]
    (hit,) = lookup.hits[isrc(1)]
    main, guest = hit.artists
    assert main.followers == 1200
    assert main.genres == ("indie",)
    assert main.image_url == "https://i.scdn.co/sp-1.jpg"
    assert guest.followers is None
    assert hit.album_upc == "886445550455"
    assert hit.album_url == "https://open.spotify.com/album/album-1"


def test_artist_details_can_be_skipped(
    spotify_config: SpotifyConfig,
    spotify_client: SpotifyClient,
    fake_spotify_client: FakeSpotipyClient,
) -> None:
    fetcher = SpotifyCatalogFetcher(
        config=spotify_config, client=spotify_client, include_artist_details=False
    )

    lookup = fetcher.lookup_isrcs([isrc(1)])

    assert fake_spotify_client.artist_batches == []
    (hit,) = lookup.hits[isrc(1)]
    assert hit.artists[0].followers is None


@pytest.mark.parametrize(
    "error",
    [
        SpotifyException(429, -1, "rate limited"),
        RequestsConnectionError("network down"),
    ],
)
def test_provider_errors_become_catalog_fetch_errors(
    spotify_config: SpotifyConfig, error: Exception
) -> None:
    fake = FakeSpotipyClient({}, {}, error=error)
    client = SpotifyClient(config=spotify_config, client=fake)  # type: ignore[arg-type]
    fetcher = SpotifyCatalogFetcher(config=spotify_config, client=client)

    with pytest.raises(CatalogFetchError) as excinfo:
        fetcher.lookup_isrcs([isrc(1)])
    assert excinfo.value.provider == "spotify"
