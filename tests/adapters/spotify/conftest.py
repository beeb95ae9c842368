"""Shared fixtures for Spotify adapter tests."""

from __future__ import annotations

import pytest

from crosslink.adapters.spotify.client import SpotifyClient
from crosslink.config.spotify import SpotifyConfig
from tests.helpers.catalog import isrc
from tests.helpers.spotify import FakeSpotipyClient, artist_payload, track_payload


@pytest.fixture
def spotify_config() -> SpotifyConfig:
    return SpotifyConfig(client_id="x", client_secret="y", market="DE")  # noqa: S106


@pytest.fixture
def fake_spotify_client() -> FakeSpotipyClient:
    main = artist_payload("sp-1", "Example Artist")
    guest = artist_payload("sp-2", "Guest")
    return FakeSpotipyClient(
        tracks={
            isrc(1): [track_payload(isrc(1), main, guest)],
            # fuzzy search may return tracks with other ISRCs
            isrc(2): [track_payload(isrc(9), main), track_payload(isrc(2).lower(), main)],
        },
        artists={
            "sp-1": artist_payload("sp-1", "Example Artist", followers=1200, genres=["indie"]),
        },
    )


@pytest.fixture
def spotify_client(
    spotify_config: SpotifyConfig, fake_spotify_client: FakeSpotipyClient
) -> SpotifyClient:
    return SpotifyClient(
        config=spotify_config,
        client=fake_spotify_client,  # type: ignore[arg-type]
    )
