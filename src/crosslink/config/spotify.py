"""Spotify configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_env_var, require_env_vars

DEFAULT_SPOTIFY_MARKET = "US"


@dataclass(frozen=True)
class SpotifyConfig:
    client_id: str
    client_secret: str
    market: str = DEFAULT_SPOTIFY_MARKET


def get_spotify_config() -> SpotifyConfig:
    values = require_env_vars(("SPOTIFY_CLIENT_ID", "SPOTIFY_CLIENT_SECRET"))
    return SpotifyConfig(
        client_id=values["SPOTIFY_CLIENT_ID"],
        client_secret=values["SPOTIFY_CLIENT_SECRET"],
        market=optional_env_var("SPOTIFY_MARKET") or DEFAULT_SPOTIFY_MARKET,
    )
