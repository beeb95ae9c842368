"""Spotify adapter."""

from __future__ import annotations

from .client import SpotifyClient
from .fetcher import SpotifyCatalogFetcher

__all__ = ["SpotifyCatalogFetcher", "SpotifyClient"]
