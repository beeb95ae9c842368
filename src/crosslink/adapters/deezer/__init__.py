"""Deezer adapter."""

from __future__ import annotations

from .client import DeezerAPIError, DeezerClient
from .fetcher import DeezerCatalogFetcher

__all__ = ["DeezerAPIError", "DeezerCatalogFetcher", "DeezerClient"]
