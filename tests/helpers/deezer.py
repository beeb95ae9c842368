"""Mock transport helpers and payload builders for Deezer tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx

from crosslink.adapters.http_resilience import CatalogHttpClient

if TYPE_CHECKING:
    from collections.abc import Callable

    from crosslink.config.http_resilience import ProviderHttpConfig

    type Handler = Callable[[httpx.Request], httpx.Response]


def make_client_factory(handler: Handler) -> Callable[[ProviderHttpConfig], CatalogHttpClient]:
    async def async_handler(request: httpx.Request) -> httpx.Response:
        return handler(request)

    def factory(http: ProviderHttpConfig) -> CatalogHttpClient:
        return CatalogHttpClient(http, transport=httpx.MockTransport(async_handler))

    return factory


def track_payload(
    isrc: str,
    *,
    track_id: int = 3135556,
    artist_id: int = 27,
    artist_name: str = "Daft Punk",
    upc: str | None = "724384960650",
) -> dict[str, object]:
    return {
        "id": track_id,
        "title": "Harder, Better, Faster, Stronger",
        "link": f"https://www.deezer.com/track/{track_id}",
        "isrc": isrc,
        "artist": {
            "id": artist_id,
            "name": artist_name,
            "link": f"https://www.deezer.com/artist/{artist_id}",
            "picture_big": "https://cdn.example/artist.jpg",
            "nb_fan": 4_500_000,
        },
        "contributors": [
            {"id": artist_id, "name": artist_name},
            {"id": 99, "name": "Featured Guest"},
        ],
        "album": {
            "id": 302127,
            "title": "Discovery",
            "link": "https://www.deezer.com/album/302127",
            "upc": upc,
        },
        "explicit_lyrics": False,
    }
