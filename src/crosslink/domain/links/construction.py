"""Build link candidates from catalog hits and provider search pages."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final
from urllib.parse import quote, quote_plus

from crosslink.domain.model import (
    DSPLink,
    LinkSource,
    ProviderKey,
    normalize_isrc,
    normalize_upc,
    provider_name,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from crosslink.domain.model import ProviderName
    from crosslink.domain.ports.fetching import CatalogTrackHit

CANONICAL_CONFIDENCE: Final = 1.0
UNVERIFIED_CANONICAL_CONFIDENCE: Final = 0.9
SEARCH_CONFIDENCE: Final = 0.3
DEFAULT_STOREFRONT: Final = "us"

# Providers that get a search page when no canonical link is known. Spotify is always
# linked at import time; bandcamp/beatport search pages are not useful destinations.
SEARCH_FALLBACK_PROVIDERS: Final[tuple[ProviderKey, ...]] = (
    ProviderKey.APPLE_MUSIC,
    ProviderKey.YOUTUBE,
    ProviderKey.SOUNDCLOUD,
    ProviderKey.DEEZER,
    ProviderKey.AMAZON_MUSIC,
    ProviderKey.TIDAL,
    ProviderKey.PANDORA,
    ProviderKey.NAPSTER,
    ProviderKey.AUDIOMACK,
    ProviderKey.QOBUZ,
    ProviderKey.ANGHAMI,
    ProviderKey.BOOMPLAY,
    ProviderKey.IHEARTRADIO,
    ProviderKey.TIKTOK,
)

# {q} is query-string encoded, {p} is path-segment encoded
_SEARCH_TEMPLATES: Final[dict[str, str]] = {
    ProviderKey.SPOTIFY: "https://open.spotify.com/search/{p}",
    ProviderKey.APPLE_MUSIC: "https://music.apple.com/{storefront}/search?term={q}",
    ProviderKey.YOUTUBE_MUSIC: "https://music.youtube.com/search?q={q}",
    ProviderKey.YOUTUBE: "https://www.youtube.com/results?search_query={q}",
    ProviderKey.SOUNDCLOUD: "https://soundcloud.com/search?q={q}",
    ProviderKey.DEEZER: "https://www.deezer.com/search/{p}",
    ProviderKey.AMAZON_MUSIC: "https://music.amazon.com/search/{p}",
    ProviderKey.TIDAL: "https://listen.tidal.com/search?q={q}",
    ProviderKey.PANDORA: "https://www.pandora.com/search/{p}/all",
    ProviderKey.NAPSTER: "https://web.napster.com/search?query={q}",
    ProviderKey.AUDIOMACK: "https://audiomack.com/search?q={q}",
    ProviderKey.QOBUZ: "https://www.qobuz.com/{storefront}-en/search?q={q}",
    ProviderKey.ANGHAMI: "https://play.anghami.com/search/{p}",
    ProviderKey.BOOMPLAY: "https://www.boomplay.com/search/default/{p}",
    ProviderKey.IHEARTRADIO: "https://www.iheart.com/search/?q={q}",
    ProviderKey.TIKTOK: "https://www.tiktok.com/search?q={q}",
}


def canonical_links_from_hits(
    hits: Iterable[CatalogTrackHit],
    provider: ProviderName,
    *,
    level: str = "release",
) -> list[DSPLink]:
    """Turn catalog hits into canonical links, one per distinct URL.

    ``level="release"`` links the album page, ``level="track"`` the track page.
    """
    links: list[DSPLink] = []
    seen: set[str] = set()
    for hit in hits:
        if level == "release":
            url = hit.album_url
            external_id = hit.album_id
            identifier = normalize_upc(hit.album_upc) or normalize_isrc(hit.isrc)
        else:
            url = hit.track_url
            external_id = hit.track_id
            identifier = normalize_isrc(hit.isrc)
        if not url or url in seen:
            continue
        seen.add(url)
        verified = identifier is not None
        links.append(
            DSPLink(
                provider=provider,
                url=url,
                source=LinkSource.CANONICAL,
                confidence=CANONICAL_CONFIDENCE if verified else UNVERIFIED_CANONICAL_CONFIDENCE,
                identifier=identifier,
                external_id=external_id,
            )
        )
    return links


def build_search_url(
    provider: ProviderName,
    artist_name: str,
    title: str,
    *,
    storefront: str = DEFAULT_STOREFRONT,
) -> str | None:
    """Provider search page for ``artist title``; ``None`` for providers without one."""
    template = _SEARCH_TEMPLATES.get(provider_name(provider))
    if template is None:
        return None
    text = " ".join(part.strip() for part in (artist_name, title) if part and part.strip())
    if not text:
        return None
    return template.format(
        q=quote_plus(text),
        p=quote(text, safe=""),
        storefront=storefront.lower(),
    )


def search_fallback_links(
    artist_name: str,
    title: str,
    *,
    exclude: Iterable[ProviderName] = (),
    providers: Sequence[ProviderName] = SEARCH_FALLBACK_PROVIDERS,
    storefront: str = DEFAULT_STOREFRONT,
) -> list[DSPLink]:
    """Low-confidence search links for every fallback provider not in ``exclude``."""
    excluded = {provider_name(provider) for provider in exclude}
    links: list[DSPLink] = []
    for provider in providers:
        key = provider_name(provider)
        if key in excluded:
            continue
        url = build_search_url(key, artist_name, title, storefront=storefront)
        if url is None:
            continue
        links.append(
            DSPLink(
                provider=key,
                url=url,
                source=LinkSource.SEARCH,
                confidence=SEARCH_CONFIDENCE,
            )
        )
    return links
