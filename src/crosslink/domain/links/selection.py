"""Smart Listen Selector: pick the redirect target for a release."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from crosslink.domain.model import ProviderKey, provider_name

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from crosslink.domain.model import DSPLink, ProviderName

DEFAULT_PROVIDER_PREFERENCE: Final[tuple[ProviderKey, ...]] = (
    ProviderKey.SPOTIFY,
    ProviderKey.APPLE_MUSIC,
    ProviderKey.YOUTUBE_MUSIC,
    ProviderKey.YOUTUBE,
    ProviderKey.AMAZON_MUSIC,
    ProviderKey.TIDAL,
    ProviderKey.DEEZER,
    ProviderKey.SOUNDCLOUD,
    ProviderKey.BANDCAMP,
    ProviderKey.BEATPORT,
    ProviderKey.PANDORA,
    ProviderKey.NAPSTER,
    ProviderKey.AUDIOMACK,
    ProviderKey.QOBUZ,
    ProviderKey.ANGHAMI,
    ProviderKey.BOOMPLAY,
    ProviderKey.IHEARTRADIO,
    ProviderKey.TIKTOK,
)


def pick_link(
    links: Iterable[DSPLink],
    preference: Sequence[ProviderName] | None = None,
) -> DSPLink | None:
    """Return the link of the first preferred provider that has one.

    Confidence is deliberately ignored: the preference order is an operator choice.
    """
    by_provider: dict[str, DSPLink] = {}
    for link in links:
        by_provider.setdefault(link.provider, link)
    order = DEFAULT_PROVIDER_PREFERENCE if preference is None else preference
    for provider in order:
        link = by_provider.get(provider_name(provider))
        if link is not None:
            return link
    return None


def resolve_redirect(
    links: Iterable[DSPLink],
    *,
    provider_override: ProviderName | None = None,
    preference: Sequence[ProviderName] | None = None,
) -> DSPLink | None:
    """Resolve a smart link. An explicit provider override bypasses the preference order."""
    if provider_override:
        return pick_link(links, (provider_override,))
    return pick_link(links, preference)
