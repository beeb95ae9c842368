"""Smart Link Address Builder.

Slugs embed the owning profile id, so they are unique without a database lookup:
``{release_id}--{profile_id}``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Final
from urllib.parse import parse_qs, urlsplit

from crosslink.domain.model import provider_name

if TYPE_CHECKING:
    from uuid import UUID

    from crosslink.domain.model import ProviderName

SLUG_SEPARATOR: Final = "--"
SMART_LINK_PREFIX: Final = "/r/"
PROVIDER_OVERRIDE_PARAM: Final = "dsp"


@dataclass(frozen=True, slots=True)
class SlugParts:
    release_id: str
    profile_id: str


@dataclass(frozen=True, slots=True)
class SmartLinkAddress:
    slug: SlugParts
    provider_override: str | None = None


def build_release_slug(profile_id: UUID | str, release_id: UUID | str) -> str:
    return f"{release_id}{SLUG_SEPARATOR}{profile_id}"


def build_smart_link_path(slug: str, provider_override: ProviderName | None = None) -> str:
    path = f"{SMART_LINK_PREFIX}{slug}"
    if provider_override:
        return f"{path}?{PROVIDER_OVERRIDE_PARAM}={provider_name(provider_override)}"
    return path


def build_smart_link_url(
    base_url: str,
    slug: str,
    provider_override: ProviderName | None = None,
) -> str:
    return base_url.rstrip("/") + build_smart_link_path(slug, provider_override)


def parse_release_slug(slug: str) -> SlugParts | None:
    """Split a slug at its last separator; ``None`` if either half is empty."""
    release_id, separator, profile_id = slug.strip().rpartition(SLUG_SEPARATOR)
    if not separator or not release_id or not profile_id:
        return None
    return SlugParts(release_id=release_id, profile_id=profile_id)


def parse_smart_link_path(path: str) -> SmartLinkAddress | None:
    """Parse ``/r/{slug}`` or ``/r/{slug}?dsp={provider}`` (a full URL is accepted too)."""
    parts = urlsplit(path.strip())
    if not parts.path.startswith(SMART_LINK_PREFIX):
        return None
    slug_text = parts.path.removeprefix(SMART_LINK_PREFIX).rstrip("/")
    if not slug_text or "/" in slug_text:
        return None
    slug = parse_release_slug(slug_text)
    if slug is None:
        return None
    override_values = parse_qs(parts.query).get(PROVIDER_OVERRIDE_PARAM, [])
    override = provider_name(override_values[0]) if override_values else None
    return SmartLinkAddress(slug=slug, provider_override=override or None)
