"""Link merging, redirect selection and smart link addressing."""

from __future__ import annotations

from crosslink.domain.links.addresses import (
    SlugParts,
    SmartLinkAddress,
    build_release_slug,
    build_smart_link_path,
    build_smart_link_url,
    parse_release_slug,
    parse_smart_link_path,
)
from crosslink.domain.links.construction import (
    SEARCH_FALLBACK_PROVIDERS,
    build_search_url,
    canonical_links_from_hits,
    search_fallback_links,
)
from crosslink.domain.links.merge import merge_link_sets, merge_links
from crosslink.domain.links.selection import (
    DEFAULT_PROVIDER_PREFERENCE,
    pick_link,
    resolve_redirect,
)

__all__ = [
    "DEFAULT_PROVIDER_PREFERENCE",
    "SEARCH_FALLBACK_PROVIDERS",
    "SlugParts",
    "SmartLinkAddress",
    "build_release_slug",
    "build_search_url",
    "build_smart_link_path",
    "build_smart_link_url",
    "canonical_links_from_hits",
    "merge_link_sets",
    "merge_links",
    "parse_release_slug",
    "parse_smart_link_path",
    "pick_link",
    "resolve_redirect",
]
