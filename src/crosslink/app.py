"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import timedelta
from logging import getLogger
from typing import TYPE_CHECKING
from uuid import UUID

from crosslink.adapters.locking import KeyedDiscoveryLock
from crosslink.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyMatchingUnitOfWork,
    is_started,
    startup,
)
from crosslink.config.matching import get_discovery_policy
from crosslink.config.smart_links import get_smart_link_config
from crosslink.domain.links import (
    build_release_slug,
    build_smart_link_url,
    canonical_links_from_hits,
    merge_links,
    parse_smart_link_path,
    resolve_redirect,
    search_fallback_links,
)
from crosslink.domain.matching import (
    SyncSignals,
    TransitionKind,
    confirm_match,
    discover_artist_match,
    project_sync_state,
    reject_match,
)
from crosslink.domain.model import (
    CatalogFetchError,
    DSPLink,
    LinkSource,
    MatchNotFoundError,
    MatchStatus,
    ProviderKey,
    provider_name,
    utc_now,
)
from crosslink.domain.ports.unit_of_work import MatchingUnitOfWork

if TYPE_CHECKING:
    import threading
    from collections.abc import Sequence

    from crosslink.config.smart_links import SmartLinkConfig
    from crosslink.domain.matching import (
        DiscoveryPolicy,
        DiscoveryResult,
        HomeArtistProfile,
        SyncProjection,
        TransitionResult,
    )
    from crosslink.domain.model import ArtistMatch, ProviderName, Release
    from crosslink.domain.ports.fetching import CatalogFetcher, CatalogLookup

UnitOfWorkFactory = Callable[[], MatchingUnitOfWork]

log = getLogger(__name__)

DISCOVERY_LOCK = KeyedDiscoveryLock()
OVERRIDE_CONFIDENCE = 1.0


@dataclass(frozen=True, slots=True)
class SmartLinkResolution:
    release: Release
    link: DSPLink | None
    provider_override: str | None = None


def _unit_of_work_factory(factory: UnitOfWorkFactory | None) -> UnitOfWorkFactory:
    if factory is not None:
        return factory
    if not is_started():
        startup()
    return SqlAlchemyMatchingUnitOfWork


def build_catalog_fetcher(provider: ProviderName) -> CatalogFetcher:
    """Catalog fetcher for a provider we can query by ISRC."""

    key = provider_name(provider)
    if key == ProviderKey.DEEZER:
        from crosslink.adapters.deezer import DeezerCatalogFetcher  # noqa: PLC0415

        return DeezerCatalogFetcher()
    if key == ProviderKey.SPOTIFY:
        from crosslink.adapters.spotify import SpotifyCatalogFetcher  # noqa: PLC0415

        return SpotifyCatalogFetcher()
    raise ValueError(f"No catalog fetcher available for provider {key!r}")


def run_discovery(  # noqa: PLR0913
    *,
    profile_id: UUID,
    provider: ProviderName | None = None,
    fetcher: CatalogFetcher | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    policy: DiscoveryPolicy | None = None,
    home_artist: HomeArtistProfile | None = None,
    cancel_event: threading.Event | None = None,
    timeout_seconds: float | None = None,
    lock: KeyedDiscoveryLock | None = None,
    enrich_on_auto_confirm: bool = True,
) -> DiscoveryResult:
    """Run artist match discovery for one profile against one provider.

    A match written as auto-confirmed is followed by a link enrichment pass over
    the profile's releases with the same fetcher.
    """

    if fetcher is None:
        if provider is None:
            raise ValueError("Either provider or fetcher is required")
        fetcher = build_catalog_fetcher(provider)
    factory = _unit_of_work_factory(unit_of_work_factory)
    deadline = utc_now() + timedelta(seconds=timeout_seconds) if timeout_seconds else None
    log.info(
        "Starting discovery: profile=%s, provider=%s, timeout=%s",
        profile_id,
        fetcher.provider,
        timeout_seconds,
    )
    result = discover_artist_match(
        profile_id=profile_id,
        fetcher=fetcher,
        unit_of_work_factory=factory,
        lock=lock or DISCOVERY_LOCK,
        policy=policy or get_discovery_policy(),
        home_artist=home_artist,
        cancel_event=cancel_event,
        deadline=deadline,
    )
    log.info("Finished discovery: outcome=%s, provider=%s", result.outcome, result.provider)
    if (
        enrich_on_auto_confirm
        and result.wrote
        and result.match is not None
        and result.match.status is MatchStatus.AUTO_CONFIRMED
    ):
        enrich_profile_links(
            profile_id,
            fetchers=[fetcher],
            unit_of_work_factory=factory,
            artist_name=home_artist.name if home_artist is not None else None,
        )
    return result


def confirm(
    match_id: UUID,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    confirmed_by: UUID | None = None,
) -> TransitionResult:
    result = confirm_match(
        match_id,
        unit_of_work_factory=_unit_of_work_factory(unit_of_work_factory),
        confirmed_by=confirmed_by,
    )
    return _raise_if_missing(result)


def reject(
    match_id: UUID,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    reason: str | None = None,
) -> TransitionResult:
    result = reject_match(
        match_id,
        unit_of_work_factory=_unit_of_work_factory(unit_of_work_factory),
        reason=reason,
    )
    return _raise_if_missing(result)


def _raise_if_missing(result: TransitionResult) -> TransitionResult:
    if result.kind is TransitionKind.NOT_FOUND:
        raise MatchNotFoundError(result.match_id)
    return result


def resolve_smart_link(
    path: str,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    preference: Sequence[ProviderName] | None = None,
    config: SmartLinkConfig | None = None,
) -> SmartLinkResolution | None:
    """Resolve ``/r/{slug}[?dsp=provider]`` to a release and its redirect target.

    ``None`` means the address does not name a known release of that profile.
    """

    address = parse_smart_link_path(path)
    if address is None:
        return None
    release_id = _parse_uuid(address.slug.release_id)
    profile_id = _parse_uuid(address.slug.profile_id)
    if release_id is None or profile_id is None:
        return None

    with _unit_of_work_factory(unit_of_work_factory)() as uow:
        release = uow.repositories.releases.get(release_id)
    if release is None or release.profile_id != profile_id:
        return None

    effective_preference = (
        preference
        if preference is not None
        else (config or get_smart_link_config()).provider_preference
    )
    link = resolve_redirect(
        release.links,
        provider_override=address.provider_override,
        preference=effective_preference,
    )
    return SmartLinkResolution(
        release=release,
        link=link,
        provider_override=address.provider_override,
    )


def smart_link_url(
    release: Release,
    *,
    provider_override: ProviderName | None = None,
    config: SmartLinkConfig | None = None,
) -> str:
    base_url = (config or get_smart_link_config()).base_url
    slug = build_release_slug(release.profile_id, release.id)
    return build_smart_link_url(base_url, slug, provider_override)


def enrich_release_links(  # noqa: PLR0913
    release_id: UUID,
    *,
    fetchers: Sequence[CatalogFetcher],
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    artist_name: str | None = None,
    include_search_fallbacks: bool = True,
    storefront: str = "us",
) -> list[DSPLink]:
    """Look up a release's ISRCs on each fetcher and persist the merged link sets.

    Providers that fail are skipped; search fallbacks fill providers still missing.
    """

    factory = _unit_of_work_factory(unit_of_work_factory)
    with factory() as uow:
        release = uow.repositories.releases.get(release_id)
        if release is None:
            raise ValueError(f"Release {release_id} does not exist")
        isrcs = release.isrcs()

        lookups: list[CatalogLookup] = []
        for fetcher in fetchers if isrcs else ():
            try:
                lookups.append(fetcher.lookup_isrcs(isrcs))
            except CatalogFetchError as exc:
                log.warning("Skipping %s for release %s: %s", fetcher.provider, release_id, exc)

        canonical: list[DSPLink] = []
        for lookup in lookups:
            canonical.extend(canonical_links_from_hits(lookup.all_hits(), lookup.provider))
        merged = merge_links(release.links, canonical)
        if include_search_fallbacks:
            fallbacks = search_fallback_links(
                artist_name or "",
                release.title,
                exclude=[link.provider for link in merged],
                storefront=storefront,
            )
            merged = merge_links(fallbacks, merged)
        uow.repositories.links.replace_links(release.entity_type, release.id, merged)

        for track in release.tracks:
            isrc = track.valid_isrc
            if isrc is None:
                continue
            track_links: list[DSPLink] = []
            for lookup in lookups:
                track_links.extend(
                    canonical_links_from_hits(
                        lookup.hits.get(isrc, ()), lookup.provider, level="track"
                    )
                )
            if track_links:
                merged_track = merge_links(track.links, track_links)
                uow.repositories.links.replace_links(track.entity_type, track.id, merged_track)
        uow.commit()

    log.info("Release %s now has %d provider links", release_id, len(merged))
    return merged


def enrich_profile_links(
    profile_id: UUID,
    *,
    fetchers: Sequence[CatalogFetcher],
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    artist_name: str | None = None,
    include_search_fallbacks: bool = False,
) -> int:
    """Run ``enrich_release_links`` for every release of a profile; returns the release count."""

    factory = _unit_of_work_factory(unit_of_work_factory)
    with factory() as uow:
        releases = uow.repositories.releases.list_for_profile(profile_id)
        release_ids = [release.id for release in releases]
    for release_id in release_ids:
        enrich_release_links(
            release_id,
            fetchers=fetchers,
            unit_of_work_factory=factory,
            artist_name=artist_name,
            include_search_fallbacks=include_search_fallbacks,
        )
    log.info("Enriched %d releases of profile %s", len(release_ids), profile_id)
    return len(release_ids)


def override_release_link(
    release_id: UUID,
    *,
    provider: ProviderName,
    url: str,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> list[DSPLink]:
    """Apply a user-supplied link; it wins over catalog and search links."""

    override = DSPLink(
        provider=provider,
        url=url,
        source=LinkSource.OVERRIDE,
        confidence=OVERRIDE_CONFIDENCE,
    )
    with _unit_of_work_factory(unit_of_work_factory)() as uow:
        release = uow.repositories.releases.get(release_id)
        if release is None:
            raise ValueError(f"Release {release_id} does not exist")
        merged = merge_links(release.links, [override])
        uow.repositories.links.replace_links(release.entity_type, release.id, merged)
        uow.commit()
    log.info("Override for %s set on release %s", override.provider, release_id)
    return merged


def sync_state(
    profile_id: UUID,
    provider: ProviderName,
    *,
    home_connected: bool,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    lock: KeyedDiscoveryLock | None = None,
) -> SyncProjection:
    """Presentation state of a profile's match for ``provider``."""

    key = provider_name(provider)
    with _unit_of_work_factory(unit_of_work_factory)() as uow:
        releases_count = uow.repositories.releases.count_for_profile(profile_id)
        match = uow.repositories.matches.get_active(profile_id, key) or _latest_rejected(
            uow.repositories.matches.list_for_profile(profile_id), key
        )
        with_links = uow.repositories.links.count_releases_with_provider(profile_id, key)
    return project_sync_state(
        SyncSignals.from_match(
            match,
            home_connected=home_connected,
            releases_count=releases_count,
            discovery_in_progress=(lock or DISCOVERY_LOCK).is_held(profile_id, key),
            releases_with_provider_link=with_links,
        )
    )


def _latest_rejected(matches: Sequence[ArtistMatch], provider: str) -> ArtistMatch | None:
    rejected = [
        match
        for match in matches
        if match.provider == provider and match.status is MatchStatus.REJECTED
    ]
    return max(rejected, key=lambda match: match.updated_at, default=None)


def _parse_uuid(value: str) -> UUID | None:
    try:
        return UUID(value)
    except ValueError:
        return None
