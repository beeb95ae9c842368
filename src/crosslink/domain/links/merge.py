"""Link Merge Resolver: one winning link per provider from overlapping candidate sets."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from crosslink.domain.model import LinkSource

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from crosslink.domain.model import DSPLink

# Higher wins. Canonical beats search whatever the confidence; user overrides beat both.
SOURCE_PRECEDENCE: Final[dict[LinkSource, int]] = {
    LinkSource.OVERRIDE: 2,
    LinkSource.CANONICAL: 1,
    LinkSource.SEARCH: 0,
}


def merge_links(
    base: Iterable[DSPLink],
    overrides: Iterable[DSPLink] = (),
) -> list[DSPLink]:
    """Merge candidate links into at most one link per provider.

    Per provider the winner is chosen by, in order: source precedence, presence of a
    well-formed ISRC/UPC, confidence, and finally first-seen position scanning
    ``overrides`` before ``base``. Output lists providers in that same first-seen order.
    """
    candidates = [*overrides, *base]
    winners: dict[str, tuple[tuple[int, int, float, int], DSPLink]] = {}
    for position, link in enumerate(candidates):
        rank = _rank(link, position)
        current = winners.get(link.provider)
        if current is None or rank > current[0]:
            winners[link.provider] = (rank, link)
    # dicts keep first insertion order even when the value is replaced
    return [link for _, link in winners.values()]


def merge_link_sets(link_sets: Sequence[Iterable[DSPLink]]) -> list[DSPLink]:
    """Fold several candidate sets; earlier sets take the ``overrides`` role."""
    merged: list[DSPLink] = []
    for links in reversed(link_sets):
        merged = merge_links(merged, links)
    return merged


def _rank(link: DSPLink, position: int) -> tuple[int, int, float, int]:
    return (
        SOURCE_PRECEDENCE[link.source],
        1 if link.has_verified_identifier else 0,
        link.confidence,
        -position,
    )
