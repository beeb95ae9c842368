"""Provider destination links (immutable value objects)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from crosslink.domain.model.enums import LinkSource
from crosslink.domain.model.primitives import normalize_isrc, normalize_upc, provider_name

if TYPE_CHECKING:
    from crosslink.domain.model.primitives import ProviderName


@dataclass(frozen=True, slots=True)
class DSPLink:
    """A candidate or resolved destination URL for a release or track on one provider.

    ``identifier`` is the ISRC/UPC that justified the link, as reported by the source.
    Links are never mutated; merging produces new sequences of them.
    """

    provider: ProviderName
    url: str
    source: LinkSource
    confidence: float
    identifier: str | None = None
    external_id: str | None = None

    def __post_init__(self) -> None:
        key = provider_name(self.provider)
        if not key:
            raise ValueError("provider key must not be empty")
        if not self.url:
            raise ValueError("url must not be empty")
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"confidence must be within [0.0, 1.0], got {self.confidence!r}")
        object.__setattr__(self, "provider", key)
        object.__setattr__(self, "source", LinkSource(self.source))

    @property
    def verified_identifier(self) -> str | None:
        """Normalized ISRC or UPC, or ``None`` if the carried identifier is malformed."""
        return normalize_isrc(self.identifier) or normalize_upc(self.identifier)

    @property
    def has_verified_identifier(self) -> bool:
        return self.verified_identifier is not None
