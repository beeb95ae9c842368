"""Domain error hierarchy."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uuid import UUID


class CrosslinkError(RuntimeError):
    """Base class for domain-level failures."""


class CatalogFetchError(CrosslinkError):
    """Transient failure while querying a provider catalog."""

    def __init__(self, message: str, *, provider: str) -> None:
        super().__init__(message)
        self.provider = provider


class MatchConflictError(CrosslinkError):
    """A transition or insert would violate the one-active-match-per-provider rule."""

    def __init__(self, message: str, *, match_id: UUID | None = None) -> None:
        super().__init__(message)
        self.match_id = match_id


class MatchNotFoundError(CrosslinkError):
    def __init__(self, match_id: UUID) -> None:
        super().__init__(f"Artist match {match_id} does not exist")
        self.match_id = match_id


class DiscoveryCancelledError(CrosslinkError):
    """Discovery stopped cooperatively (cancel signal or deadline) before writing."""
