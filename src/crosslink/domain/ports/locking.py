"""Port for mutual exclusion of discovery runs."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from contextlib import AbstractContextManager
    from uuid import UUID


@runtime_checkable
class DiscoveryLock(Protocol):
    """Non-blocking lock keyed on (profile, provider)."""

    def hold(self, profile_id: UUID, provider: str) -> AbstractContextManager[bool]:
        """Context manager yielding whether the key was acquired."""
        ...
