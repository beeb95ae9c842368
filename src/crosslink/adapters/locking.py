"""In-process discovery lock keyed on (profile, provider)."""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator
    from uuid import UUID

log = logging.getLogger(__name__)


class KeyedDiscoveryLock:
    """Thread-safe, non-blocking mutual exclusion per (profile, provider).

    Only guards runs inside one process; multi-process deployments additionally rely on
    the partial unique index on active matches.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._held: set[tuple[UUID, str]] = set()

    def acquire(self, profile_id: UUID, provider: str) -> bool:
        key = (profile_id, provider)
        with self._guard:
            if key in self._held:
                return False
            self._held.add(key)
            return True

    def release(self, profile_id: UUID, provider: str) -> None:
        with self._guard:
            self._held.discard((profile_id, provider))

    def is_held(self, profile_id: UUID, provider: str) -> bool:
        with self._guard:
            return (profile_id, provider) in self._held

    @contextmanager
    def hold(self, profile_id: UUID, provider: str) -> Iterator[bool]:
        acquired = self.acquire(profile_id, provider)
        if not acquired:
            log.debug("Discovery lock busy for %s/%s", profile_id, provider)
        try:
            yield acquired
        finally:
            if acquired:
                self.release(profile_id, provider)
