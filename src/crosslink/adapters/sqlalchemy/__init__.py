"""SQLAlchemy adapter package for crosslink."""

from __future__ import annotations

from .mappings import create_all_tables, mapper_registry, start_mappers
from .repositories import (
    SqlAlchemyArtistMatchRepository,
    SqlAlchemyDspLinkRepository,
    SqlAlchemyReleaseRepository,
)
from .unit_of_work import (
    SqlAlchemyMatchingUnitOfWork,
    StartupError,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyArtistMatchRepository",
    "SqlAlchemyDspLinkRepository",
    "SqlAlchemyMatchingUnitOfWork",
    "SqlAlchemyReleaseRepository",
    "StartupError",
    "create_all_tables",
    "mapper_registry",
    "shutdown",
    "start_mappers",
    "startup",
]
