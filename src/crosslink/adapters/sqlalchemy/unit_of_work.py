"""SQLAlchemy-backed unit of work for link maintenance and artist matching.

The adapter holds one process-wide engine. Call ``startup()`` once before
creating units of work and ``shutdown()`` to dispose it.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from crosslink.adapters.sqlalchemy.mappings import create_all_tables, start_mappers
from crosslink.adapters.sqlalchemy.repositories import (
    SqlAlchemyArtistMatchRepository,
    SqlAlchemyDspLinkRepository,
    SqlAlchemyReleaseRepository,
)
from crosslink.config.storage import DatabaseConfig, get_database_config
from crosslink.domain.model import MatchConflictError
from crosslink.domain.ports.unit_of_work import MatchingRepositories, RepositoryCollection

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)


class StartupError(RuntimeError):
    """Raised when the persistence adapter is used in the wrong lifecycle state."""


@dataclass(slots=True)
class _Persistence:
    engine: Engine
    sessions: sessionmaker[Session]


_current: _Persistence | None = None


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Bind the adapter to an engine and create missing tables."""
    global _current  # noqa: PLW0603

    if _current is not None and not force:
        raise StartupError("Persistence already started; pass force=True to rebind it.")

    if engine is None:
        database = DatabaseConfig(uri=database_uri) if database_uri else get_database_config()
        engine = create_engine(database.uri, echo=database.echo)
    log.info("Starting persistence on %s", engine.url.render_as_string(hide_password=True))

    start_mappers()
    create_all_tables(engine)
    sessions = sessionmaker(bind=engine, expire_on_commit=False)
    _current = _Persistence(engine=engine, sessions=sessions)


def configured_engine() -> Engine | None:
    return _current.engine if _current is not None else None


def is_started() -> bool:
    return _current is not None


def shutdown() -> None:
    """Dispose the engine; a no-op when nothing was started."""
    global _current  # noqa: PLW0603

    if _current is not None:
        _current.engine.dispose()
    _current = None


def _session_factory() -> sessionmaker[Session]:
    if _current is None:
        raise StartupError("Persistence not started. Call startup() before opening a unit of work.")
    return _current.sessions


class BaseSqlAlchemyUnitOfWork[TRepositories: RepositoryCollection](ABC):
    """One session per ``with`` block; leaving the block without ``commit()`` discards writes."""

    def __init__(self) -> None:
        self._sessions = _session_factory()
        self._open: tuple[Session, TRepositories] | None = None

    @abstractmethod
    def _build_repositories(self, session: Session) -> TRepositories: ...

    def __enter__(self) -> BaseSqlAlchemyUnitOfWork[TRepositories]:
        if self._open is not None:
            raise StartupError("Unit of work is already open")
        session = self._sessions()
        self._open = (session, self._build_repositories(session))
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        session = self.session
        self._open = None
        try:
            if exc_type is not None:
                session.rollback()
        finally:
            session.close()
        return False

    @property
    def session(self) -> Session:
        if self._open is None:
            raise StartupError("Unit of work is not open")
        return self._open[0]

    @property
    def repositories(self) -> TRepositories:
        if self._open is None:
            raise StartupError("Unit of work is not open")
        return self._open[1]

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()


class SqlAlchemyMatchingUnitOfWork(BaseSqlAlchemyUnitOfWork[MatchingRepositories]):
    """Unit of work for releases, link sets and artist matches.

    A commit that trips the active-match unique index surfaces as ``MatchConflictError``.
    """

    def _build_repositories(self, session: Session) -> MatchingRepositories:
        links = SqlAlchemyDspLinkRepository(session)
        return MatchingRepositories(
            releases=SqlAlchemyReleaseRepository(session, links),
            links=links,
            matches=SqlAlchemyArtistMatchRepository(session),
        )

    def commit(self) -> None:
        try:
            super().commit()
        except IntegrityError as exc:
            self.rollback()
            log.warning("Commit rejected by a uniqueness constraint: %s", exc.orig)
            raise MatchConflictError("Conflicting concurrent write") from exc
