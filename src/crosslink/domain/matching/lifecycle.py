"""User-driven confirmation lifecycle of artist matches.

Each action is one conditional update keyed on the current status. When nothing
changed, the record is re-read to tell an idempotent repeat from a real conflict.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Final

from crosslink.domain.model import MatchStatus, utc_now

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import datetime
    from uuid import UUID

    from crosslink.domain.model import ArtistMatch
    from crosslink.domain.ports.unit_of_work import MatchingUnitOfWork

log = logging.getLogger(__name__)


class TransitionKind(StrEnum):
    APPLIED = "applied"
    NOOP = "noop"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"


@dataclass(frozen=True, slots=True)
class TransitionResult:
    kind: TransitionKind
    match_id: UUID
    match: ArtistMatch | None = None
    message: str | None = None

    @property
    def ok(self) -> bool:
        return self.kind in {TransitionKind.APPLIED, TransitionKind.NOOP}


@dataclass(frozen=True, slots=True)
class _TransitionRule:
    action: str
    to_status: MatchStatus
    from_statuses: frozenset[MatchStatus]
    noop_statuses: frozenset[MatchStatus]


CONFIRM_RULE: Final = _TransitionRule(
    action="confirm",
    to_status=MatchStatus.CONFIRMED,
    from_statuses=frozenset({MatchStatus.SUGGESTED, MatchStatus.AUTO_CONFIRMED}),
    noop_statuses=frozenset({MatchStatus.CONFIRMED}),
)

REJECT_RULE: Final = _TransitionRule(
    action="reject",
    to_status=MatchStatus.REJECTED,
    from_statuses=frozenset({MatchStatus.SUGGESTED, MatchStatus.AUTO_CONFIRMED}),
    noop_statuses=frozenset({MatchStatus.REJECTED}),
)


def confirm_match(
    match_id: UUID,
    *,
    unit_of_work_factory: Callable[[], MatchingUnitOfWork],
    clock: Callable[[], datetime] = utc_now,
    confirmed_by: UUID | None = None,
) -> TransitionResult:
    """Confirm a suggested or auto-confirmed match. Repeating it is a no-op success.

    ``confirmed_by`` records who confirmed it alongside ``confirmed_at``.
    """
    return _apply(
        CONFIRM_RULE, match_id, unit_of_work_factory, clock(), confirmed_by=confirmed_by
    )


def reject_match(
    match_id: UUID,
    *,
    unit_of_work_factory: Callable[[], MatchingUnitOfWork],
    clock: Callable[[], datetime] = utc_now,
    reason: str | None = None,
) -> TransitionResult:
    """Reject a suggested or auto-confirmed match.

    Only the rejected external identity is blocked; later discovery runs may propose a
    different artist for the same provider. ``reason`` is kept with ``rejected_at``.
    """
    return _apply(REJECT_RULE, match_id, unit_of_work_factory, clock(), rejection_reason=reason)


def _apply(
    rule: _TransitionRule,
    match_id: UUID,
    unit_of_work_factory: Callable[[], MatchingUnitOfWork],
    now: datetime,
    *,
    confirmed_by: UUID | None = None,
    rejection_reason: str | None = None,
) -> TransitionResult:
    with unit_of_work_factory() as uow:
        matches = uow.repositories.matches
        changed = matches.transition(
            match_id,
            from_statuses=rule.from_statuses,
            to_status=rule.to_status,
            at=now,
            confirmed_by=confirmed_by,
            rejection_reason=rejection_reason,
        )
        if changed:
            uow.commit()
        match = matches.get(match_id)

    if changed:
        log.info("Match %s: %s applied", match_id, rule.action)
        return TransitionResult(kind=TransitionKind.APPLIED, match_id=match_id, match=match)
    if match is None:
        return TransitionResult(
            kind=TransitionKind.NOT_FOUND,
            match_id=match_id,
            message=f"Artist match {match_id} does not exist",
        )
    if match.status in rule.noop_statuses:
        return TransitionResult(kind=TransitionKind.NOOP, match_id=match_id, match=match)
    log.warning("Match %s: cannot %s a %s match", match_id, rule.action, match.status)
    return TransitionResult(
        kind=TransitionKind.CONFLICT,
        match_id=match_id,
        match=match,
        message=f"Cannot {rule.action} a match that is {match.status}",
    )
