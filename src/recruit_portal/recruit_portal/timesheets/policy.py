"""Weekly timesheet status machine.

draft -> submitted -> approved | rejected
rejected -> submitted (resubmit)
approved -> pending (admin reverts an approval); pending is reviewed like submitted
"""

from __future__ import annotations

from ..core.context import Actor
from ..core.enums import TimesheetStatus
from ..core.exceptions import AuthorizationError, StateConflictError
from .model import WeeklyTimesheet

S = TimesheetStatus

# target status -> statuses it may be reached from
ALLOWED_SOURCES: dict[TimesheetStatus, frozenset[TimesheetStatus]] = {
    S.SUBMITTED: frozenset({S.DRAFT, S.REJECTED, S.PENDING}),
    S.APPROVED: frozenset({S.SUBMITTED, S.PENDING}),
    S.REJECTED: frozenset({S.SUBMITTED, S.PENDING, S.APPROVED}),
    S.PENDING: frozenset({S.APPROVED}),
}

CANDIDATE_EDITABLE = frozenset({S.DRAFT, S.SUBMITTED, S.PENDING, S.REJECTED})


def can_transition(current: TimesheetStatus, target: TimesheetStatus) -> bool:
    return current in ALLOWED_SOURCES.get(target, frozenset())


def ensure_transition(current: TimesheetStatus, target: TimesheetStatus) -> None:
    if not can_transition(current, target):
        raise StateConflictError(f"Cannot move timesheet from {current.value} to {target.value}")


def ensure_can_view(actor: Actor, ts: WeeklyTimesheet) -> None:
    if not actor.is_admin and ts.candidate_id != actor.user_id:
        raise AuthorizationError("You can only access your own timesheets")


def ensure_can_edit(actor: Actor, ts: WeeklyTimesheet) -> None:
    """Admins edit at any status; candidates only their own rows until approved."""
    ensure_can_view(actor, ts)
    if not actor.is_admin and ts.status not in CANDIDATE_EDITABLE:
        raise AuthorizationError("Approved timesheets cannot be edited")


def ensure_can_delete(actor: Actor, ts: WeeklyTimesheet) -> None:
    ensure_can_view(actor, ts)
    if not actor.is_admin and ts.status == S.APPROVED:
        raise AuthorizationError("Approved timesheets cannot be deleted")
