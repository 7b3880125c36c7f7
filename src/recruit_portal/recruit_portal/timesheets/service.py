from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Any, Callable, Optional, Sequence

from ..audit.service import AuditService
from ..billing.calculator.base import BillingCalculator, WeekTotals
from ..billing.calculator.standard_calculator import StandardBillingCalculator
from ..billing.service import BillingService
from ..common.datetime_utils import now_local, parse_iso_date, week_end, week_start
from ..common.pagination import Page, PageRequest
from ..common.validators import parse_int
from ..core.context import Actor
from ..core.enums import Role, TimesheetStatus
from ..core.exceptions import AuthorizationError, NotFoundError, StateConflictError, ValidationError
from ..notifications.notifier import Notifier
from ..users.repository import UserRepository
from . import policy
from .model import DayHours, WeeklyTimesheet
from .repository import TimesheetRepository

logger = logging.getLogger(__name__)

ENTITY = "weekly_timesheet"


class TimesheetService:
    """Use cases around weekly timesheets: entry, review and the status machine."""

    def __init__(
        self,
        timesheets: TimesheetRepository,
        billing: BillingService,
        users: UserRepository,
        notifier: Notifier,
        audit: AuditService,
        *,
        calculator: Optional[BillingCalculator] = None,
        admin_emails: Sequence[str] = (),
        clock: Callable[[], datetime] = now_local,
    ):
        self._timesheets = timesheets
        self._billing = billing
        self._users = users
        self._notifier = notifier
        self._audit = audit
        self._calculator = calculator or StandardBillingCalculator()
        self._admin_emails = tuple(admin_emails)
        self._clock = clock

    # -------- queries --------
    def _require(self, timesheet_id: int) -> WeeklyTimesheet:
        ts = self._timesheets.get(int(timesheet_id))
        if not ts:
            raise NotFoundError("Timesheet not found")
        return ts

    def get(self, actor: Actor, timesheet_id: int) -> WeeklyTimesheet:
        ts = self._require(timesheet_id)
        policy.ensure_can_view(actor, ts)
        return ts

    def list_mine(
        self, actor: Actor, page: PageRequest, *, status: Optional[TimesheetStatus] = None
    ) -> Page[WeeklyTimesheet]:
        return self._timesheets.list(page=page, candidate_id=actor.user_id, status=status)

    def list_all(
        self,
        actor: Actor,
        page: PageRequest,
        *,
        status: Optional[TimesheetStatus] = None,
        candidate_id: Optional[int] = None,
    ) -> Page[WeeklyTimesheet]:
        self._require_admin(actor)
        return self._timesheets.list(page=page, candidate_id=candidate_id, status=status)

    # -------- entry --------
    def create(self, actor: Actor, data: dict[str, Any]) -> WeeklyTimesheet:
        """Create the week's row with server-computed totals.

        Candidates always create for themselves; admins must name ``candidate_id``.
        """
        if actor.is_admin:
            candidate_id = parse_int(data.get("candidate_id"), "candidate_id")
            if candidate_id is None:
                raise ValidationError("candidate_id is required", fields={"candidate_id": "Required"})
            candidate = self._users.get_by_id(candidate_id)
            if not candidate or candidate.role != Role.CANDIDATE:
                raise NotFoundError("Candidate not found")
        else:
            candidate_id = actor.user_id

        start = parse_iso_date(data.get("week_start_date") or "", "week_start_date")
        if week_start(start) != start:
            raise ValidationError(
                "week_start_date must be a Monday", fields={"week_start_date": "Must be a Monday"}
            )

        status = self._initial_status(data.get("status"))
        hours = DayHours.parse(data)
        totals = self._price(hours, candidate_id)

        if self._timesheets.exists_for_week(candidate_id, start):
            raise ValidationError(
                "Timesheet already exists for this week", fields={"week_start_date": "Duplicate week"}
            )

        now = self._clock()
        timesheet_id = self._timesheets.create(
            candidate_id=candidate_id,
            week_start_date=start,
            week_end_date=week_end(start),
            hours=hours,
            total_weekly_hours=totals.total_hours,
            hourly_rate=totals.hourly_rate,
            total_weekly_amount=totals.total_amount,
            currency=totals.currency,
            status=status,
            submitted_at=now if status == TimesheetStatus.SUBMITTED else None,
        )
        ts = self._require(timesheet_id)
        logger.info(
            "Timesheet %s created for candidate %s week %s (%s h, %s)",
            timesheet_id, candidate_id, start, totals.total_hours, status.value,
        )
        if status == TimesheetStatus.SUBMITTED:
            self._notify_submitted(ts)
        return ts

    @staticmethod
    def _initial_status(raw: Any) -> TimesheetStatus:
        if raw is None or str(raw).strip() == "":
            return TimesheetStatus.SUBMITTED
        status = TimesheetStatus.normalize(str(raw))
        if status not in (TimesheetStatus.DRAFT, TimesheetStatus.SUBMITTED):
            raise ValidationError(
                "New timesheets start as draft or submitted", fields={"status": "Must be draft or submitted"}
            )
        return status

    def update(self, actor: Actor, timesheet_id: int, data: dict[str, Any]) -> WeeklyTimesheet:
        """Replace day hours (missing days keep their value) and recompute totals at the current rate."""
        ts = self._require(timesheet_id)
        policy.ensure_can_edit(actor, ts)

        hours = DayHours.parse(data, base=ts.hours)
        updated = self._with_totals(ts, hours)
        self._save(updated, expected=ts.status)

        if ts.status == TimesheetStatus.APPROVED:
            self._audit.record(
                actor,
                "timesheet.admin_edit",
                entity_type=ENTITY,
                entity_id=ts.timesheet_id,
                details={
                    "before_hours": ts.total_weekly_hours,
                    "after_hours": updated.total_weekly_hours,
                    "before_amount": ts.total_weekly_amount,
                    "after_amount": updated.total_weekly_amount,
                },
            )
        return self._require(ts.timesheet_id)

    def delete(self, actor: Actor, timesheet_id: int) -> None:
        ts = self._require(timesheet_id)
        policy.ensure_can_delete(actor, ts)
        if not self._timesheets.delete(ts.timesheet_id):
            raise NotFoundError("Timesheet not found")
        if ts.status == TimesheetStatus.APPROVED:
            self._audit.record(
                actor,
                "timesheet.admin_delete",
                entity_type=ENTITY,
                entity_id=ts.timesheet_id,
                details={
                    "candidate_id": ts.candidate_id,
                    "week_start_date": ts.week_start_date,
                    "total_hours": ts.total_weekly_hours,
                    "total_amount": ts.total_weekly_amount,
                },
            )
        logger.info("Timesheet %s deleted by %s", ts.timesheet_id, actor.user_id)

    # -------- status machine --------
    def submit(self, actor: Actor, timesheet_id: int) -> WeeklyTimesheet:
        ts = self._require(timesheet_id)
        policy.ensure_can_edit(actor, ts)
        policy.ensure_transition(ts.status, TimesheetStatus.SUBMITTED)

        updated = replace(
            self._with_totals(ts, ts.hours),
            status=TimesheetStatus.SUBMITTED,
            submitted_at=self._clock(),
            rejection_reason=None,
        )
        self._save(updated, expected=ts.status)
        logger.info("Timesheet %s submitted by %s", ts.timesheet_id, actor.user_id)

        fresh = self._require(ts.timesheet_id)
        self._notify_submitted(fresh)
        return fresh

    def approve(self, actor: Actor, timesheet_id: int) -> WeeklyTimesheet:
        self._require_admin(actor)
        ts = self._require(timesheet_id)
        policy.ensure_transition(ts.status, TimesheetStatus.APPROVED)

        updated = replace(
            ts,
            status=TimesheetStatus.APPROVED,
            approved_at=self._clock(),
            approved_by=actor.user_id,
            rejection_reason=None,
        )
        self._save(updated, expected=ts.status)
        logger.info("Timesheet %s approved by %s", ts.timesheet_id, actor.user_id)

        self._notify_candidate(
            ts,
            subject="Timesheet approved",
            body=f"Your timesheet for the week of {ts.week_start_date.isoformat()} has been approved.",
        )
        return self._require(ts.timesheet_id)

    def reject(self, actor: Actor, timesheet_id: int, reason: Optional[str]) -> WeeklyTimesheet:
        self._require_admin(actor)
        reason = (reason or "").strip()
        if not reason:
            raise StateConflictError(
                "Rejection reason is required", fields={"rejection_reason": "Required"}
            )
        ts = self._require(timesheet_id)
        policy.ensure_transition(ts.status, TimesheetStatus.REJECTED)

        updated = replace(
            ts,
            status=TimesheetStatus.REJECTED,
            rejection_reason=reason,
            approved_at=None,
            approved_by=None,
        )
        self._save(updated, expected=ts.status)
        logger.info("Timesheet %s rejected by %s", ts.timesheet_id, actor.user_id)

        if ts.status == TimesheetStatus.APPROVED:
            self._audit.record(
                actor,
                "timesheet.approval_rejected",
                entity_type=ENTITY,
                entity_id=ts.timesheet_id,
                details={"reason": reason, "approved_by": ts.approved_by},
            )
        self._notify_candidate(
            ts,
            subject="Timesheet rejected",
            body=(
                f"Your timesheet for the week of {ts.week_start_date.isoformat()} was rejected.\n\n"
                f"Reason: {reason}"
            ),
        )
        return self._require(ts.timesheet_id)

    def revert_approval(self, actor: Actor, timesheet_id: int, note: Optional[str] = None) -> WeeklyTimesheet:
        """approved -> pending, so the week can be reviewed again."""
        self._require_admin(actor)
        ts = self._require(timesheet_id)
        policy.ensure_transition(ts.status, TimesheetStatus.PENDING)

        updated = replace(ts, status=TimesheetStatus.PENDING, approved_at=None, approved_by=None)
        self._save(updated, expected=ts.status)
        self._audit.record(
            actor,
            "timesheet.approval_reverted",
            entity_type=ENTITY,
            entity_id=ts.timesheet_id,
            details={"approved_by": ts.approved_by, "note": (note or "").strip() or None},
        )
        return self._require(ts.timesheet_id)

    # -------- helpers --------
    def _price(self, hours: DayHours, candidate_id: int) -> WeekTotals:
        totals = self._calculator.week_totals(hours, self._billing.require_active(candidate_id))
        if totals.off_days:
            logger.info("Candidate %s logged hours on non-working days: %s", candidate_id, ", ".join(totals.off_days))
        return totals

    def _with_totals(self, ts: WeeklyTimesheet, hours: DayHours) -> WeeklyTimesheet:
        totals = self._price(hours, ts.candidate_id)
        return replace(
            ts,
            hours=hours,
            total_weekly_hours=totals.total_hours,
            hourly_rate=totals.hourly_rate,
            total_weekly_amount=totals.total_amount,
            currency=totals.currency,
        )

    def _save(self, ts: WeeklyTimesheet, *, expected: TimesheetStatus) -> None:
        if not self._timesheets.save(ts, expected_status=expected):
            raise StateConflictError("Timesheet was changed by another request, reload and try again")

    @staticmethod
    def _require_admin(actor: Actor) -> None:
        if not actor.is_admin:
            raise AuthorizationError("Admin access required")

    def _notify_submitted(self, ts: WeeklyTimesheet) -> None:
        recipients = list(dict.fromkeys([*self._users.list_admin_emails(), *self._admin_emails]))
        if not recipients:
            return
        self._notifier.send(
            to=recipients,
            subject="Timesheet submitted for approval",
            body=(
                f"{ts.candidate_name or f'Candidate #{ts.candidate_id}'} submitted the timesheet for "
                f"{ts.week_start_date.isoformat()} to {ts.week_end_date.isoformat()}: "
                f"{ts.total_weekly_hours} h, {ts.total_weekly_amount} {ts.currency}."
            ),
        )

    def _notify_candidate(self, ts: WeeklyTimesheet, *, subject: str, body: str) -> None:
        candidate = self._users.get_by_id(ts.candidate_id)
        if candidate and candidate.email:
            self._notifier.send(to=[candidate.email], subject=subject, body=body)
