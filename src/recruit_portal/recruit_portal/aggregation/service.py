from __future__ import annotations

from typing import Optional

from ..common.pagination import Page, PageRequest, paginate
from ..core.context import Actor
from ..core.exceptions import AuthorizationError, ValidationError
from ..timesheets.repository import TimesheetRepository
from .model import BiWeeklyPeriod, MonthlyPeriod
from .periods import build_biweekly_periods, build_monthly_periods


class AggregationService:
    """Read-only bi-weekly and monthly views over approved weekly timesheets."""

    def __init__(self, timesheets: TimesheetRepository):
        self._timesheets = timesheets

    def _scope(self, actor: Actor, candidate_id: Optional[int]) -> Optional[int]:
        if actor.is_admin:
            return candidate_id
        if candidate_id is not None and candidate_id != actor.user_id:
            raise AuthorizationError("You can only view your own timesheets")
        return actor.user_id

    def biweekly(
        self, actor: Actor, page: PageRequest, *, candidate_id: Optional[int] = None
    ) -> Page[BiWeeklyPeriod]:
        rows = self._timesheets.list_approved(candidate_id=self._scope(actor, candidate_id))
        periods = build_biweekly_periods(rows)
        # newest first for display
        periods.sort(key=lambda p: (p.period_start, p.candidate_id), reverse=True)
        return paginate(periods, page)

    def monthly(
        self,
        actor: Actor,
        page: PageRequest,
        *,
        candidate_id: Optional[int] = None,
        year: Optional[int] = None,
        month: Optional[int] = None,
    ) -> Page[MonthlyPeriod]:
        if month is not None and not 1 <= month <= 12:
            raise ValidationError("month must be between 1 and 12", fields={"month": "Out of range"})

        rows = self._timesheets.list_approved(candidate_id=self._scope(actor, candidate_id))
        periods = [
            p
            for p in build_monthly_periods(rows)
            if (year is None or p.year == year) and (month is None or p.month == month)
        ]
        periods.sort(key=lambda p: (p.year, p.month, p.candidate_id), reverse=True)
        return paginate(periods, page)
