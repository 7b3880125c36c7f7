from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..common.pagination import Page, PageRequest
from ..core.enums import TimesheetStatus
from .model import DayHours, WeeklyTimesheet


class TimesheetRepository(Protocol):
    """Repository interface for weekly timesheets."""

    def create(
        self,
        *,
        candidate_id: int,
        week_start_date: date,
        week_end_date: date,
        hours: DayHours,
        total_weekly_hours: Decimal,
        hourly_rate: Decimal,
        total_weekly_amount: Decimal,
        currency: str,
        status: TimesheetStatus,
        submitted_at: Optional[datetime] = None,
    ) -> int:
        """Insert a row. A second row for the same candidate and week raises ValidationError."""

        raise NotImplementedError

    def get(self, timesheet_id: int) -> Optional[WeeklyTimesheet]:
        raise NotImplementedError

    def exists_for_week(self, candidate_id: int, week_start_date: date) -> bool:
        raise NotImplementedError

    def save(self, ts: WeeklyTimesheet, *, expected_status: TimesheetStatus) -> bool:
        """Write hours, totals and status fields.

        Only applies while the stored status still equals ``expected_status``;
        returns False otherwise.
        """

        raise NotImplementedError

    def delete(self, timesheet_id: int) -> bool:
        raise NotImplementedError

    def list(
        self,
        *,
        page: PageRequest,
        candidate_id: Optional[int] = None,
        status: Optional[TimesheetStatus] = None,
    ) -> Page[WeeklyTimesheet]:
        raise NotImplementedError

    def list_approved(self, *, candidate_id: Optional[int] = None) -> Sequence[WeeklyTimesheet]:
        """Approved rows ordered by candidate, then week start."""

        raise NotImplementedError

    def count_by_status(self) -> dict[TimesheetStatus, int]:
        raise NotImplementedError

    def approved_totals(self) -> Sequence[dict]:
        """One row per currency: currency, total_hours, total_amount."""

        raise NotImplementedError
