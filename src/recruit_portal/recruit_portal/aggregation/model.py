from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from ..timesheets.model import WeeklyTimesheet


@dataclass(frozen=True)
class BiWeeklyPeriod:
    """Two consecutive approved weeks (or one trailing week when ``is_partial``)."""

    candidate_id: int
    candidate_name: Optional[str]
    period_number: int
    period_start: date
    period_end: date
    week1: WeeklyTimesheet
    week2: Optional[WeeklyTimesheet]
    total_hours: Decimal
    total_amount: Decimal
    currency: str
    # weeks were billed in more than one currency; totals are not comparable
    mixed_currency: bool = False

    @property
    def is_partial(self) -> bool:
        return self.week2 is None

    def to_dict(self) -> dict:
        def week(ts: Optional[WeeklyTimesheet]):
            if ts is None:
                return None
            return {
                "timesheet_id": ts.timesheet_id,
                "week_start_date": ts.week_start_date.isoformat(),
                "week_end_date": ts.week_end_date.isoformat(),
                "total_hours": f"{ts.total_weekly_hours:.1f}",
                "total_amount": f"{ts.total_weekly_amount:.2f}",
            }

        return {
            "candidate_id": self.candidate_id,
            "candidate_name": self.candidate_name,
            "period_number": self.period_number,
            "period_start_date": self.period_start.isoformat(),
            "period_end_date": self.period_end.isoformat(),
            "week1": week(self.week1),
            "week2": week(self.week2),
            "total_hours": f"{self.total_hours:.1f}",
            "total_amount": f"{self.total_amount:.2f}",
            "currency": self.currency,
            "is_partial": self.is_partial,
            "mixed_currency": self.mixed_currency,
        }


@dataclass(frozen=True)
class MonthlyPeriod:
    """Approved weeks whose week start falls in one calendar month."""

    candidate_id: int
    candidate_name: Optional[str]
    year: int
    month: int
    timesheet_ids: Sequence[int]
    total_hours: Decimal
    total_amount: Decimal
    average_hours_per_week: Decimal
    average_amount_per_week: Decimal
    currency: str
    mixed_currency: bool = False

    @property
    def total_weeks(self) -> int:
        return len(self.timesheet_ids)

    def to_dict(self) -> dict:
        return {
            "candidate_id": self.candidate_id,
            "candidate_name": self.candidate_name,
            "year": self.year,
            "month": self.month,
            "month_key": f"{self.year:04d}-{self.month:02d}",
            "timesheet_ids": list(self.timesheet_ids),
            "total_weeks": self.total_weeks,
            "total_hours": f"{self.total_hours:.1f}",
            "total_amount": f"{self.total_amount:.2f}",
            "average_hours_per_week": f"{self.average_hours_per_week:.2f}",
            "average_amount_per_week": f"{self.average_amount_per_week:.2f}",
            "currency": self.currency,
            "mixed_currency": self.mixed_currency,
        }
