"""Bi-weekly and monthly views derived from approved weekly rows.

Pure functions: nothing here is stored, every request recomputes from the rows.
"""

from __future__ import annotations

from collections import defaultdict
from decimal import Decimal
from itertools import groupby
from typing import Iterable, Sequence

from ..billing.model import money
from ..common.datetime_utils import month_key
from ..core.enums import TimesheetStatus
from ..timesheets.model import WeeklyTimesheet
from .model import BiWeeklyPeriod, MonthlyPeriod

ZERO = Decimal("0")


def _approved_by_candidate(rows: Iterable[WeeklyTimesheet]) -> list[tuple[int, list[WeeklyTimesheet]]]:
    approved = sorted(
        (r for r in rows if r.status == TimesheetStatus.APPROVED),
        key=lambda r: (r.candidate_id, r.week_start_date),
    )
    return [(cid, list(group)) for cid, group in groupby(approved, key=lambda r: r.candidate_id)]


def _currency(weeks: Sequence[WeeklyTimesheet]) -> str:
    # Rows carry the currency of the rate applied; the latest week labels the period.
    return weeks[-1].currency


def _mixed_currency(weeks: Sequence[WeeklyTimesheet]) -> bool:
    return len({w.currency for w in weeks}) > 1


def build_biweekly_periods(rows: Iterable[WeeklyTimesheet]) -> list[BiWeeklyPeriod]:
    """Pair each candidate's approved weeks in week order: (1st, 2nd), (3rd, 4th), ...

    An odd trailing week forms a partial period on its own.
    """
    periods: list[BiWeeklyPeriod] = []
    for candidate_id, weeks in _approved_by_candidate(rows):
        for number, i in enumerate(range(0, len(weeks), 2), start=1):
            pair = weeks[i:i + 2]
            first = pair[0]
            second = pair[1] if len(pair) > 1 else None
            periods.append(
                BiWeeklyPeriod(
                    candidate_id=candidate_id,
                    candidate_name=first.candidate_name,
                    period_number=number,
                    period_start=first.week_start_date,
                    period_end=pair[-1].week_end_date,
                    week1=first,
                    week2=second,
                    total_hours=sum((w.total_weekly_hours for w in pair), ZERO),
                    total_amount=money(sum((w.total_weekly_amount for w in pair), ZERO)),
                    currency=_currency(pair),
                    mixed_currency=_mixed_currency(pair),
                )
            )
    return periods


def build_monthly_periods(rows: Iterable[WeeklyTimesheet]) -> list[MonthlyPeriod]:
    """Group approved weeks by the calendar month of their week start. Weeks are never split."""
    periods: list[MonthlyPeriod] = []
    for candidate_id, weeks in _approved_by_candidate(rows):
        by_month: dict[tuple[int, int], list[WeeklyTimesheet]] = defaultdict(list)
        for w in weeks:
            by_month[month_key(w.week_start_date)].append(w)

        for (year, month), group in sorted(by_month.items()):
            total_hours = sum((w.total_weekly_hours for w in group), ZERO)
            total_amount = money(sum((w.total_weekly_amount for w in group), ZERO))
            count = Decimal(len(group))
            periods.append(
                MonthlyPeriod(
                    candidate_id=candidate_id,
                    candidate_name=group[0].candidate_name,
                    year=year,
                    month=month,
                    timesheet_ids=[w.timesheet_id for w in group],
                    total_hours=total_hours,
                    total_amount=total_amount,
                    average_hours_per_week=money(total_hours / count),
                    average_amount_per_week=money(total_amount / count),
                    currency=_currency(group),
                    mixed_currency=_mixed_currency(group),
                )
            )
    return periods
