from __future__ import annotations

from ...timesheets.model import DayHours
from ..model import BillingConfig, money
from .base import BillingCalculator, WeekTotals


class StandardBillingCalculator(BillingCalculator):
    """Standard rule: sum of all seven day hours x active hourly rate. No overtime split."""

    def week_totals(self, hours: DayHours, config: BillingConfig) -> WeekTotals:
        working = set(config.working_days)
        total_hours = hours.total
        return WeekTotals(
            total_hours=total_hours,
            hourly_rate=config.hourly_rate,
            total_amount=money(total_hours * config.hourly_rate),
            currency=config.currency,
            off_days=tuple(day for day, value in hours.items() if day not in working and value > 0),
        )
