from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal

from ...timesheets.model import DayHours
from ..model import BillingConfig


@dataclass(frozen=True)
class WeekTotals:
    total_hours: Decimal
    hourly_rate: Decimal
    total_amount: Decimal
    currency: str
    # days with hours outside the configured working week; still billed
    off_days: tuple[str, ...] = ()


class BillingCalculator(ABC):
    """Calculator interface (Strategy Pattern for pricing a week)."""

    @abstractmethod
    def week_totals(self, hours: DayHours, config: BillingConfig) -> WeekTotals:
        raise NotImplementedError
