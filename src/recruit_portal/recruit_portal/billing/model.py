from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from ..core.constants import BILLABLE_HOURS_PER_MONTH, DEFAULT_WORKING_HOURS_PER_WEEK, WEEKDAY_KEYS
from ..core.enums import EmploymentType

CENT = Decimal("0.01")


def money(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def working_day_keys(working_days_per_week: int) -> tuple[str, ...]:
    """Mon-Fri, plus Saturday on a 6-day week. Sunday is never a working day."""
    return WEEKDAY_KEYS[:6] if int(working_days_per_week) == 6 else WEEKDAY_KEYS[:5]


@dataclass(frozen=True)
class BillingConfig:
    """Per-candidate rate and schedule used to price timesheet hours."""

    billing_id: int
    candidate_id: int
    hourly_rate: Decimal
    working_days_per_week: int
    currency: str
    employment_type: EmploymentType
    is_active: bool = True
    pay_rate: Optional[Decimal] = None
    working_hours_per_week: int = DEFAULT_WORKING_HOURS_PER_WEEK
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def working_days(self) -> tuple[str, ...]:
        return working_day_keys(self.working_days_per_week)

    @property
    def margin_per_hour(self) -> Decimal:
        if self.pay_rate is None:
            return money(Decimal("0"))
        return money(self.hourly_rate - self.pay_rate)

    @property
    def profit_per_month(self) -> Decimal:
        return money(self.margin_per_hour * BILLABLE_HOURS_PER_MONTH)

    def to_dict(self) -> dict:
        return {
            "billing_id": self.billing_id,
            "candidate_id": self.candidate_id,
            "hourly_rate": f"{money(self.hourly_rate)}",
            "pay_rate": f"{money(self.pay_rate)}" if self.pay_rate is not None else None,
            "margin_per_hour": f"{self.margin_per_hour}",
            "profit_per_month": f"{self.profit_per_month}",
            "working_days_per_week": self.working_days_per_week,
            "working_hours_per_week": self.working_hours_per_week,
            "working_days": list(self.working_days),
            "currency": self.currency,
            "employment_type": self.employment_type.value,
            "is_active": self.is_active,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
