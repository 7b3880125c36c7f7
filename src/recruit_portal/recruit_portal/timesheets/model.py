from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Iterator, Mapping, Optional

from ..common.validators import validate_day_hours
from ..core.constants import WEEKDAY_KEYS
from ..core.enums import TimesheetStatus
from ..core.exceptions import ValidationError

ZERO = Decimal("0")

# Rendered as placeholders: the portal does not track these yet.
RESERVED_FIELDS = ("overtime_hours", "sick_leave_hours", "paid_leave_hours", "unpaid_leave_hours")


@dataclass(frozen=True)
class DayHours:
    """Hours per weekday for one Monday-aligned week."""

    monday: Decimal = ZERO
    tuesday: Decimal = ZERO
    wednesday: Decimal = ZERO
    thursday: Decimal = ZERO
    friday: Decimal = ZERO
    saturday: Decimal = ZERO
    sunday: Decimal = ZERO

    @classmethod
    def parse(cls, data: Mapping[str, Any], *, base: Optional["DayHours"] = None) -> "DayHours":
        """Read hours from a request body.

        Accepts a 7-item ``day_hours`` list (Monday first) or per-day keys
        ``monday`` / ``monday_hours``. Days not present keep ``base`` values.
        """
        values = dict(base.items()) if base else {day: ZERO for day in WEEKDAY_KEYS}

        seq = data.get("day_hours", data.get("seven_day_hours"))
        if seq is not None:
            if not isinstance(seq, (list, tuple)) or len(seq) != 7:
                raise ValidationError("day_hours must list 7 values (Monday to Sunday)", fields={"day_hours": "Expected 7 values"})
            for day, raw in zip(WEEKDAY_KEYS, seq):
                values[day] = validate_day_hours(raw, f"{day}_hours")
        else:
            for day in WEEKDAY_KEYS:
                for key in (f"{day}_hours", day):
                    if key in data:
                        values[day] = validate_day_hours(data[key], f"{day}_hours")
                        break

        return cls(**values)

    def items(self) -> Iterator[tuple[str, Decimal]]:
        for day in WEEKDAY_KEYS:
            yield day, getattr(self, day)

    def as_list(self) -> list[Decimal]:
        return [v for _, v in self.items()]

    @property
    def total(self) -> Decimal:
        return sum(self.as_list(), ZERO)


@dataclass(frozen=True)
class WeeklyTimesheet:
    """Domain entity: one candidate's hours for one Monday-aligned week."""

    timesheet_id: int
    candidate_id: int
    week_start_date: date
    week_end_date: date
    hours: DayHours
    total_weekly_hours: Decimal
    hourly_rate: Decimal
    total_weekly_amount: Decimal
    currency: str
    status: TimesheetStatus
    rejection_reason: Optional[str] = None
    submitted_at: Optional[datetime] = None
    approved_at: Optional[datetime] = None
    approved_by: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    candidate_name: Optional[str] = field(default=None, compare=False)

    def to_dict(self, *, today: Optional[date] = None) -> dict:
        data: dict[str, Any] = {
            "timesheet_id": self.timesheet_id,
            "candidate_id": self.candidate_id,
            "candidate_name": self.candidate_name,
            "week_start_date": self.week_start_date.isoformat(),
            "week_end_date": self.week_end_date.isoformat(),
        }
        for day, value in self.hours.items():
            data[f"{day}_hours"] = f"{value:.1f}"
        data.update(
            {
                "total_weekly_hours": f"{self.total_weekly_hours:.1f}",
                "hourly_rate": f"{self.hourly_rate:.2f}",
                "total_weekly_amount": f"{self.total_weekly_amount:.2f}",
                "currency": self.currency,
                "status": self.status.value,
                "rejection_reason": self.rejection_reason,
                "submitted_at": self.submitted_at.isoformat() if self.submitted_at else None,
                "approved_at": self.approved_at.isoformat() if self.approved_at else None,
                "approved_by": self.approved_by,
                "created_at": self.created_at.isoformat() if self.created_at else None,
                "updated_at": self.updated_at.isoformat() if self.updated_at else None,
            }
        )
        for name in RESERVED_FIELDS:
            data[name] = "0.00"
        data["deadline_passed"] = self.week_end_date < (today or date.today())
        return data
