from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import InvoiceStatus


@dataclass(frozen=True)
class Invoice:
    """Snapshot of an approved week at generation time.

    Later rate or timesheet changes never alter an invoice.
    """

    invoice_id: int
    invoice_number: str
    candidate_id: int
    timesheet_id: Optional[int]
    period_start: date
    period_end: date
    total_hours: Decimal
    hourly_rate: Decimal
    total_amount: Decimal
    currency: str
    status: InvoiceStatus
    issued_date: date
    due_date: date
    paid_date: Optional[date] = None
    notes: Optional[str] = None
    generated_by: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    candidate_name: Optional[str] = field(default=None, compare=False)

    def to_dict(self) -> dict:
        return {
            "invoice_id": self.invoice_id,
            "invoice_number": self.invoice_number,
            "candidate_id": self.candidate_id,
            "candidate_name": self.candidate_name,
            "timesheet_id": self.timesheet_id,
            "period_start": self.period_start.isoformat(),
            "period_end": self.period_end.isoformat(),
            "total_hours": f"{self.total_hours:.1f}",
            "hourly_rate": f"{self.hourly_rate:.2f}",
            "total_amount": f"{self.total_amount:.2f}",
            "currency": self.currency,
            "status": self.status.value,
            "issued_date": self.issued_date.isoformat(),
            "due_date": self.due_date.isoformat(),
            "paid_date": self.paid_date.isoformat() if self.paid_date else None,
            "notes": self.notes,
            "generated_by": self.generated_by,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
