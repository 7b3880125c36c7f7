from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..common.pagination import Page, PageRequest
from ..core.enums import InvoiceStatus
from .model import Invoice


class InvoiceRepository(Protocol):
    def last_number_for_month(self, prefix: str) -> Optional[str]:
        """Highest invoice number starting with ``prefix`` (e.g. ``INV-202401-``)."""

        raise NotImplementedError

    def create(
        self,
        *,
        invoice_number: str,
        candidate_id: int,
        timesheet_id: int,
        period_start: date,
        period_end: date,
        total_hours: Decimal,
        hourly_rate: Decimal,
        total_amount: Decimal,
        currency: str,
        status: InvoiceStatus,
        issued_date: date,
        due_date: date,
        notes: Optional[str],
        generated_by: int,
    ) -> int:
        """Insert; a second invoice for the same timesheet raises StateConflictError."""

        raise NotImplementedError

    def get(self, invoice_id: int) -> Optional[Invoice]:
        raise NotImplementedError

    def get_by_timesheet(self, timesheet_id: int) -> Optional[Invoice]:
        raise NotImplementedError

    def update_status(
        self,
        *,
        invoice_id: int,
        expected_status: InvoiceStatus,
        status: InvoiceStatus,
        paid_date: Optional[date],
    ) -> bool:
        raise NotImplementedError

    def delete_draft(self, invoice_id: int) -> bool:
        raise NotImplementedError

    def list(
        self,
        *,
        page: PageRequest,
        candidate_id: Optional[int] = None,
        status: Optional[InvoiceStatus] = None,
    ) -> Page[Invoice]:
        raise NotImplementedError

    def summary_by_status(self) -> Sequence[dict]:
        """One row per (status, currency): status, currency, count, total_amount."""

        raise NotImplementedError
