from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Callable, Optional

from ..audit.service import AuditService
from ..common.datetime_utils import now_local, parse_iso_date
from ..common.pagination import Page, PageRequest
from ..core.constants import INVOICE_DUE_DAYS
from ..core.context import Actor
from ..core.enums import InvoiceStatus, TimesheetStatus
from ..core.exceptions import AuthorizationError, NotFoundError, StateConflictError, ValidationError
from ..notifications.notifier import Notifier
from ..timesheets.repository import TimesheetRepository
from ..users.repository import UserRepository
from .model import Invoice
from .numbering import month_prefix, next_invoice_number
from .repository import InvoiceRepository

logger = logging.getLogger(__name__)

ENTITY = "invoice"

# target status -> statuses it may be reached from; overdue is set by hand only
ALLOWED_SOURCES: dict[InvoiceStatus, frozenset[InvoiceStatus]] = {
    InvoiceStatus.SENT: frozenset({InvoiceStatus.DRAFT}),
    InvoiceStatus.OVERDUE: frozenset({InvoiceStatus.SENT}),
    InvoiceStatus.PAID: frozenset({InvoiceStatus.SENT, InvoiceStatus.OVERDUE}),
}


class InvoiceService:
    """Invoice generation from approved weeks and the invoice lifecycle."""

    def __init__(
        self,
        invoices: InvoiceRepository,
        timesheets: TimesheetRepository,
        users: UserRepository,
        notifier: Notifier,
        audit: AuditService,
        *,
        due_days: int = INVOICE_DUE_DAYS,
        clock: Callable[[], datetime] = now_local,
    ):
        self._invoices = invoices
        self._timesheets = timesheets
        self._users = users
        self._notifier = notifier
        self._audit = audit
        self._due_days = int(due_days)
        self._clock = clock

    @staticmethod
    def _require_admin(actor: Actor) -> None:
        if not actor.is_admin:
            raise AuthorizationError("Admin access required")

    def _require(self, invoice_id: int) -> Invoice:
        invoice = self._invoices.get(int(invoice_id))
        if not invoice:
            raise NotFoundError("Invoice not found")
        return invoice

    def generate(self, actor: Actor, timesheet_id: int, *, notes: Optional[str] = None) -> Invoice:
        self._require_admin(actor)
        ts = self._timesheets.get(int(timesheet_id))
        if not ts:
            raise NotFoundError("Timesheet not found")
        if ts.status != TimesheetStatus.APPROVED:
            raise StateConflictError("Only approved timesheets can be invoiced")
        if self._invoices.get_by_timesheet(ts.timesheet_id):
            raise StateConflictError("An invoice already exists for this timesheet")

        issued = self._clock().date()
        number = next_invoice_number(issued, self._invoices.last_number_for_month(month_prefix(issued)))
        invoice_id = self._invoices.create(
            invoice_number=number,
            candidate_id=ts.candidate_id,
            timesheet_id=ts.timesheet_id,
            period_start=ts.week_start_date,
            period_end=ts.week_end_date,
            total_hours=ts.total_weekly_hours,
            hourly_rate=ts.hourly_rate,
            total_amount=ts.total_weekly_amount,
            currency=ts.currency,
            status=InvoiceStatus.DRAFT,
            issued_date=issued,
            due_date=issued + timedelta(days=self._due_days),
            notes=(notes or "").strip() or None,
            generated_by=actor.user_id,
        )
        logger.info(
            "Invoice %s generated for timesheet %s (%s %s) by %s",
            number, ts.timesheet_id, ts.total_weekly_amount, ts.currency, actor.user_id,
        )
        return self._require(invoice_id)

    def update_status(
        self,
        actor: Actor,
        invoice_id: int,
        status: str,
        *,
        paid_date: Optional[str] = None,
    ) -> Invoice:
        """Move along draft -> sent -> paid | overdue, overdue -> paid.

        Works on the stored snapshot only; the source timesheet is not re-read.
        """
        self._require_admin(actor)
        if not status or not str(status).strip():
            raise ValidationError("status is required", fields={"status": "Required"})
        target = InvoiceStatus.normalize(str(status))
        invoice = self._require(invoice_id)

        if invoice.status not in ALLOWED_SOURCES.get(target, frozenset()):
            raise StateConflictError(f"Cannot move invoice from {invoice.status.value} to {target.value}")

        paid: Optional[date] = None
        if target == InvoiceStatus.PAID:
            paid = parse_iso_date(paid_date, "paid_date") if paid_date else self._clock().date()

        if not self._invoices.update_status(
            invoice_id=invoice.invoice_id, expected_status=invoice.status, status=target, paid_date=paid
        ):
            raise StateConflictError("Invoice was changed by another request, reload and try again")

        self._audit.record(
            actor,
            "invoice.status_changed",
            entity_type=ENTITY,
            entity_id=invoice.invoice_id,
            details={"from": invoice.status.value, "to": target.value, "paid_date": paid},
        )
        logger.info("Invoice %s: %s -> %s", invoice.invoice_number, invoice.status.value, target.value)

        updated = self._require(invoice.invoice_id)
        if target == InvoiceStatus.SENT:
            self._notify_sent(updated)
        return updated

    def delete(self, actor: Actor, invoice_id: int) -> None:
        self._require_admin(actor)
        invoice = self._require(invoice_id)
        if invoice.status != InvoiceStatus.DRAFT or not self._invoices.delete_draft(invoice.invoice_id):
            raise StateConflictError("Only draft invoices can be deleted")
        logger.info("Invoice %s deleted by %s", invoice.invoice_number, actor.user_id)

    def get(self, actor: Actor, invoice_id: int) -> Invoice:
        invoice = self._require(invoice_id)
        if not actor.is_admin and invoice.candidate_id != actor.user_id:
            raise NotFoundError("Invoice not found")
        return invoice

    def list_all(
        self,
        actor: Actor,
        page: PageRequest,
        *,
        status: Optional[InvoiceStatus] = None,
        candidate_id: Optional[int] = None,
    ) -> Page[Invoice]:
        self._require_admin(actor)
        return self._invoices.list(page=page, candidate_id=candidate_id, status=status)

    def list_mine(
        self, actor: Actor, page: PageRequest, *, status: Optional[InvoiceStatus] = None
    ) -> Page[Invoice]:
        return self._invoices.list(page=page, candidate_id=actor.user_id, status=status)

    def _notify_sent(self, invoice: Invoice) -> None:
        candidate = self._users.get_by_id(invoice.candidate_id)
        if not candidate or not candidate.email:
            return
        self._notifier.send(
            to=[candidate.email],
            subject=f"Invoice {invoice.invoice_number}",
            body=(
                f"Hello {candidate.full_name},\n\n"
                f"Invoice {invoice.invoice_number} for {invoice.period_start.isoformat()} to "
                f"{invoice.period_end.isoformat()} has been issued: {invoice.total_amount} {invoice.currency}, "
                f"due {invoice.due_date.isoformat()}."
            ),
        )
