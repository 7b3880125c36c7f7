from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any, Optional, Sequence

from mysql.connector.errors import IntegrityError

from ..common.pagination import Page, PageRequest
from ..core.enums import InvoiceStatus
from ..core.exceptions import StateConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import (
    as_decimal,
    db_cursor,
    fetchall,
    fetchone,
    is_duplicate_key,
    status_equals,
    where_clause,
)
from .model import Invoice
from .numbering import latest_number
from .repository import InvoiceRepository

_SELECT = """
    SELECT i.invoice_id, i.invoice_number, i.candidate_id, u.full_name AS candidate_name,
           i.timesheet_id, i.period_start, i.period_end, i.total_hours, i.hourly_rate,
           i.total_amount, i.currency, i.status, i.issued_date, i.due_date, i.paid_date,
           i.notes, i.generated_by, i.created_at, i.updated_at
    FROM invoices i
    JOIN users u ON u.user_id = i.candidate_id
"""


def _to_invoice(r: dict[str, Any]) -> Invoice:
    return Invoice(
        invoice_id=int(r["invoice_id"]),
        invoice_number=r["invoice_number"],
        candidate_id=int(r["candidate_id"]),
        candidate_name=r.get("candidate_name"),
        timesheet_id=int(r["timesheet_id"]) if r.get("timesheet_id") is not None else None,
        period_start=r["period_start"],
        period_end=r["period_end"],
        total_hours=as_decimal(r["total_hours"]),
        hourly_rate=as_decimal(r["hourly_rate"]),
        total_amount=as_decimal(r["total_amount"]),
        currency=r["currency"],
        status=InvoiceStatus.normalize(r["status"]),
        issued_date=r["issued_date"],
        due_date=r["due_date"],
        paid_date=r.get("paid_date"),
        notes=r.get("notes"),
        generated_by=int(r["generated_by"]) if r.get("generated_by") is not None else None,
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLInvoiceRepository(InvoiceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def last_number_for_month(self, prefix: str) -> Optional[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT invoice_number FROM invoices
                WHERE invoice_number LIKE %s
                """,
                (prefix + "%",),
            )
            return latest_number(r["invoice_number"] for r in fetchall(cur))

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
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO invoices(
                        invoice_number, candidate_id, timesheet_id, period_start, period_end,
                        total_hours, hourly_rate, total_amount, currency, status,
                        issued_date, due_date, notes, generated_by
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        invoice_number,
                        int(candidate_id),
                        int(timesheet_id),
                        period_start,
                        period_end,
                        total_hours,
                        hourly_rate,
                        total_amount,
                        currency,
                        status.value,
                        issued_date,
                        due_date,
                        notes,
                        int(generated_by),
                    ),
                )
                return int(cur.lastrowid)
        except IntegrityError as e:
            if is_duplicate_key(e):
                raise StateConflictError("An invoice already exists for this timesheet")
            raise

    def get(self, invoice_id: int) -> Optional[Invoice]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE i.invoice_id=%s", (int(invoice_id),))
            r = fetchone(cur)
            return _to_invoice(r) if r else None

    def get_by_timesheet(self, timesheet_id: int) -> Optional[Invoice]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE i.timesheet_id=%s", (int(timesheet_id),))
            r = fetchone(cur)
            return _to_invoice(r) if r else None

    def update_status(
        self,
        *,
        invoice_id: int,
        expected_status: InvoiceStatus,
        status: InvoiceStatus,
        paid_date: Optional[date],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                UPDATE invoices SET status=%s, paid_date=%s
                WHERE invoice_id=%s AND {status_equals("status")}
                """,
                (status.value, paid_date, int(invoice_id), expected_status.value),
            )
            return cur.rowcount > 0

    def delete_draft(self, invoice_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"DELETE FROM invoices WHERE invoice_id=%s AND {status_equals('status')}",
                (int(invoice_id), InvoiceStatus.DRAFT.value),
            )
            return cur.rowcount > 0

    def list(
        self,
        *,
        page: PageRequest,
        candidate_id: Optional[int] = None,
        status: Optional[InvoiceStatus] = None,
    ) -> Page[Invoice]:
        conditions: list[str] = []
        params: list[object] = []
        if candidate_id is not None:
            conditions.append("i.candidate_id=%s")
            params.append(int(candidate_id))
        if status is not None:
            conditions.append(status_equals("i.status"))
            params.append(status.value)
        where = where_clause(conditions)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS total FROM invoices i {where}", tuple(params))
            total = int((fetchone(cur) or {}).get("total") or 0)
            cur.execute(
                f"""
                {_SELECT}
                {where}
                ORDER BY i.issued_date DESC, i.invoice_id DESC
                LIMIT %s OFFSET %s
                """,
                tuple(params + [page.limit, page.offset]),
            )
            items = [_to_invoice(r) for r in fetchall(cur)]
        return Page(items=items, total=total, page=page.page, limit=page.limit)

    def summary_by_status(self) -> Sequence[dict]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT status, currency, COUNT(*) AS total, SUM(total_amount) AS total_amount
                FROM invoices
                GROUP BY status, currency
                ORDER BY status, currency
                """
            )
            return [
                {
                    "status": InvoiceStatus.normalize(r["status"]),
                    "currency": r["currency"],
                    "count": int(r["total"]),
                    "total_amount": as_decimal(r["total_amount"]),
                }
                for r in fetchall(cur)
            ]
