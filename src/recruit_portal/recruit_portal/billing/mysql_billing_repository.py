from __future__ import annotations

from decimal import Decimal
from typing import Any, Optional

from ..common.pagination import Page, PageRequest
from ..core.enums import EmploymentType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, db_cursor, fetchall, fetchone
from .model import BillingConfig
from .repository import BillingRepository

_COLUMNS = """
    billing_id, candidate_id, hourly_rate, pay_rate, working_days_per_week,
    working_hours_per_week, currency, employment_type, is_active, created_at, updated_at
"""


def _to_config(r: dict[str, Any]) -> BillingConfig:
    return BillingConfig(
        billing_id=int(r["billing_id"]),
        candidate_id=int(r["candidate_id"]),
        hourly_rate=as_decimal(r["hourly_rate"]),
        pay_rate=as_decimal(r["pay_rate"]) if r.get("pay_rate") is not None else None,
        working_days_per_week=int(r["working_days_per_week"]),
        working_hours_per_week=int(r["working_hours_per_week"]),
        currency=r["currency"],
        employment_type=EmploymentType.normalize(r["employment_type"]),
        is_active=bool(r["is_active"]),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLBillingRepository(BillingRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_active(self, candidate_id: int) -> Optional[BillingConfig]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM billing_configs WHERE candidate_id=%s AND is_active=1",
                (int(candidate_id),),
            )
            r = fetchone(cur)
            return _to_config(r) if r else None

    def save_active(
        self,
        *,
        candidate_id: int,
        hourly_rate: Decimal,
        pay_rate: Optional[Decimal],
        working_days_per_week: int,
        working_hours_per_week: int,
        currency: str,
        employment_type: EmploymentType,
    ) -> int:
        # One transaction: the unique key on active_candidate_id rejects a second active row.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE billing_configs SET is_active=0 WHERE candidate_id=%s AND is_active=1",
                (int(candidate_id),),
            )
            cur.execute(
                """
                INSERT INTO billing_configs(
                    candidate_id, hourly_rate, pay_rate, working_days_per_week,
                    working_hours_per_week, currency, employment_type, is_active
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,1)
                """,
                (
                    int(candidate_id),
                    hourly_rate,
                    pay_rate,
                    int(working_days_per_week),
                    int(working_hours_per_week),
                    currency,
                    employment_type.value,
                ),
            )
            return int(cur.lastrowid)

    def deactivate(self, candidate_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE billing_configs SET is_active=0 WHERE candidate_id=%s AND is_active=1",
                (int(candidate_id),),
            )
            return cur.rowcount > 0

    def list_active(self, page: PageRequest) -> Page[BillingConfig]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS total FROM billing_configs WHERE is_active=1")
            total = int((fetchone(cur) or {}).get("total") or 0)
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM billing_configs
                WHERE is_active=1
                ORDER BY created_at DESC, billing_id DESC
                LIMIT %s OFFSET %s
                """,
                (page.limit, page.offset),
            )
            items = [_to_config(r) for r in fetchall(cur)]
        return Page(items=items, total=total, page=page.page, limit=page.limit)

    def count_active(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS total FROM billing_configs WHERE is_active=1")
            return int((fetchone(cur) or {}).get("total") or 0)
