from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional, Sequence

from mysql.connector.errors import IntegrityError

from ..common.pagination import Page, PageRequest
from ..core.constants import WEEKDAY_KEYS
from ..core.enums import TimesheetStatus
from ..core.exceptions import ValidationError
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
from .model import DayHours, WeeklyTimesheet
from .repository import TimesheetRepository

_DAY_COLUMNS = ", ".join(f"t.{day}_hours" for day in WEEKDAY_KEYS)

_SELECT = f"""
    SELECT t.timesheet_id, t.candidate_id, u.full_name AS candidate_name,
           t.week_start_date, t.week_end_date, {_DAY_COLUMNS},
           t.total_weekly_hours, t.hourly_rate, t.total_weekly_amount, t.currency,
           t.status, t.rejection_reason, t.submitted_at, t.approved_at, t.approved_by,
           t.created_at, t.updated_at
    FROM weekly_timesheets t
    JOIN users u ON u.user_id = t.candidate_id
"""


def _to_timesheet(r: dict[str, Any]) -> WeeklyTimesheet:
    hours = DayHours(**{day: as_decimal(r[f"{day}_hours"]) for day in WEEKDAY_KEYS})
    return WeeklyTimesheet(
        timesheet_id=int(r["timesheet_id"]),
        candidate_id=int(r["candidate_id"]),
        candidate_name=r.get("candidate_name"),
        week_start_date=r["week_start_date"],
        week_end_date=r["week_end_date"],
        hours=hours,
        total_weekly_hours=as_decimal(r["total_weekly_hours"]),
        hourly_rate=as_decimal(r["hourly_rate"]),
        total_weekly_amount=as_decimal(r["total_weekly_amount"]),
        currency=r["currency"],
        status=TimesheetStatus.normalize(r["status"]),
        rejection_reason=r.get("rejection_reason"),
        submitted_at=r.get("submitted_at"),
        approved_at=r.get("approved_at"),
        approved_by=int(r["approved_by"]) if r.get("approved_by") is not None else None,
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLTimesheetRepository(TimesheetRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        candidate_id: int,
        week_start_date: date,
        week_end_date: date,
        hours: DayHours,
        total_weekly_hours: Decimal,
        hourly_rate: Decimal,
        total_weekly_amount: Decimal,
        currency: str,
        status: TimesheetStatus,
        submitted_at: Optional[datetime] = None,
    ) -> int:
        day_cols = ", ".join(f"{day}_hours" for day in WEEKDAY_KEYS)
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"""
                    INSERT INTO weekly_timesheets(
                        candidate_id, week_start_date, week_end_date, {day_cols},
                        total_weekly_hours, hourly_rate, total_weekly_amount, currency,
                        status, submitted_at
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        int(candidate_id),
                        week_start_date,
                        week_end_date,
                        *hours.as_list(),
                        total_weekly_hours,
                        hourly_rate,
                        total_weekly_amount,
                        currency,
                        status.value,
                        submitted_at,
                    ),
                )
                return int(cur.lastrowid)
        except IntegrityError as e:
            if is_duplicate_key(e):
                raise ValidationError(
                    "Timesheet already exists for this week",
                    fields={"week_start_date": "Duplicate week"},
                )
            raise

    def get(self, timesheet_id: int) -> Optional[WeeklyTimesheet]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE t.timesheet_id=%s", (int(timesheet_id),))
            r = fetchone(cur)
            return _to_timesheet(r) if r else None

    def exists_for_week(self, candidate_id: int, week_start_date: date) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT 1 FROM weekly_timesheets WHERE candidate_id=%s AND week_start_date=%s",
                (int(candidate_id), week_start_date),
            )
            return fetchone(cur) is not None

    def save(self, ts: WeeklyTimesheet, *, expected_status: TimesheetStatus) -> bool:
        day_sets = ", ".join(f"{day}_hours=%s" for day in WEEKDAY_KEYS)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                UPDATE weekly_timesheets
                SET {day_sets},
                    total_weekly_hours=%s, hourly_rate=%s, total_weekly_amount=%s, currency=%s,
                    status=%s, rejection_reason=%s, submitted_at=%s, approved_at=%s, approved_by=%s
                WHERE timesheet_id=%s AND {status_equals("status")}
                """,
                (
                    *ts.hours.as_list(),
                    ts.total_weekly_hours,
                    ts.hourly_rate,
                    ts.total_weekly_amount,
                    ts.currency,
                    ts.status.value,
                    ts.rejection_reason,
                    ts.submitted_at,
                    ts.approved_at,
                    ts.approved_by,
                    int(ts.timesheet_id),
                    expected_status.value,
                ),
            )
            # rowcount is 0 when nothing changed, so re-check the row exists with the new status
            if cur.rowcount > 0:
                return True
            cur.execute(
                "SELECT status FROM weekly_timesheets WHERE timesheet_id=%s",
                (int(ts.timesheet_id),),
            )
            r = fetchone(cur)
            return bool(r) and TimesheetStatus.normalize(r["status"]) == ts.status

    def delete(self, timesheet_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM weekly_timesheets WHERE timesheet_id=%s", (int(timesheet_id),))
            return cur.rowcount > 0

    def list(
        self,
        *,
        page: PageRequest,
        candidate_id: Optional[int] = None,
        status: Optional[TimesheetStatus] = None,
    ) -> Page[WeeklyTimesheet]:
        conditions: list[str] = []
        params: list[object] = []
        if candidate_id is not None:
            conditions.append("t.candidate_id=%s")
            params.append(int(candidate_id))
        if status is not None:
            conditions.append(status_equals("t.status"))
            params.append(status.value)
        where = where_clause(conditions)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS total FROM weekly_timesheets t {where}", tuple(params))
            total = int((fetchone(cur) or {}).get("total") or 0)
            cur.execute(
                f"""
                {_SELECT}
                {where}
                ORDER BY t.week_start_date DESC, t.timesheet_id DESC
                LIMIT %s OFFSET %s
                """,
                tuple(params + [page.limit, page.offset]),
            )
            items = [_to_timesheet(r) for r in fetchall(cur)]
        return Page(items=items, total=total, page=page.page, limit=page.limit)

    def list_approved(self, *, candidate_id: Optional[int] = None) -> Sequence[WeeklyTimesheet]:
        conditions = [status_equals("t.status")]
        params: list[object] = [TimesheetStatus.APPROVED.value]
        if candidate_id is not None:
            conditions.append("t.candidate_id=%s")
            params.append(int(candidate_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                {_SELECT}
                {where_clause(conditions)}
                ORDER BY t.candidate_id, t.week_start_date
                """,
                tuple(params),
            )
            return [_to_timesheet(r) for r in fetchall(cur)]

    def count_by_status(self) -> dict[TimesheetStatus, int]:
        counts = {s: 0 for s in TimesheetStatus}
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT status, COUNT(*) AS total FROM weekly_timesheets GROUP BY status")
            for r in fetchall(cur):
                status = TimesheetStatus.normalize(r["status"])
                counts[status] += int(r["total"])
        return counts

    def approved_totals(self) -> Sequence[dict]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT currency,
                       SUM(total_weekly_hours) AS total_hours,
                       SUM(total_weekly_amount) AS total_amount
                FROM weekly_timesheets
                WHERE {status_equals("status")}
                GROUP BY currency
                ORDER BY currency
                """,
                (TimesheetStatus.APPROVED.value,),
            )
            return [
                {
                    "currency": r["currency"],
                    "total_hours": as_decimal(r["total_hours"]),
                    "total_amount": as_decimal(r["total_amount"]),
                }
                for r in fetchall(cur)
            ]
