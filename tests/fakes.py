"""In-memory repositories and helpers shared by the test modules."""

from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from werkzeug.security import generate_password_hash

from src.recruit_portal.recruit_portal.billing.model import BillingConfig
from src.recruit_portal.recruit_portal.common.pagination import Page, PageRequest, paginate
from src.recruit_portal.recruit_portal.container import Container, assemble
from src.recruit_portal.recruit_portal.core.context import Actor
from src.recruit_portal.recruit_portal.core.enums import EmploymentType, InvoiceStatus, Role, TimesheetStatus
from src.recruit_portal.recruit_portal.core.exceptions import StateConflictError, ValidationError
from src.recruit_portal.recruit_portal.audit.model import AuditEntry
from src.recruit_portal.recruit_portal.invoices.model import Invoice
from src.recruit_portal.recruit_portal.invoices.numbering import latest_number
from src.recruit_portal.recruit_portal.timesheets.model import WeeklyTimesheet
from src.recruit_portal.recruit_portal.users.model import User

ADMIN_ID = 1
CANDIDATE_ID = 2
OTHER_CANDIDATE_ID = 3

ADMIN = Actor(user_id=ADMIN_ID, role=Role.ADMIN)
CANDIDATE = Actor(user_id=CANDIDATE_ID, role=Role.CANDIDATE)
OTHER_CANDIDATE = Actor(user_id=OTHER_CANDIDATE_ID, role=Role.CANDIDATE)

PASSWORD = "secret123"


class FakeClock:
    def __init__(self, now: datetime = datetime(2024, 3, 20, 9, 0, 0)):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


class FakeUserRepo:
    def __init__(self, users: Optional[list[User]] = None):
        if users is None:
            pw = generate_password_hash(PASSWORD)
            users = [
                User(ADMIN_ID, "Ada Admin", "admin", "admin@example.com", pw, Role.ADMIN),
                User(CANDIDATE_ID, "Cam Candidate", "cam", "cam@example.com", pw, Role.CANDIDATE),
                User(OTHER_CANDIDATE_ID, "Oli Other", "oli", "oli@example.com", pw, Role.CANDIDATE),
            ]
        self._users = {u.user_id: u for u in users}

    def get_by_id(self, user_id):
        return self._users.get(int(user_id))

    def get_by_username(self, username):
        return next((u for u in self._users.values() if u.username == username), None)

    def list_admin_emails(self):
        return [u.email for u in self._users.values() if u.role == Role.ADMIN and u.is_active]

    def name_of(self, user_id) -> Optional[str]:
        u = self._users.get(int(user_id))
        return u.full_name if u else None


class FakeBillingRepo:
    def __init__(self):
        self._next_id = 1
        self.rows: list[BillingConfig] = []

    def get_active(self, candidate_id):
        return next((c for c in self.rows if c.candidate_id == int(candidate_id) and c.is_active), None)

    def save_active(
        self,
        *,
        candidate_id,
        hourly_rate,
        pay_rate,
        working_days_per_week,
        working_hours_per_week,
        currency,
        employment_type,
    ):
        self.deactivate(candidate_id)
        bid = self._next_id
        self._next_id += 1
        self.rows.append(
            BillingConfig(
                billing_id=bid,
                candidate_id=int(candidate_id),
                hourly_rate=Decimal(hourly_rate),
                pay_rate=pay_rate,
                working_days_per_week=int(working_days_per_week),
                working_hours_per_week=int(working_hours_per_week),
                currency=currency,
                employment_type=employment_type,
                is_active=True,
                created_at=datetime(2024, 1, 1, 8, 0, 0),
            )
        )
        return bid

    def deactivate(self, candidate_id):
        changed = False
        for i, c in enumerate(self.rows):
            if c.candidate_id == int(candidate_id) and c.is_active:
                self.rows[i] = replace(c, is_active=False)
                changed = True
        return changed

    def list_active(self, page: PageRequest) -> Page[BillingConfig]:
        return paginate([c for c in self.rows if c.is_active], page)

    def count_active(self):
        return sum(1 for c in self.rows if c.is_active)


class FakeTimesheetRepo:
    def __init__(self, users: FakeUserRepo):
        self._users = users
        self._next_id = 1
        self.rows: dict[int, WeeklyTimesheet] = {}

    def create(
        self,
        *,
        candidate_id,
        week_start_date,
        week_end_date,
        hours,
        total_weekly_hours,
        hourly_rate,
        total_weekly_amount,
        currency,
        status,
        submitted_at=None,
    ):
        if self.exists_for_week(candidate_id, week_start_date):
            raise ValidationError("Timesheet already exists for this week")
        tid = self._next_id
        self._next_id += 1
        self.rows[tid] = WeeklyTimesheet(
            timesheet_id=tid,
            candidate_id=int(candidate_id),
            candidate_name=self._users.name_of(candidate_id),
            week_start_date=week_start_date,
            week_end_date=week_end_date,
            hours=hours,
            total_weekly_hours=total_weekly_hours,
            hourly_rate=hourly_rate,
            total_weekly_amount=total_weekly_amount,
            currency=currency,
            status=status,
            submitted_at=submitted_at,
        )
        return tid

    def get(self, timesheet_id):
        return self.rows.get(int(timesheet_id))

    def exists_for_week(self, candidate_id, week_start_date):
        return any(
            r.candidate_id == int(candidate_id) and r.week_start_date == week_start_date for r in self.rows.values()
        )

    def save(self, ts, *, expected_status):
        stored = self.rows.get(ts.timesheet_id)
        if not stored or stored.status != expected_status:
            return False
        self.rows[ts.timesheet_id] = ts
        return True

    def delete(self, timesheet_id):
        return self.rows.pop(int(timesheet_id), None) is not None

    def list(self, *, page, candidate_id=None, status=None):
        rows = [
            r
            for r in self.rows.values()
            if (candidate_id is None or r.candidate_id == int(candidate_id)) and (status is None or r.status == status)
        ]
        rows.sort(key=lambda r: (r.week_start_date, r.timesheet_id), reverse=True)
        return paginate(rows, page)

    def list_approved(self, *, candidate_id=None):
        rows = [
            r
            for r in self.rows.values()
            if r.status == TimesheetStatus.APPROVED and (candidate_id is None or r.candidate_id == int(candidate_id))
        ]
        return sorted(rows, key=lambda r: (r.candidate_id, r.week_start_date))

    def count_by_status(self):
        counts = {s: 0 for s in TimesheetStatus}
        for r in self.rows.values():
            counts[r.status] += 1
        return counts

    def approved_totals(self):
        totals: dict[str, dict] = {}
        for r in self.list_approved():
            row = totals.setdefault(
                r.currency, {"currency": r.currency, "total_hours": Decimal("0"), "total_amount": Decimal("0")}
            )
            row["total_hours"] += r.total_weekly_hours
            row["total_amount"] += r.total_weekly_amount
        return [totals[k] for k in sorted(totals)]


class FakeInvoiceRepo:
    def __init__(self, users: FakeUserRepo):
        self._users = users
        self._next_id = 1
        self.rows: dict[int, Invoice] = {}

    def last_number_for_month(self, prefix):
        return latest_number(i.invoice_number for i in self.rows.values() if i.invoice_number.startswith(prefix))

    def create(self, *, invoice_number, candidate_id, timesheet_id, generated_by, **fields):
        if any(i.timesheet_id == int(timesheet_id) or i.invoice_number == invoice_number for i in self.rows.values()):
            raise StateConflictError("An invoice already exists for this timesheet")
        iid = self._next_id
        self._next_id += 1
        self.rows[iid] = Invoice(
            invoice_id=iid,
            invoice_number=invoice_number,
            candidate_id=int(candidate_id),
            candidate_name=self._users.name_of(candidate_id),
            timesheet_id=int(timesheet_id),
            generated_by=int(generated_by),
            **fields,
        )
        return iid

    def get(self, invoice_id):
        return self.rows.get(int(invoice_id))

    def get_by_timesheet(self, timesheet_id):
        return next((i for i in self.rows.values() if i.timesheet_id == int(timesheet_id)), None)

    def update_status(self, *, invoice_id, expected_status, status, paid_date):
        inv = self.rows.get(int(invoice_id))
        if not inv or inv.status != expected_status:
            return False
        self.rows[inv.invoice_id] = replace(inv, status=status, paid_date=paid_date)
        return True

    def delete_draft(self, invoice_id):
        inv = self.rows.get(int(invoice_id))
        if not inv or inv.status != InvoiceStatus.DRAFT:
            return False
        del self.rows[inv.invoice_id]
        return True

    def list(self, *, page, candidate_id=None, status=None):
        rows = [
            i
            for i in self.rows.values()
            if (candidate_id is None or i.candidate_id == int(candidate_id)) and (status is None or i.status == status)
        ]
        rows.sort(key=lambda i: (i.issued_date, i.invoice_id), reverse=True)
        return paginate(rows, page)

    def summary_by_status(self):
        out: dict[tuple, dict] = {}
        for i in self.rows.values():
            row = out.setdefault(
                (i.status, i.currency),
                {"status": i.status, "currency": i.currency, "count": 0, "total_amount": Decimal("0")},
            )
            row["count"] += 1
            row["total_amount"] += i.total_amount
        return list(out.values())


class FakeAuditRepo:
    def __init__(self):
        self.entries: list[AuditEntry] = []

    def add(self, *, actor_id, action, entity_type, entity_id, details):
        entry = AuditEntry(
            audit_id=len(self.entries) + 1,
            actor_id=int(actor_id),
            action=action,
            entity_type=entity_type,
            entity_id=int(entity_id),
            details=dict(details),
            created_at=datetime(2024, 3, 20, 9, 0, 0),
        )
        self.entries.append(entry)
        return entry.audit_id

    def list(self, *, page, entity_type=None, entity_id=None):
        rows = [
            e
            for e in reversed(self.entries)
            if (entity_type is None or e.entity_type == entity_type) and (entity_id is None or e.entity_id == entity_id)
        ]
        return paginate(rows, page)


class RecordingNotifier:
    def __init__(self):
        self.sent: list[dict] = []

    def send(self, *, to, subject, body):
        self.sent.append({"to": list(to), "subject": subject, "body": body})
        return True

    def subjects(self) -> list[str]:
        return [m["subject"] for m in self.sent]


def make_container(*, clock: Optional[FakeClock] = None, rate: str = "25.00", days: int = 5) -> Container:
    """Container over fakes with an active 25 USD/h config for the default candidate."""
    users = FakeUserRepo()
    billing = FakeBillingRepo()
    billing.save_active(
        candidate_id=CANDIDATE_ID,
        hourly_rate=Decimal(rate),
        pay_rate=Decimal("18.00"),
        working_days_per_week=days,
        working_hours_per_week=40,
        currency="USD",
        employment_type=EmploymentType.CONTRACT,
    )
    return assemble(
        users_repo=users,
        billing_repo=billing,
        timesheets_repo=FakeTimesheetRepo(users),
        invoices_repo=FakeInvoiceRepo(users),
        audit_repo=FakeAuditRepo(),
        notifier=RecordingNotifier(),
        clock=clock or FakeClock(),
    )


def week_payload(week_start: date, hours=(8, 8, 8, 8, 8, 0, 0), **extra) -> dict:
    return {"week_start_date": week_start.isoformat(), "day_hours": list(hours), **extra}
