from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional, Sequence

from .aggregation.service import AggregationService
from .audit.mysql_audit_repository import MySQLAuditRepository
from .audit.repository import AuditRepository
from .audit.service import AuditService
from .billing.mysql_billing_repository import MySQLBillingRepository
from .billing.repository import BillingRepository
from .billing.service import BillingService
from .common.datetime_utils import now_local
from .core.constants import INVOICE_DUE_DAYS
from .dashboard.service import DashboardService
from .database.connection import DBConfig, DatabaseConnection
from .invoices.mysql_invoice_repository import MySQLInvoiceRepository
from .invoices.repository import InvoiceRepository
from .invoices.service import InvoiceService
from .notifications.notifier import Notifier, build_notifier
from .timesheets.mysql_timesheet_repository import MySQLTimesheetRepository
from .timesheets.repository import TimesheetRepository
from .timesheets.service import TimesheetService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]
    notifier: Notifier

    users_repo: UserRepository
    billing_repo: BillingRepository
    timesheets_repo: TimesheetRepository
    invoices_repo: InvoiceRepository
    audit_repo: AuditRepository

    auth_service: AuthService
    billing_service: BillingService
    audit_service: AuditService
    timesheet_service: TimesheetService
    aggregation_service: AggregationService
    invoice_service: InvoiceService
    dashboard_service: DashboardService


def assemble(
    *,
    users_repo: UserRepository,
    billing_repo: BillingRepository,
    timesheets_repo: TimesheetRepository,
    invoices_repo: InvoiceRepository,
    audit_repo: AuditRepository,
    notifier: Notifier,
    conn: Optional[DatabaseConnection] = None,
    admin_emails: Sequence[str] = (),
    invoice_due_days: int = INVOICE_DUE_DAYS,
    clock: Callable[[], datetime] = now_local,
) -> Container:
    """Wire services over the given repositories (MySQL in the app, in-memory fakes in tests)."""
    auth_service = AuthService(users_repo, notifier)
    billing_service = BillingService(billing_repo, users_repo)
    audit_service = AuditService(audit_repo)
    timesheet_service = TimesheetService(
        timesheets_repo,
        billing_service,
        users_repo,
        notifier,
        audit_service,
        admin_emails=admin_emails,
        clock=clock,
    )
    aggregation_service = AggregationService(timesheets_repo)
    invoice_service = InvoiceService(
        invoices_repo,
        timesheets_repo,
        users_repo,
        notifier,
        audit_service,
        due_days=invoice_due_days,
        clock=clock,
    )
    dashboard_service = DashboardService(timesheets_repo, invoices_repo, billing_repo)

    return Container(
        conn=conn,
        notifier=notifier,
        users_repo=users_repo,
        billing_repo=billing_repo,
        timesheets_repo=timesheets_repo,
        invoices_repo=invoices_repo,
        audit_repo=audit_repo,
        auth_service=auth_service,
        billing_service=billing_service,
        audit_service=audit_service,
        timesheet_service=timesheet_service,
        aggregation_service=aggregation_service,
        invoice_service=invoice_service,
        dashboard_service=dashboard_service,
    )


def build_container(
    *,
    db_config: dict,
    smtp_config: Optional[dict] = None,
    admin_emails: Sequence[str] = (),
    invoice_due_days: int = INVOICE_DUE_DAYS,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return assemble(
        conn=conn,
        users_repo=MySQLUserRepository(conn),
        billing_repo=MySQLBillingRepository(conn),
        timesheets_repo=MySQLTimesheetRepository(conn),
        invoices_repo=MySQLInvoiceRepository(conn),
        audit_repo=MySQLAuditRepository(conn),
        notifier=build_notifier(smtp_config),
        admin_emails=admin_emails,
        invoice_due_days=invoice_due_days,
    )
