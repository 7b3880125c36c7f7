from __future__ import annotations

from collections import defaultdict
from decimal import Decimal

from ..billing.model import money
from ..billing.repository import BillingRepository
from ..core.context import Actor
from ..core.enums import InvoiceStatus
from ..core.exceptions import AuthorizationError
from ..invoices.repository import InvoiceRepository
from ..timesheets.repository import TimesheetRepository


class DashboardService:
    """Admin analytics: workload by status, approved totals, invoicing position."""

    def __init__(
        self,
        timesheets: TimesheetRepository,
        invoices: InvoiceRepository,
        billing: BillingRepository,
    ):
        self._timesheets = timesheets
        self._invoices = invoices
        self._billing = billing

    def summary(self, actor: Actor) -> dict:
        if not actor.is_admin:
            raise AuthorizationError("Admin access required")

        ts_counts = self._timesheets.count_by_status()

        approved = [
            {
                "currency": row["currency"],
                "total_hours": f"{row['total_hours']:.1f}",
                "total_amount": f"{money(row['total_amount'])}",
            }
            for row in self._timesheets.approved_totals()
        ]

        # legacy statuses normalise onto the same key, so merge rows
        counts: dict[InvoiceStatus, int] = {s: 0 for s in InvoiceStatus}
        amounts: dict[InvoiceStatus, dict[str, Decimal]] = {s: defaultdict(Decimal) for s in InvoiceStatus}
        for row in self._invoices.summary_by_status():
            counts[row["status"]] += int(row["count"])
            amounts[row["status"]][row["currency"]] += row["total_amount"]

        return {
            "timesheets": {
                "by_status": {s.value: int(ts_counts.get(s, 0)) for s in ts_counts},
                "total": sum(ts_counts.values()),
                "approved_totals": approved,
            },
            "invoices": {
                "by_status": {
                    s.value: {
                        "count": counts[s],
                        "amounts": {cur: f"{money(v)}" for cur, v in sorted(amounts[s].items())},
                    }
                    for s in InvoiceStatus
                },
                "total": sum(counts.values()),
            },
            "billing": {"active_configs": self._billing.count_active()},
        }
