from __future__ import annotations

from decimal import Decimal

import pytest

from src.recruit_portal.recruit_portal.audit.model import dump_details, load_details
from src.recruit_portal.recruit_portal.audit.service import AuditService
from src.recruit_portal.recruit_portal.common.pagination import PageRequest
from src.recruit_portal.recruit_portal.core.exceptions import AuthorizationError
from tests.fakes import ADMIN, CANDIDATE, FakeAuditRepo


def test_record_and_filter_by_entity():
    svc = AuditService(FakeAuditRepo())
    svc.record(ADMIN, "timesheet.admin_edit", entity_type="weekly_timesheet", entity_id=4, details={"a": 1})
    svc.record(ADMIN, "invoice.status_changed", entity_type="invoice", entity_id=4)

    page = svc.list_entries(ADMIN, PageRequest.of(1, 10), entity_type="invoice")

    assert [e.action for e in page.items] == ["invoice.status_changed"]
    assert svc.list_entries(ADMIN, PageRequest.of(1, 10), entity_id=4).total == 2


def test_audit_is_admin_only():
    with pytest.raises(AuthorizationError):
        AuditService(FakeAuditRepo()).list_entries(CANDIDATE, PageRequest.of(1, 10))


def test_details_round_trip_through_json_text():
    raw = dump_details({"amount": Decimal("10.50")})

    assert load_details(raw) == {"amount": "10.50"}
    assert load_details(None) == {}
    assert load_details("not json") == {"raw": "not json"}
