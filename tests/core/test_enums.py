from __future__ import annotations

import pytest

from src.recruit_portal.recruit_portal.core.enums import EmploymentType, InvoiceStatus, TimesheetStatus
from src.recruit_portal.recruit_portal.core.exceptions import ValidationError


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("approved", TimesheetStatus.APPROVED),
        (" Approved ", TimesheetStatus.APPROVED),
        ("PENDING", TimesheetStatus.PENDING),
        ("pending-approval", TimesheetStatus.PENDING),
        ("Pending Approval", TimesheetStatus.PENDING),
        ("pending_approval", TimesheetStatus.PENDING),
        ("draft", TimesheetStatus.DRAFT),
    ],
)
def test_timesheet_status_normalisation(raw, expected):
    assert TimesheetStatus.normalize(raw) == expected


@pytest.mark.parametrize("raw", ["", "done", "archived"])
def test_unknown_timesheet_status_is_rejected(raw):
    with pytest.raises(ValidationError) as exc:
        TimesheetStatus.normalize(raw)
    assert "status" in exc.value.fields


def test_legacy_generated_invoice_status_is_draft():
    assert InvoiceStatus.normalize("generated") == InvoiceStatus.DRAFT
    assert InvoiceStatus.normalize("Overdue") == InvoiceStatus.OVERDUE


def test_employment_type_synonyms():
    assert EmploymentType.normalize("full_time") == EmploymentType.FULLTIME
    assert EmploymentType.normalize("Subcontract") == EmploymentType.CONTRACT
