from __future__ import annotations

from enum import Enum

from .exceptions import ValidationError


def _clean(value: str) -> str:
    return (value or "").strip().lower().replace("-", "_").replace(" ", "_")


class Role(str, Enum):
    """User role used for authorization."""

    ADMIN = "admin"
    CANDIDATE = "candidate"


class EmploymentType(str, Enum):
    FULLTIME = "fulltime"
    CONTRACT = "contract"

    @classmethod
    def normalize(cls, value: str) -> "EmploymentType":
        v = _clean(value).replace("_", "")
        if v in {"fulltime", "permanent"}:
            return cls.FULLTIME
        if v in {"contract", "subcontract", "contractor"}:
            return cls.CONTRACT
        raise ValidationError("Invalid employment type", fields={"employment_type": "Must be fulltime or contract"})


class TimesheetStatus(str, Enum):
    """Weekly timesheet workflow states."""

    DRAFT = "draft"
    SUBMITTED = "submitted"
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

    @classmethod
    def normalize(cls, value: str) -> "TimesheetStatus":
        """Map stored or client-supplied free text onto the closed set."""
        v = _clean(value)
        v = _TIMESHEET_SYNONYMS.get(v, v)
        try:
            return cls(v)
        except ValueError:
            raise ValidationError(f"Unknown timesheet status: {value!r}", fields={"status": "Unknown status"})


_TIMESHEET_SYNONYMS = {
    "pending_approval": "pending",
    "awaiting_approval": "pending",
    "approve": "approved",
    "reject": "rejected",
    "submit": "submitted",
}


class InvoiceStatus(str, Enum):
    DRAFT = "draft"
    SENT = "sent"
    PAID = "paid"
    OVERDUE = "overdue"

    @classmethod
    def normalize(cls, value: str) -> "InvoiceStatus":
        v = _clean(value)
        # Older rows were stored as "generated" before the draft state existed.
        if v == "generated":
            v = "draft"
        try:
            return cls(v)
        except ValueError:
            raise ValidationError(f"Unknown invoice status: {value!r}", fields={"status": "Unknown status"})
