from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from ..core.constants import HOURS_STEP, MAX_DAY_HOURS
from ..core.exceptions import ValidationError


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required", fields={field_name: "Required"})
    return str(value).strip()


def to_decimal(value: Any, field_name: str) -> Decimal:
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a number", fields={field_name: "Not a number"})
    if value is None or (isinstance(value, str) and not value.strip()):
        return Decimal("0")
    try:
        result = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field_name} must be a number", fields={field_name: "Not a number"})
    if not result.is_finite():
        raise ValidationError(f"{field_name} must be a number", fields={field_name: "Not a number"})
    return result


def require_positive(value: Any, field_name: str) -> Decimal:
    d = to_decimal(value, field_name)
    if d <= 0:
        raise ValidationError(f"{field_name} must be greater than 0", fields={field_name: "Must be positive"})
    return d


def validate_day_hours(value: Any, field_name: str) -> Decimal:
    """Hours for one day: 0..24 in 0.5 steps."""
    hours = to_decimal(value, field_name)
    if hours < 0 or hours > MAX_DAY_HOURS:
        raise ValidationError(
            f"{field_name} must be between 0 and {MAX_DAY_HOURS}",
            fields={field_name: "Out of range"},
        )
    if hours % HOURS_STEP != 0:
        raise ValidationError(
            f"{field_name} must be a multiple of {HOURS_STEP}",
            fields={field_name: "Use 0.5 hour increments"},
        )
    return hours


def parse_int(value: Any, field_name: str, *, default: Optional[int] = None) -> Optional[int]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer", fields={field_name: "Not an integer"})
