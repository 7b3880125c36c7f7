from __future__ import annotations

from datetime import date, datetime, timedelta

from ..core.exceptions import ValidationError


def parse_iso_date(value: str, field_name: str = "date") -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime((value or "").strip()[:10], "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"{field_name} must be YYYY-MM-DD", fields={field_name: "Invalid date"})


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def week_start(d: date) -> date:
    """Monday of the week containing ``d``."""
    return d - timedelta(days=d.weekday())


def week_end(start: date) -> date:
    return start + timedelta(days=6)


def month_key(d: date) -> tuple[int, int]:
    return d.year, d.month
