from __future__ import annotations

import re
from datetime import date
from typing import Iterable, Optional

from ..core.constants import INVOICE_NUMBER_PREFIX

_NUMBER_RE = re.compile(rf"^{INVOICE_NUMBER_PREFIX}-(\d{{4}})(\d{{2}})-(\d{{4,}})$")


def month_prefix(issued: date) -> str:
    return f"{INVOICE_NUMBER_PREFIX}-{issued.year:04d}{issued.month:02d}-"


def format_invoice_number(issued: date, sequence: int) -> str:
    """INV-YYYYMM-NNNN, sequence restarting every issue month."""
    return f"{month_prefix(issued)}{int(sequence):04d}"


def parse_sequence(number: str) -> Optional[int]:
    m = _NUMBER_RE.match(number or "")
    return int(m.group(3)) if m else None


def next_invoice_number(issued: date, last_number: Optional[str]) -> str:
    seq = parse_sequence(last_number) if last_number else None
    return format_invoice_number(issued, (seq or 0) + 1)


def latest_number(numbers: Iterable[str]) -> Optional[str]:
    """Number with the highest numeric sequence (INV-202401-10000 beats INV-202401-9999)."""
    parsed = [(parse_sequence(n), n) for n in numbers]
    parsed = [(seq, n) for seq, n in parsed if seq is not None]
    return max(parsed)[1] if parsed else None
