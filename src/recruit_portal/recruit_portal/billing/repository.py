from __future__ import annotations

from decimal import Decimal
from typing import Optional, Protocol

from ..common.pagination import Page, PageRequest
from ..core.enums import EmploymentType
from .model import BillingConfig


class BillingRepository(Protocol):
    def get_active(self, candidate_id: int) -> Optional[BillingConfig]:
        raise NotImplementedError

    def save_active(
        self,
        *,
        candidate_id: int,
        hourly_rate: Decimal,
        pay_rate: Optional[Decimal],
        working_days_per_week: int,
        working_hours_per_week: int,
        currency: str,
        employment_type: EmploymentType,
    ) -> int:
        """Deactivate the current active config (if any) and insert a new active one."""

        raise NotImplementedError

    def deactivate(self, candidate_id: int) -> bool:
        raise NotImplementedError

    def list_active(self, page: PageRequest) -> Page[BillingConfig]:
        raise NotImplementedError

    def count_active(self) -> int:
        raise NotImplementedError
