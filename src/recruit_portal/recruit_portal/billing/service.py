from __future__ import annotations

import logging
import re
from typing import Any

from ..common.pagination import Page, PageRequest
from ..common.validators import parse_int, require_positive, to_decimal
from ..core.constants import DEFAULT_CURRENCY, DEFAULT_WORKING_DAYS, DEFAULT_WORKING_HOURS_PER_WEEK
from ..core.context import Actor
from ..core.enums import EmploymentType, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..users.repository import UserRepository
from .model import BillingConfig
from .repository import BillingRepository

logger = logging.getLogger(__name__)

_CURRENCY_RE = re.compile(r"^[A-Z]{3}$")


class BillingService:
    """Use cases: read and maintain per-candidate billing configuration."""

    def __init__(self, billing: BillingRepository, users: UserRepository):
        self._billing = billing
        self._users = users

    def require_active(self, candidate_id: int) -> BillingConfig:
        """Active config for pricing; missing config is a client error, not a 404."""
        config = self._billing.get_active(int(candidate_id))
        if not config:
            raise ValidationError(
                "Billing configuration not found for candidate",
                fields={"candidate_id": "No active billing configuration"},
            )
        return config

    def get_config(self, actor: Actor, candidate_id: int) -> BillingConfig:
        if not actor.is_admin and actor.user_id != int(candidate_id):
            raise AuthorizationError("You can only view your own billing configuration")
        config = self._billing.get_active(int(candidate_id))
        if not config:
            raise NotFoundError("No active billing configuration")
        return config

    def list_configs(self, actor: Actor, page: PageRequest) -> Page[BillingConfig]:
        if not actor.is_admin:
            raise AuthorizationError("Admin access required")
        return self._billing.list_active(page)

    def save_config(self, actor: Actor, candidate_id: int, data: dict[str, Any]) -> BillingConfig:
        """Create or replace the candidate's active config.

        Fields missing from ``data`` keep the value of the current config.
        """
        if not actor.is_admin:
            raise AuthorizationError("Admin access required")

        candidate = self._users.get_by_id(int(candidate_id))
        if not candidate or candidate.role != Role.CANDIDATE:
            raise NotFoundError("Candidate not found")

        current = self._billing.get_active(int(candidate_id))

        def pick(key: str, fallback):
            return data[key] if key in data and data[key] is not None else fallback

        hourly_rate = require_positive(pick("hourly_rate", current.hourly_rate if current else None), "hourly_rate")

        raw_pay = pick("pay_rate", current.pay_rate if current else None)
        pay_rate = None
        if raw_pay is not None and str(raw_pay).strip() != "":
            pay_rate = to_decimal(raw_pay, "pay_rate")
            if pay_rate < 0:
                raise ValidationError("pay_rate cannot be negative", fields={"pay_rate": "Must be >= 0"})

        days = parse_int(
            pick("working_days_per_week", current.working_days_per_week if current else None),
            "working_days_per_week",
            default=DEFAULT_WORKING_DAYS,
        )
        if days not in (5, 6):
            raise ValidationError(
                "working_days_per_week must be 5 or 6", fields={"working_days_per_week": "Must be 5 or 6"}
            )

        hours_per_week = parse_int(
            pick("working_hours_per_week", current.working_hours_per_week if current else None),
            "working_hours_per_week",
            default=DEFAULT_WORKING_HOURS_PER_WEEK,
        )
        if hours_per_week <= 0:
            raise ValidationError(
                "working_hours_per_week must be positive", fields={"working_hours_per_week": "Must be positive"}
            )

        currency = str(pick("currency", current.currency if current else DEFAULT_CURRENCY)).strip().upper()
        if not _CURRENCY_RE.match(currency):
            raise ValidationError("currency must be a 3-letter code", fields={"currency": "Invalid currency"})

        employment_type = EmploymentType.normalize(
            str(pick("employment_type", current.employment_type.value if current else EmploymentType.CONTRACT.value))
        )

        self._billing.save_active(
            candidate_id=int(candidate_id),
            hourly_rate=hourly_rate,
            pay_rate=pay_rate,
            working_days_per_week=days,
            working_hours_per_week=hours_per_week,
            currency=currency,
            employment_type=employment_type,
        )
        logger.info(
            "Billing config saved for candidate %s by %s (rate=%s %s)",
            candidate_id, actor.user_id, hourly_rate, currency,
        )
        return self.require_active(int(candidate_id))

    def deactivate(self, actor: Actor, candidate_id: int) -> None:
        if not actor.is_admin:
            raise AuthorizationError("Admin access required")
        if not self._billing.deactivate(int(candidate_id)):
            raise NotFoundError("No active billing configuration")
        logger.info("Billing config deactivated for candidate %s by %s", candidate_id, actor.user_id)
