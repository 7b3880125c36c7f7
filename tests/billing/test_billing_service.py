from __future__ import annotations

from decimal import Decimal

import pytest

from src.recruit_portal.recruit_portal.common.pagination import PageRequest
from src.recruit_portal.recruit_portal.core.enums import EmploymentType
from src.recruit_portal.recruit_portal.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from tests.fakes import (
    ADMIN,
    ADMIN_ID,
    CANDIDATE,
    CANDIDATE_ID,
    OTHER_CANDIDATE,
    OTHER_CANDIDATE_ID,
    make_container,
)


def test_new_config_for_candidate_with_defaults():
    c = make_container()

    config = c.billing_service.save_config(ADMIN, OTHER_CANDIDATE_ID, {"hourly_rate": "40"})

    assert config.hourly_rate == Decimal("40")
    assert config.working_days_per_week == 5
    assert config.working_hours_per_week == 40
    assert config.currency == "INR"
    assert config.employment_type == EmploymentType.CONTRACT
    assert config.pay_rate is None
    assert config.margin_per_hour == Decimal("0.00")


def test_saving_replaces_active_config():
    c = make_container()

    c.billing_service.save_config(ADMIN, CANDIDATE_ID, {"hourly_rate": "30", "working_days_per_week": 6})

    active = [r for r in c.billing_repo.rows if r.candidate_id == CANDIDATE_ID and r.is_active]
    assert len(active) == 1
    assert active[0].hourly_rate == Decimal("30")
    assert active[0].working_days_per_week == 6
    # untouched fields carried over
    assert active[0].currency == "USD"
    assert active[0].pay_rate == Decimal("18.00")


def test_margin_and_monthly_profit():
    c = make_container()

    config = c.billing_service.get_config(ADMIN, CANDIDATE_ID)

    assert config.margin_per_hour == Decimal("7.00")
    assert config.profit_per_month == Decimal("1120.00")
    assert config.to_dict()["profit_per_month"] == "1120.00"


@pytest.mark.parametrize(
    "payload,field",
    [
        ({"hourly_rate": "0"}, "hourly_rate"),
        ({"hourly_rate": "-5"}, "hourly_rate"),
        ({"pay_rate": "-1"}, "pay_rate"),
        ({"working_days_per_week": 7}, "working_days_per_week"),
        ({"working_hours_per_week": 0}, "working_hours_per_week"),
        ({"currency": "usdollar"}, "currency"),
        ({"employment_type": "intern"}, "employment_type"),
    ],
)
def test_invalid_values_are_field_errors(payload, field):
    c = make_container()

    with pytest.raises(ValidationError) as exc:
        c.billing_service.save_config(ADMIN, CANDIDATE_ID, payload)

    assert field in exc.value.fields


def test_employment_type_and_currency_are_normalised():
    c = make_container()

    config = c.billing_service.save_config(
        ADMIN, CANDIDATE_ID, {"employment_type": "Full-Time", "currency": " eur "}
    )

    assert config.employment_type == EmploymentType.FULLTIME
    assert config.currency == "EUR"


def test_only_admins_manage_configs():
    c = make_container()

    with pytest.raises(AuthorizationError):
        c.billing_service.save_config(CANDIDATE, CANDIDATE_ID, {"hourly_rate": "99"})
    with pytest.raises(AuthorizationError):
        c.billing_service.list_configs(CANDIDATE, PageRequest.of(1, 10))
    with pytest.raises(AuthorizationError):
        c.billing_service.deactivate(CANDIDATE, CANDIDATE_ID)


def test_config_target_must_be_a_candidate():
    c = make_container()

    with pytest.raises(NotFoundError):
        c.billing_service.save_config(ADMIN, ADMIN_ID, {"hourly_rate": "10"})
    with pytest.raises(NotFoundError):
        c.billing_service.save_config(ADMIN, 999, {"hourly_rate": "10"})


def test_candidate_reads_only_own_config():
    c = make_container()

    assert c.billing_service.get_config(CANDIDATE, CANDIDATE_ID).candidate_id == CANDIDATE_ID
    with pytest.raises(AuthorizationError):
        c.billing_service.get_config(OTHER_CANDIDATE, CANDIDATE_ID)
    with pytest.raises(NotFoundError):
        c.billing_service.get_config(OTHER_CANDIDATE, OTHER_CANDIDATE_ID)


def test_deactivate_leaves_no_active_config():
    c = make_container()

    c.billing_service.deactivate(ADMIN, CANDIDATE_ID)

    with pytest.raises(ValidationError):
        c.billing_service.require_active(CANDIDATE_ID)
    with pytest.raises(NotFoundError):
        c.billing_service.deactivate(ADMIN, CANDIDATE_ID)
    assert c.billing_service.list_configs(ADMIN, PageRequest.of(1, 10)).total == 0
