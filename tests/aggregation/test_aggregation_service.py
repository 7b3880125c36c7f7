from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from src.recruit_portal.recruit_portal.common.pagination import PageRequest
from src.recruit_portal.recruit_portal.core.exceptions import AuthorizationError, ValidationError
from tests.fakes import ADMIN, CANDIDATE, CANDIDATE_ID, OTHER_CANDIDATE_ID, make_container, week_payload

PAGE = PageRequest.of(1, 10)


def _approved_weeks(c, *weeks):
    for start, hours in weeks:
        ts = c.timesheet_service.create(CANDIDATE, week_payload(start, hours=hours))
        c.timesheet_service.approve(ADMIN, ts.timesheet_id)


def test_biweekly_from_approved_weeks():
    c = make_container()
    _approved_weeks(c, (date(2024, 3, 4), (8, 8, 8, 8, 8, 0, 0)), (date(2024, 3, 11), (7, 7, 7, 7, 7, 0, 0)))

    page = c.aggregation_service.biweekly(ADMIN, PAGE)

    assert page.total == 1
    assert page.items[0].total_hours == Decimal("75")
    assert page.items[0].total_amount == Decimal("1875.00")


def test_aggregates_follow_admin_edits_of_approved_rows():
    c = make_container()
    _approved_weeks(c, (date(2024, 3, 4), (8, 8, 8, 8, 8, 0, 0)))
    ts_id = c.timesheet_service.list_mine(CANDIDATE, PAGE).items[0].timesheet_id

    before = c.aggregation_service.monthly(ADMIN, PAGE).items[0]
    assert before == c.aggregation_service.monthly(ADMIN, PAGE).items[0]

    c.timesheet_service.update(ADMIN, ts_id, {"friday_hours": 0})
    after = c.aggregation_service.monthly(ADMIN, PAGE).items[0]

    assert before.total_hours == Decimal("40")
    assert after.total_hours == Decimal("32")
    assert after.total_amount == Decimal("800.00")


def test_monthly_filters_by_year_and_month():
    c = make_container()
    _approved_weeks(
        c,
        (date(2024, 1, 29), (8, 8, 8, 8, 8, 0, 0)),
        (date(2024, 2, 5), (8, 8, 8, 8, 8, 0, 0)),
        (date(2025, 2, 3), (4, 4, 4, 4, 4, 0, 0)),
    )

    feb = c.aggregation_service.monthly(ADMIN, PAGE, month=2)
    feb_2024 = c.aggregation_service.monthly(ADMIN, PAGE, year=2024, month=2)

    assert [(p.year, p.month) for p in feb.items] == [(2025, 2), (2024, 2)]
    assert [(p.year, p.month) for p in feb_2024.items] == [(2024, 2)]
    assert c.aggregation_service.monthly(ADMIN, PAGE, candidate_id=OTHER_CANDIDATE_ID).total == 0

    with pytest.raises(ValidationError):
        c.aggregation_service.monthly(ADMIN, PAGE, month=13)


def test_candidate_sees_only_own_aggregates():
    c = make_container()
    _approved_weeks(c, (date(2024, 3, 4), (8, 8, 8, 8, 8, 0, 0)))

    mine = c.aggregation_service.biweekly(CANDIDATE, PAGE)

    assert mine.items[0].candidate_id == CANDIDATE_ID
    with pytest.raises(AuthorizationError):
        c.aggregation_service.biweekly(CANDIDATE, PAGE, candidate_id=OTHER_CANDIDATE_ID)


def test_biweekly_is_paginated_newest_first():
    c = make_container()
    _approved_weeks(c, *[(date(2024, 1, 1 + 7 * i), (8, 8, 8, 8, 8, 0, 0)) for i in range(4)])

    page = c.aggregation_service.biweekly(ADMIN, PageRequest.of(1, 1))

    assert page.total == 2
    assert page.pages == 2
    assert page.items[0].period_start == date(2024, 1, 15)
