from __future__ import annotations

import pytest

from src.recruit_portal.recruit_portal.core.enums import TimesheetStatus as S
from src.recruit_portal.recruit_portal.core.exceptions import StateConflictError
from src.recruit_portal.recruit_portal.timesheets import policy


@pytest.mark.parametrize(
    "current,target",
    [
        (S.DRAFT, S.SUBMITTED),
        (S.REJECTED, S.SUBMITTED),
        (S.PENDING, S.SUBMITTED),
        (S.SUBMITTED, S.APPROVED),
        (S.PENDING, S.APPROVED),
        (S.SUBMITTED, S.REJECTED),
        (S.PENDING, S.REJECTED),
        (S.APPROVED, S.REJECTED),
        (S.APPROVED, S.PENDING),
    ],
)
def test_allowed_transitions(current, target):
    assert policy.can_transition(current, target)
    policy.ensure_transition(current, target)


@pytest.mark.parametrize(
    "current,target",
    [
        (S.APPROVED, S.APPROVED),
        (S.DRAFT, S.APPROVED),
        (S.REJECTED, S.APPROVED),
        (S.REJECTED, S.REJECTED),
        (S.DRAFT, S.REJECTED),
        (S.SUBMITTED, S.SUBMITTED),
        (S.APPROVED, S.SUBMITTED),
        (S.SUBMITTED, S.PENDING),
        (S.SUBMITTED, S.DRAFT),
    ],
)
def test_forbidden_transitions_conflict(current, target):
    assert not policy.can_transition(current, target)
    with pytest.raises(StateConflictError):
        policy.ensure_transition(current, target)
