"""Example: drive the service layer directly (no Flask).

Controllers are thin; the rules live in the services.
"""

import importlib

from config import get_settings_module

from src.recruit_portal.recruit_portal.aggregation.periods import build_monthly_periods
from src.recruit_portal.recruit_portal.common.pagination import PageRequest
from src.recruit_portal.recruit_portal.container import build_container
from src.recruit_portal.recruit_portal.core.context import Actor
from src.recruit_portal.recruit_portal.core.enums import Role


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)
    admin = Actor(user_id=1, role=Role.ADMIN)

    page = container.timesheet_service.list_all(admin, PageRequest.of(1, 5))
    for ts in page.items:
        print(ts.timesheet_id, ts.candidate_name, ts.week_start_date, ts.status.value, ts.total_weekly_amount)

    for month in build_monthly_periods(container.timesheets_repo.list_approved()):
        print(month.candidate_name, f"{month.year}-{month.month:02d}", month.total_hours, month.total_amount)


if __name__ == "__main__":
    main()
