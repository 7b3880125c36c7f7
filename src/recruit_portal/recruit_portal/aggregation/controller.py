from __future__ import annotations

from flask import Flask

from ..common.web import admin_required, candidate_required, current_actor, int_arg, ok, page_request
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.aggregation_service

    def serialize(period):
        return period.to_dict()

    @app.route("/timesheets/biweekly", methods=["GET"], endpoint="timesheets_biweekly")
    @candidate_required
    def my_biweekly():
        return ok(**service.biweekly(current_actor(), page_request()).to_dict(serialize))

    @app.route("/timesheets/monthly", methods=["GET"], endpoint="timesheets_monthly")
    @candidate_required
    def my_monthly():
        page = service.monthly(current_actor(), page_request(), year=int_arg("year"), month=int_arg("month"))
        return ok(**page.to_dict(serialize))

    @app.route("/admin/biweekly-timesheets", methods=["GET"], endpoint="admin_biweekly")
    @admin_required
    def admin_biweekly():
        page = service.biweekly(current_actor(), page_request(), candidate_id=int_arg("candidate_id"))
        return ok(**page.to_dict(serialize))

    @app.route("/admin/monthly-timesheets", methods=["GET"], endpoint="admin_monthly")
    @admin_required
    def admin_monthly():
        page = service.monthly(
            current_actor(),
            page_request(),
            candidate_id=int_arg("candidate_id"),
            year=int_arg("year"),
            month=int_arg("month"),
        )
        return ok(**page.to_dict(serialize))
