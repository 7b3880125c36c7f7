from __future__ import annotations

from datetime import date

from flask import Flask

from ..common.web import (
    admin_required,
    candidate_required,
    current_actor,
    int_arg,
    json_body,
    login_required,
    ok,
    page_request,
    status_arg,
)
from ..container import Container
from ..core.enums import TimesheetStatus


def register(app: Flask, container: Container) -> None:
    service = container.timesheet_service

    def serialize(ts):
        return ts.to_dict(today=date.today())

    @app.route("/timesheets", methods=["POST"], endpoint="timesheets_create")
    @login_required
    def create_timesheet():
        ts = service.create(current_actor(), json_body())
        return ok(serialize(ts), 201, message="Timesheet saved")

    @app.route("/timesheets", methods=["GET"], endpoint="timesheets_list")
    @candidate_required
    def list_my_timesheets():
        page = service.list_mine(current_actor(), page_request(), status=status_arg(TimesheetStatus.normalize))
        return ok(**page.to_dict(serialize))

    @app.route("/timesheets/<int:timesheet_id>", methods=["GET"], endpoint="timesheets_get")
    @login_required
    def get_timesheet(timesheet_id: int):
        return ok(serialize(service.get(current_actor(), timesheet_id)))

    @app.route("/timesheets/<int:timesheet_id>", methods=["PUT"], endpoint="timesheets_update")
    @login_required
    def update_timesheet(timesheet_id: int):
        ts = service.update(current_actor(), timesheet_id, json_body())
        return ok(serialize(ts), message="Timesheet updated")

    @app.route("/timesheets/<int:timesheet_id>", methods=["DELETE"], endpoint="timesheets_delete")
    @login_required
    def delete_timesheet(timesheet_id: int):
        service.delete(current_actor(), timesheet_id)
        return ok(message="Timesheet deleted")

    @app.route("/timesheets/<int:timesheet_id>/submit", methods=["PATCH"], endpoint="timesheets_submit")
    @login_required
    def submit_timesheet(timesheet_id: int):
        ts = service.submit(current_actor(), timesheet_id)
        return ok(serialize(ts), message="Timesheet submitted")

    # -------- admin review --------
    @app.route("/admin/timesheets", methods=["GET"], endpoint="admin_timesheets")
    @admin_required
    def admin_list_timesheets():
        page = service.list_all(
            current_actor(),
            page_request(),
            status=status_arg(TimesheetStatus.normalize),
            candidate_id=int_arg("candidate_id"),
        )
        return ok(**page.to_dict(serialize))

    @app.route("/admin/timesheets/<int:timesheet_id>/approve", methods=["PATCH"], endpoint="admin_timesheet_approve")
    @admin_required
    def approve_timesheet(timesheet_id: int):
        ts = service.approve(current_actor(), timesheet_id)
        return ok(serialize(ts), message="Timesheet approved")

    @app.route("/admin/timesheets/<int:timesheet_id>/reject", methods=["PATCH"], endpoint="admin_timesheet_reject")
    @admin_required
    def reject_timesheet(timesheet_id: int):
        data = json_body()
        ts = service.reject(current_actor(), timesheet_id, data.get("rejection_reason") or data.get("reason"))
        return ok(serialize(ts), message="Timesheet rejected")

    @app.route("/admin/timesheets/<int:timesheet_id>/revert", methods=["PATCH"], endpoint="admin_timesheet_revert")
    @admin_required
    def revert_timesheet(timesheet_id: int):
        ts = service.revert_approval(current_actor(), timesheet_id, json_body().get("note"))
        return ok(serialize(ts), message="Approval reverted")
