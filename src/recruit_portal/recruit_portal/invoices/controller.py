from __future__ import annotations

from flask import Flask

from ..common.validators import parse_int
from ..common.web import (
    admin_required,
    candidate_required,
    current_actor,
    int_arg,
    json_body,
    ok,
    page_request,
    status_arg,
)
from ..container import Container
from ..core.enums import InvoiceStatus
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    service = container.invoice_service

    def serialize(invoice):
        return invoice.to_dict()

    @app.route("/admin/generate-invoice", methods=["POST"], endpoint="admin_generate_invoice")
    @admin_required
    def generate_invoice():
        data = json_body()
        timesheet_id = parse_int(data.get("timesheet_id"), "timesheet_id")
        if timesheet_id is None:
            raise ValidationError("timesheet_id is required", fields={"timesheet_id": "Required"})
        invoice = service.generate(current_actor(), timesheet_id, notes=data.get("notes"))
        return ok(serialize(invoice), 201, message="Invoice generated")

    @app.route("/admin/invoices", methods=["GET"], endpoint="admin_invoices")
    @admin_required
    def admin_list_invoices():
        page = service.list_all(
            current_actor(),
            page_request(),
            status=status_arg(InvoiceStatus.normalize),
            candidate_id=int_arg("candidate_id"),
        )
        return ok(**page.to_dict(serialize))

    @app.route("/admin/invoices/<int:invoice_id>", methods=["GET"], endpoint="admin_invoice_get")
    @admin_required
    def admin_get_invoice(invoice_id: int):
        return ok(serialize(service.get(current_actor(), invoice_id)))

    @app.route("/admin/invoices/<int:invoice_id>/status", methods=["PATCH"], endpoint="admin_invoice_status")
    @admin_required
    def update_invoice_status(invoice_id: int):
        data = json_body()
        invoice = service.update_status(
            current_actor(), invoice_id, data.get("status") or "", paid_date=data.get("paid_date")
        )
        return ok(serialize(invoice), message="Invoice updated")

    @app.route("/admin/invoices/<int:invoice_id>", methods=["DELETE"], endpoint="admin_invoice_delete")
    @admin_required
    def delete_invoice(invoice_id: int):
        service.delete(current_actor(), invoice_id)
        return ok(message="Invoice deleted")

    @app.route("/invoices", methods=["GET"], endpoint="invoices_mine")
    @candidate_required
    def my_invoices():
        page = service.list_mine(current_actor(), page_request(), status=status_arg(InvoiceStatus.normalize))
        return ok(**page.to_dict(serialize))
