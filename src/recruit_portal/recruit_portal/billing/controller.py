from __future__ import annotations

from flask import Flask

from ..common.web import admin_required, candidate_required, current_actor, json_body, ok, page_request
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.billing_service

    @app.route("/billing/me", methods=["GET"], endpoint="billing_me")
    @candidate_required
    def my_billing():
        actor = current_actor()
        return ok(service.get_config(actor, actor.user_id).to_dict())

    @app.route("/admin/billing", methods=["GET"], endpoint="admin_billing_list")
    @admin_required
    def list_billing():
        page = service.list_configs(current_actor(), page_request())
        return ok(**page.to_dict(lambda c: c.to_dict()))

    @app.route("/admin/billing/<int:candidate_id>", methods=["GET"], endpoint="admin_billing_get")
    @admin_required
    def get_billing(candidate_id: int):
        return ok(service.get_config(current_actor(), candidate_id).to_dict())

    @app.route("/admin/billing/<int:candidate_id>", methods=["PUT"], endpoint="admin_billing_save")
    @admin_required
    def save_billing(candidate_id: int):
        config = service.save_config(current_actor(), candidate_id, json_body())
        return ok(config.to_dict(), message="Billing configuration saved")

    @app.route("/admin/billing/<int:candidate_id>", methods=["DELETE"], endpoint="admin_billing_delete")
    @admin_required
    def deactivate_billing(candidate_id: int):
        service.deactivate(current_actor(), candidate_id)
        return ok(message="Billing configuration deactivated")
