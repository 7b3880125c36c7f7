from __future__ import annotations

from flask import Flask, request

from ..common.web import admin_required, current_actor, int_arg, ok, page_request
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/admin/audit", methods=["GET"], endpoint="admin_audit")
    @admin_required
    def list_audit():
        page = container.audit_service.list_entries(
            current_actor(),
            page_request(),
            entity_type=(request.args.get("entity_type") or "").strip() or None,
            entity_id=int_arg("entity_id"),
        )
        return ok(**page.to_dict(lambda e: e.to_dict()))
