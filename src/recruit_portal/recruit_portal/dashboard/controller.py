from __future__ import annotations

from flask import Flask

from ..common.web import admin_required, current_actor, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/admin/dashboard", methods=["GET"], endpoint="admin_dashboard")
    @admin_required
    def admin_dashboard():
        return ok(container.dashboard_service.summary(current_actor()))
