from __future__ import annotations

from datetime import timedelta

from flask import Flask, session

from ..common.web import current_actor, json_body, login_required, ok
from ..container import Container
from ..core.constants import DEFAULT_SESSION_DAYS
from ..core.exceptions import NotFoundError


def register(app: Flask, container: Container) -> None:
    app.permanent_session_lifetime = timedelta(days=DEFAULT_SESSION_DAYS)

    @app.route("/auth/login", methods=["POST"], endpoint="login")
    def login():
        data = json_body()
        s_user = container.auth_service.authenticate(data.get("username", ""), data.get("password", ""))

        session.clear()
        session.permanent = bool(data.get("remember_me"))
        session["user_id"] = s_user.user_id
        session["name"] = s_user.full_name
        session["role"] = s_user.role.value

        return ok(
            {"user_id": s_user.user_id, "full_name": s_user.full_name, "email": s_user.email, "role": s_user.role.value},
            message="Logged in",
        )

    @app.route("/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return ok(message="Logged out")

    @app.route("/auth/me", methods=["GET"], endpoint="me")
    @login_required
    def me():
        user = container.users_repo.get_by_id(current_actor().user_id)
        if not user:
            session.clear()
            raise NotFoundError("User not found")
        return ok(user.to_dict())
