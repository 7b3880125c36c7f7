"""Small Flask helpers shared by the feature controllers."""

from __future__ import annotations

from functools import wraps
from typing import Any, Callable, Optional, TypeVar

from flask import jsonify, request, session

from ..core.context import Actor
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, ValidationError
from .pagination import PageRequest
from .validators import parse_int


def current_actor() -> Actor:
    if "user_id" not in session:
        raise AuthenticationError("Please log in to continue")
    try:
        role = Role(session.get("role"))
    except ValueError:
        raise AuthenticationError("Session is invalid, please log in again")
    return Actor(user_id=int(session["user_id"]), role=role)


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        current_actor()
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if not current_actor().is_admin:
            raise AuthorizationError("Admin access required")
        return view(*args, **kwargs)

    return wrapper


def candidate_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if current_actor().role != Role.CANDIDATE:
            raise AuthorizationError("Candidate access required")
        return view(*args, **kwargs)

    return wrapper


def json_body() -> dict[str, Any]:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


E = TypeVar("E")


def status_arg(normalize: Callable[[str], E]) -> Optional[E]:
    """Optional ``status`` query filter; empty or "all" means no filter."""
    raw = (request.args.get("status") or "").strip()
    if not raw or raw.lower() == "all":
        return None
    return normalize(raw)


def int_arg(name: str) -> Optional[int]:
    return parse_int(request.args.get(name), name)


def page_request() -> PageRequest:
    return PageRequest.of(
        parse_int(request.args.get("page"), "page"),
        parse_int(request.args.get("limit"), "limit"),
    )


def ok(payload: Any = None, status: int = 200, **extra):
    body: dict[str, Any] = {"success": True}
    if payload is not None:
        body["data"] = payload
    body.update(extra)
    return jsonify(body), status
