from __future__ import annotations

import logging
from dataclasses import dataclass

from werkzeug.security import check_password_hash

from ..common.validators import require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthenticationError
from ..notifications.notifier import Notifier
from .repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """What we store into the Flask session after login."""

    user_id: int
    full_name: str
    email: str
    role: Role


class AuthService:
    """Use case: authenticate user (login)."""

    def __init__(self, users: UserRepository, notifier: Notifier):
        self._users = users
        self._notifier = notifier

    def authenticate(self, username: str, password: str) -> SessionUser:
        username = require_non_empty(username, "username")
        user = self._users.get_by_username(username)
        if not user or not user.is_active:
            raise AuthenticationError("Invalid username or password")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # placeholder hashes like 'CHANGE_ME'
            ok = False

        if not ok:
            logger.info("Failed login for %s", username)
            raise AuthenticationError("Invalid username or password")

        self._notifier.send(
            to=[user.email],
            subject="New sign-in to your account",
            body=f"Hello {user.full_name},\n\nYour account was just used to sign in.",
        )
        return SessionUser(user_id=user.user_id, full_name=user.full_name, email=user.email, role=user.role)
