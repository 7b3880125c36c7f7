from __future__ import annotations

from typing import Any, Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import User
from .repository import UserRepository

_COLUMNS = "user_id, full_name, username, email, password_hash, role, is_active"


def _to_user(r: dict[str, Any]) -> User:
    role = r["role"]
    return User(
        user_id=int(r["user_id"]),
        full_name=r["full_name"],
        username=r["username"],
        email=r["email"],
        password_hash=r["password_hash"],
        role=Role.ADMIN if role == Role.ADMIN.value else Role.CANDIDATE,
        is_active=bool(r["is_active"]),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE user_id=%s", (int(user_id),))
            r = fetchone(cur)
            return _to_user(r) if r else None

    def get_by_username(self, username: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE username=%s", (username,))
            r = fetchone(cur)
            return _to_user(r) if r else None

    def list_admin_emails(self) -> Sequence[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT email FROM users WHERE role=%s AND is_active=1", (Role.ADMIN.value,))
            return [r["email"] for r in fetchall(cur)]
