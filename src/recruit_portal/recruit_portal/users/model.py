from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: portal account (admin or candidate).

    Plain data object, no DB access.
    """

    user_id: int
    full_name: str
    username: str
    email: str
    password_hash: str
    role: Role
    is_active: bool = True

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "full_name": self.full_name,
            "username": self.username,
            "email": self.email,
            "role": self.role.value,
            "is_active": self.is_active,
        }
