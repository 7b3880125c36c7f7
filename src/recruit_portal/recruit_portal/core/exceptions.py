from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""

    status_code = 400
    kind = "domain_error"

    def __init__(self, message: str = "", *, fields: Optional[dict[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.fields = dict(fields or {})

    def to_dict(self) -> dict:
        body = {"success": False, "error": self.kind, "message": self.message}
        if self.fields:
            body["fields"] = self.fields
        return body


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    kind = "validation_error"


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid or no session exists."""

    status_code = 401
    kind = "authentication_error"


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    status_code = 403
    kind = "authorization_error"


class NotFoundError(DomainError):
    status_code = 404
    kind = "not_found"


class StateConflictError(DomainError):
    """Raised when a transition is not allowed from the current state.

    Surfaced as 400 to clients.
    """

    kind = "state_conflict"
