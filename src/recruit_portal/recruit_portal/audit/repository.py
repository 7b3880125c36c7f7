from __future__ import annotations

from typing import Any, Optional, Protocol

from ..common.pagination import Page, PageRequest
from .model import AuditEntry


class AuditRepository(Protocol):
    def add(self, *, actor_id: int, action: str, entity_type: str, entity_id: int, details: dict[str, Any]) -> int:
        raise NotImplementedError

    def list(
        self,
        *,
        page: PageRequest,
        entity_type: Optional[str] = None,
        entity_id: Optional[int] = None,
    ) -> Page[AuditEntry]:
        """Newest first."""

        raise NotImplementedError
