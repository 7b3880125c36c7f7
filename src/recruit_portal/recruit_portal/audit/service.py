from __future__ import annotations

import logging
from typing import Any, Optional

from ..common.pagination import Page, PageRequest
from ..core.context import Actor
from ..core.exceptions import AuthorizationError
from .model import AuditEntry
from .repository import AuditRepository

logger = logging.getLogger(__name__)


class AuditService:
    def __init__(self, audit: AuditRepository):
        self._audit = audit

    def record(
        self,
        actor: Actor,
        action: str,
        *,
        entity_type: str,
        entity_id: int,
        details: Optional[dict[str, Any]] = None,
    ) -> int:
        audit_id = self._audit.add(
            actor_id=actor.user_id,
            action=action,
            entity_type=entity_type,
            entity_id=int(entity_id),
            details=dict(details or {}),
        )
        logger.info("Audit %s on %s #%s by %s", action, entity_type, entity_id, actor.user_id)
        return audit_id

    def list_entries(
        self,
        actor: Actor,
        page: PageRequest,
        *,
        entity_type: Optional[str] = None,
        entity_id: Optional[int] = None,
    ) -> Page[AuditEntry]:
        if not actor.is_admin:
            raise AuthorizationError("Admin access required")
        return self._audit.list(page=page, entity_type=entity_type, entity_id=entity_id)
