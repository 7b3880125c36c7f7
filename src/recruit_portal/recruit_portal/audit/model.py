from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional


@dataclass(frozen=True)
class AuditEntry:
    """One admin override (approved-row edit, approval revert, invoice status change)."""

    audit_id: int
    actor_id: int
    action: str
    entity_type: str
    entity_id: int
    details: dict[str, Any]
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "audit_id": self.audit_id,
            "actor_id": self.actor_id,
            "action": self.action,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "details": self.details,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


def dump_details(details: Optional[dict[str, Any]]) -> str:
    return json.dumps(details or {}, default=str, sort_keys=True)


def load_details(raw: Optional[str]) -> dict[str, Any]:
    if not raw:
        return {}
    try:
        data = json.loads(raw)
    except ValueError:
        return {"raw": raw}
    return data if isinstance(data, dict) else {"value": data}
