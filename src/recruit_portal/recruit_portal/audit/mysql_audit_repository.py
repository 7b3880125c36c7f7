from __future__ import annotations

from typing import Any, Optional

from ..common.pagination import Page, PageRequest
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, where_clause
from .model import AuditEntry, dump_details, load_details
from .repository import AuditRepository


class MySQLAuditRepository(AuditRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def add(self, *, actor_id: int, action: str, entity_type: str, entity_id: int, details: dict[str, Any]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO audit_log(actor_id, action, entity_type, entity_id, details)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (int(actor_id), action, entity_type, int(entity_id), dump_details(details)),
            )
            return int(cur.lastrowid)

    def list(
        self,
        *,
        page: PageRequest,
        entity_type: Optional[str] = None,
        entity_id: Optional[int] = None,
    ) -> Page[AuditEntry]:
        conditions: list[str] = []
        params: list[object] = []
        if entity_type:
            conditions.append("entity_type=%s")
            params.append(entity_type)
        if entity_id is not None:
            conditions.append("entity_id=%s")
            params.append(int(entity_id))
        where = where_clause(conditions)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS total FROM audit_log {where}", tuple(params))
            total = int((fetchone(cur) or {}).get("total") or 0)
            cur.execute(
                f"""
                SELECT audit_id, actor_id, action, entity_type, entity_id, details, created_at
                FROM audit_log
                {where}
                ORDER BY created_at DESC, audit_id DESC
                LIMIT %s OFFSET %s
                """,
                tuple(params + [page.limit, page.offset]),
            )
            items = [
                AuditEntry(
                    audit_id=int(r["audit_id"]),
                    actor_id=int(r["actor_id"]),
                    action=r["action"],
                    entity_type=r["entity_type"],
                    entity_id=int(r["entity_id"]),
                    details=load_details(r.get("details")),
                    created_at=r.get("created_at"),
                )
                for r in fetchall(cur)
            ]
        return Page(items=items, total=total, page=page.page, limit=page.limit)
