"""Schema/seed helpers used by ``create_app`` (AUTO_INIT_DB) and the scripts/ folder."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable, Iterator

from werkzeug.security import generate_password_hash

from .connection import DatabaseConnection, DBConfig

logger = logging.getLogger(__name__)

DEMO_USERS = (
    # full_name, username, email, password, role
    ("Portal Admin", "admin", "admin@recruit-portal.local", "admin123", "admin"),
    ("Demo Candidate", "candidate", "candidate@recruit-portal.local", "candidate123", "candidate"),
)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql usable regardless of the configured DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def iter_sql_statements(sql: str) -> Iterator[str]:
    """Split a script on ';' outside quotes. Line comments are dropped."""
    buf: list[str] = []
    quote: str | None = None
    escape = False

    for line in sql.splitlines(keepends=True):
        if quote is None and line.lstrip().startswith("--"):
            continue
        for ch in line:
            if escape:
                escape = False
            elif ch == "\\":
                escape = True
            elif quote is not None:
                if ch == quote:
                    quote = None
            elif ch in ("'", '"'):
                quote = ch
            elif ch == ";":
                stmt = "".join(buf).strip()
                buf.clear()
                if stmt:
                    yield stmt
                continue
            buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _exec_script(conn_factory: DatabaseConnection, statements: Iterable[str]) -> None:
    conn = conn_factory.connect()
    try:
        cur = conn.cursor()
        for stmt in statements:
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()


def ensure_database_exists(db_config: dict) -> None:
    config = DBConfig.from_dict(db_config)
    conn = DatabaseConnection(config).connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{config.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    sql = _strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8"))
    _exec_script(DatabaseConnection(DBConfig.from_dict(db_config)), iter_sql_statements(sql))
    logger.info("Applied schema from %s", schema_path)


def apply_seed_sql(db_config: dict, *, seed_path: str | Path) -> None:
    sql = _strip_create_db_and_use(Path(seed_path).read_text(encoding="utf-8"))
    _exec_script(DatabaseConnection(DBConfig.from_dict(db_config)), iter_sql_statements(sql))
    logger.info("Applied seed data from %s", seed_path)


def ensure_demo_users(db_config: dict) -> None:
    """Upsert the demo admin and candidate (passwords re-hashed on every run)."""
    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor(dictionary=True)
        for full_name, username, email, password, role in DEMO_USERS:
            password_hash = generate_password_hash(password)
            cur.execute("SELECT user_id FROM users WHERE username=%s", (username,))
            if cur.fetchone():
                cur.execute(
                    """
                    UPDATE users
                    SET full_name=%s, email=%s, password_hash=%s, role=%s, is_active=1
                    WHERE username=%s
                    """,
                    (full_name, email, password_hash, role, username),
                )
            else:
                cur.execute(
                    """
                    INSERT INTO users (full_name, username, email, password_hash, role)
                    VALUES (%s, %s, %s, %s, %s)
                    """,
                    (full_name, username, email, password_hash, role),
                )

        # Legacy role value from the old portal.
        cur.execute("UPDATE users SET role='candidate' WHERE role='user'")
        conn.commit()
    finally:
        conn.close()


def list_tables(db_config: dict) -> list[str]:
    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
