from __future__ import annotations

from pathlib import Path

from src.recruit_portal.recruit_portal.database.bootstrap import _strip_create_db_and_use, iter_sql_statements

REPO_ROOT = Path(__file__).resolve().parents[2]


def test_semicolons_inside_quotes_do_not_split():
    sql = "-- comment; ignored\nINSERT INTO t VALUES('a;b');\nSELECT 1;\n"

    assert list(iter_sql_statements(sql)) == ["INSERT INTO t VALUES('a;b')", "SELECT 1"]


def test_create_database_and_use_are_stripped():
    sql = "CREATE DATABASE portal;\nUSE portal;\nCREATE TABLE x (id INT);\n"

    assert list(iter_sql_statements(_strip_create_db_and_use(sql))) == ["CREATE TABLE x (id INT)"]


def test_schema_declares_uniqueness_constraints():
    schema = (REPO_ROOT / "database" / "schema.sql").read_text(encoding="utf-8")
    statements = list(iter_sql_statements(schema))

    assert len([s for s in statements if s.upper().startswith("CREATE TABLE")]) == 5
    assert "UNIQUE KEY uq_timesheet_candidate_week (candidate_id, week_start_date)" in schema
