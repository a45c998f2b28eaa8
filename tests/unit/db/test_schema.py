"""Tests for database schema initialization."""

from __future__ import annotations

import sqlite3

import pytest

from obras.db.schema import CURRENT_VERSION, initialize


def _table_columns(conn, table: str) -> set[str]:
    rows = conn.execute(f"PRAGMA table_info({table})").fetchall()
    return {row["name"] for row in rows}


def _table_exists(conn, table: str) -> bool:
    row = conn.execute(
        "SELECT name FROM sqlite_master WHERE type='table' AND name=?", (table,)
    ).fetchone()
    return row is not None


def test_projects_table_exists(tmp_db):
    assert _table_exists(tmp_db, "projects")


def test_projects_columns(tmp_db):
    cols = _table_columns(tmp_db, "projects")
    assert cols == {
        "id", "unit_id", "title", "description", "requester", "department",
        "contractor_name", "contractor_legal_name", "contractor_cnpj",
        "contractor_manager", "contractor_contact",
        "start_date", "status", "cost_material", "cost_labor", "cost_equipment",
        "images", "invoices", "created_at",
        "rating", "evaluation_comment", "evaluated_at", "advisory",
    }


def test_unit_index_exists(tmp_db):
    row = tmp_db.execute(
        "SELECT name FROM sqlite_master WHERE type='index' AND name='idx_projects_unit'"
    ).fetchone()
    assert row is not None


def test_schema_version_table_exists(tmp_db):
    assert _table_exists(tmp_db, "schema_version")


def test_schema_version_recorded(tmp_db):
    version = tmp_db.execute("SELECT MAX(version) FROM schema_version").fetchone()[0]
    assert version == CURRENT_VERSION == 1


def test_initialize_idempotent(tmp_db):
    initialize(tmp_db)
    rows = tmp_db.execute("SELECT COUNT(*) FROM schema_version").fetchone()[0]
    assert rows == CURRENT_VERSION


def test_project_id_is_primary_key(tmp_db):
    sql = "INSERT INTO projects (id, unit_id, title, start_date, status) VALUES (?, ?, ?, ?, ?)"
    tmp_db.execute(sql, ("p1", "1", "A", "2023-10-15", "PLANNED"))
    with pytest.raises(sqlite3.IntegrityError):
        tmp_db.execute(sql, ("p1", "2", "B", "2023-10-15", "PLANNED"))


def test_column_defaults(tmp_db):
    tmp_db.execute(
        "INSERT INTO projects (id, unit_id, title, start_date, status) VALUES (?, ?, ?, ?, ?)",
        ("p1", "1", "A", "2023-10-15", "PLANNED"),
    )
    row = tmp_db.execute("SELECT * FROM projects WHERE id = 'p1'").fetchone()
    assert row["images"] == "[]"
    assert row["invoices"] == "[]"
    assert row["cost_material"] == 0
    assert row["rating"] is None
    assert row["advisory"] is None
