"""Forward-only migration runner for the project snapshot schema."""

from __future__ import annotations

import sqlite3

# schema_version is the bootstrap table, created before migrations run.
_CREATE_SCHEMA_VERSION = """
CREATE TABLE IF NOT EXISTS schema_version (
    version     INTEGER NOT NULL,
    applied_at  DATETIME NOT NULL DEFAULT (datetime('now'))
)
"""

# Contractor, costs and evaluation are value objects: flattened into columns.
# A NULL rating means the project has not been evaluated.
# images/invoices are JSON arrays; array order is display order.
_V1_SQL = """
CREATE TABLE IF NOT EXISTS projects (
    id                      TEXT PRIMARY KEY,
    unit_id                 TEXT NOT NULL,
    title                   TEXT NOT NULL,
    description             TEXT NOT NULL DEFAULT '',
    requester               TEXT NOT NULL DEFAULT '',
    department              TEXT NOT NULL DEFAULT '',
    contractor_name         TEXT NOT NULL DEFAULT '',
    contractor_legal_name   TEXT NOT NULL DEFAULT '',
    contractor_cnpj         TEXT NOT NULL DEFAULT '',
    contractor_manager      TEXT NOT NULL DEFAULT '',
    contractor_contact      TEXT NOT NULL DEFAULT '',
    start_date              TEXT NOT NULL,
    status                  TEXT NOT NULL,
    cost_material           REAL NOT NULL DEFAULT 0,
    cost_labor              REAL NOT NULL DEFAULT 0,
    cost_equipment          REAL NOT NULL DEFAULT 0,
    images                  TEXT NOT NULL DEFAULT '[]',
    invoices                TEXT NOT NULL DEFAULT '[]',
    rating                  INTEGER,
    evaluation_comment      TEXT,
    evaluated_at            TEXT,
    advisory                TEXT,
    created_at              DATETIME NOT NULL DEFAULT (datetime('now'))
);

CREATE INDEX IF NOT EXISTS idx_projects_unit ON projects(unit_id);
"""

# Append-only. Each entry: (version: int, sql: str).
# executescript() issues an implicit COMMIT before running.
MIGRATIONS: list[tuple[int, str]] = [
    (1, _V1_SQL),
]


def run_migrations(conn: sqlite3.Connection) -> None:
    """Apply all pending migrations in ascending version order.

    Idempotent: safe to call on a database at any version.
    """
    conn.execute(_CREATE_SCHEMA_VERSION)
    conn.commit()

    row = conn.execute("SELECT MAX(version) FROM schema_version").fetchone()
    current = row[0] if row[0] is not None else 0

    for version, sql in MIGRATIONS:
        if version > current:
            conn.executescript(sql)
            conn.execute(
                "INSERT INTO schema_version (version) VALUES (?)", (version,)
            )
            conn.commit()
