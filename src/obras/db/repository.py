"""Repository for the project snapshot table.

The in-memory ProjectStore is the authority while a command runs; this
repository only loads the collection at start and writes back what changed.
Upserts keep the original rowid, so list_projects() stays in insertion order
across edits.
"""

from __future__ import annotations

import json
import sqlite3
from datetime import date

from obras.models import Contractor, Costs, Evaluation, Project, ProjectStatus

_COLUMNS = (
    "id, unit_id, title, description, requester, department, "
    "contractor_name, contractor_legal_name, contractor_cnpj, contractor_manager, "
    "contractor_contact, start_date, status, cost_material, cost_labor, cost_equipment, "
    "images, invoices, rating, evaluation_comment, evaluated_at, advisory"
)


class Repository:
    """Data access layer for stored projects.

    Wraps an open sqlite3.Connection. The connection is owned by the caller
    and must be closed after use.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        """Initialise with an open database connection.

        Args:
            conn: An open sqlite3.Connection with the schema initialised
                (see obras.db.schema.initialize).
        """
        self._conn = conn

    def save_project(self, project: Project) -> None:
        """Insert *project*, or overwrite the stored row with the same id."""
        self._conn.execute(
            f"""
            INSERT INTO projects ({_COLUMNS})
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                unit_id = excluded.unit_id,
                title = excluded.title,
                description = excluded.description,
                requester = excluded.requester,
                department = excluded.department,
                contractor_name = excluded.contractor_name,
                contractor_legal_name = excluded.contractor_legal_name,
                contractor_cnpj = excluded.contractor_cnpj,
                contractor_manager = excluded.contractor_manager,
                contractor_contact = excluded.contractor_contact,
                start_date = excluded.start_date,
                status = excluded.status,
                cost_material = excluded.cost_material,
                cost_labor = excluded.cost_labor,
                cost_equipment = excluded.cost_equipment,
                images = excluded.images,
                invoices = excluded.invoices,
                rating = excluded.rating,
                evaluation_comment = excluded.evaluation_comment,
                evaluated_at = excluded.evaluated_at,
                advisory = excluded.advisory
            """,
            _project_to_row(project),
        )
        self._conn.commit()

    def get_project(self, project_id: str) -> Project | None:
        """Return the stored project with *project_id*, or None."""
        row = self._conn.execute(
            f"SELECT {_COLUMNS} FROM projects WHERE id = ?", (project_id,)
        ).fetchone()
        return _row_to_project(row) if row else None

    def list_projects(self) -> list[Project]:
        """Return all stored projects in insertion order."""
        rows = self._conn.execute(
            f"SELECT {_COLUMNS} FROM projects ORDER BY rowid"
        ).fetchall()
        return [_row_to_project(r) for r in rows]

    def count_projects(self) -> int:
        return self._conn.execute("SELECT COUNT(*) FROM projects").fetchone()[0]

    def delete_project(self, project_id: str) -> bool:
        """Delete the stored project. Returns False if no row matched."""
        cur = self._conn.execute("DELETE FROM projects WHERE id = ?", (project_id,))
        self._conn.commit()
        return cur.rowcount > 0


# ------------------------------------------------------------------
# Row ↔ model helpers
# ------------------------------------------------------------------

def _project_to_row(p: Project) -> tuple:
    ev = p.evaluation
    return (
        p.id,
        p.unit_id,
        p.title,
        p.description,
        p.requester,
        p.department,
        p.contractor.name,
        p.contractor.legal_name,
        p.contractor.cnpj,
        p.contractor.manager,
        p.contractor.contact,
        p.start_date.isoformat(),
        p.status.name,
        p.costs.material,
        p.costs.labor,
        p.costs.equipment,
        json.dumps(list(p.images)),
        json.dumps(list(p.invoices)),
        ev.rating if ev else None,
        ev.comment if ev else None,
        ev.date if ev else None,
        p.advisory,
    )


def _row_to_project(row: sqlite3.Row) -> Project:
    evaluation = None
    if row["rating"] is not None:
        evaluation = Evaluation(
            rating=row["rating"],
            comment=row["evaluation_comment"] or "",
            date=row["evaluated_at"] or "",
        )
    return Project(
        id=row["id"],
        unit_id=row["unit_id"],
        title=row["title"],
        description=row["description"],
        requester=row["requester"],
        department=row["department"],
        contractor=Contractor(
            name=row["contractor_name"],
            legal_name=row["contractor_legal_name"],
            cnpj=row["contractor_cnpj"],
            manager=row["contractor_manager"],
            contact=row["contractor_contact"],
        ),
        start_date=date.fromisoformat(row["start_date"]),
        status=ProjectStatus[row["status"]],
        costs=Costs(
            material=row["cost_material"],
            labor=row["cost_labor"],
            equipment=row["cost_equipment"],
        ),
        images=tuple(json.loads(row["images"])),
        invoices=tuple(json.loads(row["invoices"])),
        evaluation=evaluation,
        advisory=row["advisory"],
    )
