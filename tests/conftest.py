"""Shared pytest fixtures."""

from __future__ import annotations

from datetime import date

import pytest

import obras.config as config_module
from obras.db.connection import Database
from obras.db.schema import initialize
from obras.models import Contractor, Costs, ProjectDraft, ProjectStatus
from obras.store import ProjectStore
from obras.units import DEFAULT_UNITS


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Run every test in tmp_path with no global config and no OBRAS_* env vars."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(
        config_module, "_GLOBAL_CONFIG_PATH", tmp_path / "home" / ".obras" / "config.yaml"
    )
    monkeypatch.delenv("OBRAS_ADVISORY_MODEL", raising=False)
    monkeypatch.delenv("OBRAS_DB", raising=False)


@pytest.fixture
def tmp_db(tmp_path):
    """File-based DB in tmp_path with schema initialized, closed after test."""
    db = Database(tmp_path / ".obras.db")
    conn = db.connect()
    initialize(conn)
    yield conn
    conn.close()


@pytest.fixture
def units():
    return list(DEFAULT_UNITS)


@pytest.fixture
def store(units):
    """Empty store with sequential ids (p1, p2, ...) and a fixed clock."""
    counter = iter(range(1, 10_000))
    return ProjectStore(
        units,
        id_factory=lambda: f"p{next(counter)}",
        clock=lambda: "2024-01-02T03:04:05+00:00",
    )


def make_draft(
    unit_id: str = "1",
    title: str = "Reforma do Telhado",
    material: float = 45000,
    labor: float = 20000,
    equipment: float = 5000,
    start: date = date(2023, 10, 15),
    status: ProjectStatus = ProjectStatus.PLANNED,
    contractor: str = "ConstruNorte Ltda",
    requester: str = "João Silva",
    department: str = "Manutenção Predial",
    images: tuple[str, ...] = (),
    invoices: tuple[str, ...] = (),
) -> ProjectDraft:
    return ProjectDraft(
        unit_id=unit_id,
        title=title,
        description="Substituição das telhas.",
        requester=requester,
        department=department,
        contractor=Contractor(name=contractor, cnpj="12.345.678/0001-90"),
        start_date=start,
        status=status,
        costs=Costs(material=material, labor=labor, equipment=equipment),
        images=images,
        invoices=invoices,
    )


@pytest.fixture
def draft_factory():
    return make_draft
