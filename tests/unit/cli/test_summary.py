"""Tests for obras summary and obras units."""

from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from obras.cli.main import app
from obras.db.connection import Database
from obras.db.repository import Repository
from obras.db.schema import initialize
from obras.units import SAMPLE_PROJECTS

runner = CliRunner()


def _make_db(path: Path, projects=()) -> Path:
    with Database(path) as conn:
        initialize(conn)
        repo = Repository(conn)
        for project in projects:
            repo.save_project(project)
    return path


@pytest.fixture
def sample_db(tmp_path: Path) -> Path:
    return _make_db(tmp_path / ".obras.db", SAMPLE_PROJECTS)


# ---------------------------------------------------------------------------
# obras summary
# ---------------------------------------------------------------------------


def test_summary_totals(sample_db: Path) -> None:
    result = runner.invoke(app, ["summary", "--db", str(sample_db)])
    assert result.exit_code == 0, result.output
    assert "R$ 352.000" in result.output
    assert "GP7 Distribuidora" in result.output
    assert "Investimento por Unidade" in result.output
    assert "Custo Total Mensal" in result.output


def test_summary_unit_ranking(sample_db: Path) -> None:
    result = runner.invoke(app, ["summary", "--db", str(sample_db)])
    out = result.output
    assert out.index("Marabá/PA") < out.index("Capanema/PA") < out.index("Paragominas/PA")
    # Units without projects are listed at zero.
    assert "Rio Branco/AC" in out


def test_summary_monthly_series_in_order(sample_db: Path) -> None:
    result = runner.invoke(app, ["summary", "--db", str(sample_db)])
    out = result.output
    assert out.index("set. de 23") < out.index("out. de 23") < out.index("nov. de 23")


def test_summary_empty_db(tmp_path: Path) -> None:
    db = _make_db(tmp_path / ".obras.db")
    result = runner.invoke(app, ["summary", "--db", str(db)])
    assert result.exit_code == 0, result.output
    assert "R$ 0" in result.output
    assert "Nenhuma obra cadastrada." in result.output


def test_summary_company_from_config(sample_db: Path, tmp_path: Path) -> None:
    (tmp_path / "obras.yaml").write_text("company:\n  name: ACME\n", encoding="utf-8")
    result = runner.invoke(app, ["summary", "--db", str(sample_db)])
    assert "ACME" in result.output


# ---------------------------------------------------------------------------
# obras units
# ---------------------------------------------------------------------------


def test_units_lists_defaults() -> None:
    result = runner.invoke(app, ["units"])
    assert result.exit_code == 0, result.output
    assert "Unidades" in result.output
    assert "Capanema/PA" in result.output
    assert "Rio Branco/AC" in result.output


def test_units_from_config(tmp_path: Path) -> None:
    (tmp_path / "obras.yaml").write_text(
        "units:\n  - {id: '10', name: Unidade Natal, city: Natal, state: RN}\n",
        encoding="utf-8",
    )
    result = runner.invoke(app, ["units"])
    assert result.exit_code == 0, result.output
    assert "Natal/RN" in result.output
    assert "Capanema" not in result.output
