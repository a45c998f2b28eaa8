"""Tests for obras project commands: list, show, add, edit, rate, advise."""

from __future__ import annotations

from datetime import date
from pathlib import Path
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from obras.advisory import EMPTY_MESSAGE, MISSING_KEY_MESSAGE
from obras.cli.main import app
from obras.db.connection import Database
from obras.db.repository import Repository
from obras.db.schema import initialize
from obras.models import ProjectStatus
from obras.units import SAMPLE_PROJECTS

runner = CliRunner()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    """Snapshot database seeded with the three sample projects."""
    path = tmp_path / ".obras.db"
    with Database(path) as conn:
        initialize(conn)
        repo = Repository(conn)
        for project in SAMPLE_PROJECTS:
            repo.save_project(project)
    return path


def _invoke(db_path: Path, *args: str, **kwargs):
    return runner.invoke(app, [*args, "--db", str(db_path)], **kwargs)


def _stored(db_path: Path):
    with Database(db_path) as conn:
        return Repository(conn).list_projects()


# ---------------------------------------------------------------------------
# Missing database
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("command", [["list"], ["show", "p1"], ["summary"], ["rate", "p1", "-r", "5", "-c", "ok"]])
def test_commands_without_db_exit_1(tmp_path: Path, command: list[str]) -> None:
    result = runner.invoke(app, [*command, "--db", str(tmp_path / "missing.db")])
    assert result.exit_code == 1
    assert "obras init" in result.output


# ---------------------------------------------------------------------------
# obras list
# ---------------------------------------------------------------------------


def test_list_all_projects(db_path: Path) -> None:
    result = _invoke(db_path, "list")
    assert result.exit_code == 0, result.output
    assert "Todos os Projetos (3)" in result.output
    assert result.output.index("p1") < result.output.index("p2") < result.output.index("p3")


def test_list_by_unit(db_path: Path) -> None:
    result = _invoke(db_path, "list", "--unit", "3")
    assert result.exit_code == 0, result.output
    assert "Marabá" in result.output
    assert "p2" in result.output
    assert "p1" not in result.output
    assert "p3" not in result.output


def test_list_by_search(db_path: Path) -> None:
    result = _invoke(db_path, "list", "--search", "CARLOS")
    assert result.exit_code == 0
    assert "p3" in result.output
    assert "p1" not in result.output


def test_list_no_results(db_path: Path) -> None:
    result = _invoke(db_path, "list", "--unit", "9")
    assert result.exit_code == 0
    assert "Nenhum projeto encontrado." in result.output


def test_list_unknown_unit_exits_1(db_path: Path) -> None:
    result = _invoke(db_path, "list", "--unit", "99")
    assert result.exit_code == 1
    assert "Unknown unit" in result.output


# ---------------------------------------------------------------------------
# obras show
# ---------------------------------------------------------------------------


def test_show_project_details(db_path: Path) -> None:
    result = _invoke(db_path, "show", "p1")
    assert result.exit_code == 0, result.output
    for text in ["Reforma do Telhado", "ConstruNorte Ltda", "12.345.678/0001-90", "R$ 70.000", "64.3%", "Sem avaliação"]:
        assert text in result.output
    assert "Fotos" in result.output
    assert "Notas Fiscais" in result.output


def test_show_evaluation(db_path: Path) -> None:
    result = _invoke(db_path, "show", "p3")
    assert result.exit_code == 0
    assert "★★★★★" in result.output
    assert "2023-10-01" in result.output


def test_show_not_found_exits_1(db_path: Path) -> None:
    result = _invoke(db_path, "show", "ghost")
    assert result.exit_code == 1
    assert "not found" in result.output


# ---------------------------------------------------------------------------
# obras add
# ---------------------------------------------------------------------------


def test_add_creates_project(db_path: Path) -> None:
    result = _invoke(
        db_path,
        "add",
        "--unit", "4",
        "--title", "Novo Depósito",
        "--contractor", "Bahia Obras",
        "--start", "2024-02-01",
        "--status", "in_progress",
        "--material", "1000",
        "--labor", "500",
        "--image", "a.jpg",
        "--image", " ",
        "--image", "b.jpg",
    )
    assert result.exit_code == 0, result.output
    assert "Created project" in result.output

    projects = _stored(db_path)
    assert len(projects) == 4
    new = projects[-1]
    assert new.id not in {"p1", "p2", "p3"}
    assert new.unit_id == "4"
    assert new.title == "Novo Depósito"
    assert new.contractor.name == "Bahia Obras"
    assert new.start_date == date(2024, 2, 1)
    assert new.status is ProjectStatus.IN_PROGRESS
    assert new.total_cost == 1500
    assert new.images == ("a.jpg", "b.jpg")
    assert new.evaluation is None
    assert new.advisory is None


def test_add_defaults_to_planned_today(db_path: Path) -> None:
    result = _invoke(db_path, "add", "-u", "1", "-t", "Cerca")
    assert result.exit_code == 0, result.output
    new = _stored(db_path)[-1]
    assert new.status is ProjectStatus.PLANNED
    assert new.start_date == date.today()
    assert new.total_cost == 0


def test_add_unknown_unit_exits_1(db_path: Path) -> None:
    result = _invoke(db_path, "add", "--unit", "99", "--title", "X")
    assert result.exit_code == 1
    assert "Unknown unit" in result.output
    assert len(_stored(db_path)) == 3


def test_add_invalid_status_exits_1(db_path: Path) -> None:
    result = _invoke(db_path, "add", "--unit", "1", "--title", "X", "--status", "cancelled")
    assert result.exit_code == 1
    assert "Unknown status" in result.output


def test_add_invalid_date_exits_1(db_path: Path) -> None:
    result = _invoke(db_path, "add", "--unit", "1", "--title", "X", "--start", "15/10/2023")
    assert result.exit_code == 1
    assert "YYYY-MM-DD" in result.output


# ---------------------------------------------------------------------------
# obras edit
# ---------------------------------------------------------------------------


def test_edit_changes_only_given_fields(db_path: Path) -> None:
    result = _invoke(db_path, "edit", "p1", "--status", "completed", "--labor", "25000", "--manager", "Ana")
    assert result.exit_code == 0, result.output

    p1 = _stored(db_path)[0]
    assert p1.id == "p1"
    assert p1.status is ProjectStatus.COMPLETED
    assert p1.costs.labor == 25000
    assert p1.costs.material == 45000
    assert p1.contractor.manager == "Ana"
    assert p1.contractor.name == "ConstruNorte Ltda"
    assert p1.images == SAMPLE_PROJECTS[0].images


def test_edit_keeps_evaluation(db_path: Path) -> None:
    result = _invoke(db_path, "edit", "p3", "--title", "Pintura da Fachada")
    assert result.exit_code == 0
    p3 = _stored(db_path)[2]
    assert p3.title == "Pintura da Fachada"
    assert p3.evaluation == SAMPLE_PROJECTS[2].evaluation


def test_edit_replaces_and_clears_attachments(db_path: Path) -> None:
    _invoke(db_path, "edit", "p1", "--image", "new.jpg", "--clear-invoices")
    p1 = _stored(db_path)[0]
    assert p1.images == ("new.jpg",)
    assert p1.invoices == ()


def test_edit_move_to_unknown_unit_exits_1(db_path: Path) -> None:
    result = _invoke(db_path, "edit", "p1", "--unit", "99")
    assert result.exit_code == 1
    assert _stored(db_path)[0].unit_id == "1"


def test_edit_not_found_exits_1(db_path: Path) -> None:
    result = _invoke(db_path, "edit", "ghost", "--title", "X")
    assert result.exit_code == 1


# ---------------------------------------------------------------------------
# obras rate
# ---------------------------------------------------------------------------


def test_rate_saves_evaluation(db_path: Path) -> None:
    result = _invoke(db_path, "rate", "p1", "--rating", "4", "--comment", "Bom serviço")
    assert result.exit_code == 0, result.output
    assert "★★★★☆" in result.output

    evaluation = _stored(db_path)[0].evaluation
    assert evaluation.rating == 4
    assert evaluation.comment == "Bom serviço"
    assert evaluation.date


@pytest.mark.parametrize("rating, comment", [("0", "ok"), ("6", "ok"), ("3", "   ")])
def test_rate_invalid_exits_1_without_change(db_path: Path, rating: str, comment: str) -> None:
    result = _invoke(db_path, "rate", "p1", "-r", rating, "-c", comment)
    assert result.exit_code == 1
    assert "Evaluation not saved" in result.output
    assert _stored(db_path)[0].evaluation is None


def test_rate_not_found_exits_1(db_path: Path) -> None:
    result = _invoke(db_path, "rate", "ghost", "-r", "5", "-c", "ok")
    assert result.exit_code == 1
    assert "not found" in result.output


# ---------------------------------------------------------------------------
# obras advise
# ---------------------------------------------------------------------------


def test_advise_stores_generated_text(db_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("GEMINI_API_KEY", "test-key")
    with patch("obras.advisory.llm_client.complete", return_value="Custos proporcionais.") as mock_complete:
        result = _invoke(db_path, "advise", "p2")

    assert result.exit_code == 0, result.output
    assert "Custos proporcionais." in result.output
    assert mock_complete.call_args.args[0] == "gemini/gemini-2.5-flash"
    assert _stored(db_path)[1].advisory == "Custos proporcionais."


def test_advise_model_override(db_path: Path, monkeypatch) -> None:
    with patch("obras.advisory.llm_client.complete", return_value="ok") as mock_complete:
        result = _invoke(db_path, "advise", "p1", "--model", "ollama/llama3")
    assert result.exit_code == 0, result.output
    assert mock_complete.call_args.args[0] == "ollama/llama3"


def test_advise_missing_key_stores_fallback(db_path: Path, monkeypatch) -> None:
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    result = _invoke(db_path, "advise", "p1")
    assert result.exit_code == 0, result.output
    assert "GEMINI_API_KEY" in result.output
    assert _stored(db_path)[0].advisory == MISSING_KEY_MESSAGE


def test_advise_not_found_exits_1(db_path: Path) -> None:
    result = _invoke(db_path, "advise", "ghost")
    assert result.exit_code == 1


def test_advise_empty_completion_warns(db_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("GEMINI_API_KEY", "test-key")
    with patch("obras.advisory.llm_client.complete", return_value="  "):
        result = _invoke(db_path, "advise", "p1")
    assert result.exit_code == 0, result.output
    assert "fallback text stored" in result.output
    assert _stored(db_path)[0].advisory == EMPTY_MESSAGE


def test_advise_success_has_no_warning(db_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("GEMINI_API_KEY", "test-key")
    with patch("obras.advisory.llm_client.complete", return_value="Custos ok."):
        result = _invoke(db_path, "advise", "p1")
    assert "Warning" not in result.output
