"""Project commands: list, show, add, edit, rate, advise.

Each command loads the snapshot into a ProjectStore, applies at most one
store operation, and writes the resulting project back.

Usage:
  obras list --unit 3 --search galpão
  obras add --unit 1 --title "Reforma do Telhado" --material 45000 --image a.jpg
  obras edit p1 --status completed
  obras rate p1 --rating 5 --comment "Serviço excelente"
  obras advise p1
"""

from __future__ import annotations

from dataclasses import replace
from datetime import date
from pathlib import Path
from typing import Annotated

import typer
from rich.panel import Panel
from rich.table import Table

from obras.advisory import FALLBACK_MESSAGES, LLMAdvisor, request_advisory
from obras.advisory.llm_client import api_key_env
from obras.cli.common import Workspace, console, format_brl, format_date, open_workspace
from obras.cli.errors import (
    err_invalid_date,
    err_invalid_evaluation,
    err_invalid_status,
    err_project_not_found,
    err_unknown_unit,
    warn_advisory_fallback,
)
from obras.errors import EvaluationError, ProjectNotFoundError, UnknownUnitError
from obras.filters import filter_projects
from obras.models import Contractor, Costs, Project, ProjectDraft, ProjectStatus
from obras.stats import cost_breakdown
from obras.units import find_unit

_DbOption = Annotated[Path | None, typer.Option("--db", help="Path to the snapshot database.")]

_STATUS_STYLE: dict[ProjectStatus, str] = {
    ProjectStatus.COMPLETED: "green",
    ProjectStatus.IN_PROGRESS: "blue",
    ProjectStatus.PLANNED: "grey50",
    ProjectStatus.ON_HOLD: "dark_orange",
}


# ---------------------------------------------------------------------------
# Read commands
# ---------------------------------------------------------------------------


def list_cmd(
    unit: Annotated[str | None, typer.Option("--unit", "-u", help="Only projects of this unit id.")] = None,
    search: Annotated[
        str | None,
        typer.Option("--search", "-s", help="Match title, contractor, requester or department."),
    ] = None,
    db: _DbOption = None,
) -> None:
    """List projects for the selected unit and search term."""
    ws = open_workspace(db)
    try:
        if unit and find_unit(ws.cfg.units, unit) is None:
            console.print(err_unknown_unit(unit, ws.cfg.units))
            raise typer.Exit(1)
        projects = filter_projects(ws.store.list(), unit_id=unit, search=search)
    finally:
        ws.close()

    if unit:
        selected = find_unit(ws.cfg.units, unit)
        title = f"Projetos da Unidade — {selected.name}"
    else:
        title = "Todos os Projetos"

    if not projects:
        console.print(f"[bold]{title}[/] (0)\n  [dim]Nenhum projeto encontrado.[/]")
        return

    table = Table(title=f"{title} ({len(projects)})", show_header=True, header_style="bold")
    table.add_column("Id", style="bold")
    table.add_column("Título")
    table.add_column("Unidade")
    table.add_column("Status")
    table.add_column("Início")
    table.add_column("Contratada")
    table.add_column("Total", justify="right")

    for p in projects:
        u = find_unit(ws.cfg.units, p.unit_id)
        table.add_row(
            p.id,
            p.title,
            u.label if u else p.unit_id,
            _status_markup(p.status),
            format_date(p.start_date),
            p.contractor.name,
            format_brl(p.total_cost),
        )
    console.print(table)


def show_cmd(
    project_id: Annotated[str, typer.Argument(help="Project id.")],
    db: _DbOption = None,
) -> None:
    """Show every detail of one project."""
    ws = open_workspace(db)
    try:
        project = _get_or_exit(ws, project_id)
    finally:
        ws.close()

    unit = find_unit(ws.cfg.units, project.unit_id)
    _render_project(project, unit.name if unit else project.unit_id)


# ---------------------------------------------------------------------------
# Mutations
# ---------------------------------------------------------------------------


def add_cmd(
    unit: Annotated[str, typer.Option("--unit", "-u", help="Unit id the project belongs to.")],
    title: Annotated[str, typer.Option("--title", "-t", help="Project title.")],
    description: Annotated[str, typer.Option("--description", help="Free-text description.")] = "",
    requester: Annotated[str, typer.Option("--requester", help="Requester name (solicitante).")] = "",
    department: Annotated[str, typer.Option("--department", help="Department (setor).")] = "",
    contractor: Annotated[str, typer.Option("--contractor", help="Contractor trade name.")] = "",
    legal_name: Annotated[str, typer.Option("--legal-name", help="Contractor legal name.")] = "",
    cnpj: Annotated[str, typer.Option("--cnpj", help="Contractor CNPJ.")] = "",
    manager: Annotated[str, typer.Option("--manager", help="Contractor manager.")] = "",
    contact: Annotated[str, typer.Option("--contact", help="Contractor phone/e-mail.")] = "",
    start: Annotated[str | None, typer.Option("--start", help="Start date YYYY-MM-DD (default: today).")] = None,
    status: Annotated[str, typer.Option("--status", help="planned, in_progress, on_hold or completed.")] = "planned",
    material: Annotated[float, typer.Option("--material", help="Material cost.")] = 0,
    labor: Annotated[float, typer.Option("--labor", help="Labor cost.")] = 0,
    equipment: Annotated[float, typer.Option("--equipment", help="Equipment cost.")] = 0,
    image: Annotated[list[str] | None, typer.Option("--image", help="Photo URL/path (repeatable).")] = None,
    invoice: Annotated[list[str] | None, typer.Option("--invoice", help="Invoice URL/path (repeatable).")] = None,
    db: _DbOption = None,
) -> None:
    """Register a new project."""
    draft = ProjectDraft(
        unit_id=unit,
        title=title,
        description=description,
        requester=requester,
        department=department,
        contractor=Contractor(
            name=contractor,
            legal_name=legal_name,
            cnpj=cnpj,
            manager=manager,
            contact=contact,
        ),
        start_date=_parse_date(start) if start else date.today(),
        status=_parse_status(status),
        costs=Costs(material=material, labor=labor, equipment=equipment),
        images=_clean_refs(image),
        invoices=_clean_refs(invoice),
    )

    ws = open_workspace(db)
    try:
        try:
            project = ws.store.create(draft)
        except UnknownUnitError as exc:
            console.print(err_unknown_unit(exc.unit_id, ws.cfg.units))
            raise typer.Exit(1) from None
        ws.repo.save_project(project)
    finally:
        ws.close()

    console.print(f"[green]✓[/] Created project [bold]{project.id}[/]: {project.title}")


def edit_cmd(
    project_id: Annotated[str, typer.Argument(help="Project id.")],
    unit: Annotated[str | None, typer.Option("--unit", "-u", help="Move to another unit.")] = None,
    title: Annotated[str | None, typer.Option("--title", "-t")] = None,
    description: Annotated[str | None, typer.Option("--description")] = None,
    requester: Annotated[str | None, typer.Option("--requester")] = None,
    department: Annotated[str | None, typer.Option("--department")] = None,
    contractor: Annotated[str | None, typer.Option("--contractor")] = None,
    legal_name: Annotated[str | None, typer.Option("--legal-name")] = None,
    cnpj: Annotated[str | None, typer.Option("--cnpj")] = None,
    manager: Annotated[str | None, typer.Option("--manager")] = None,
    contact: Annotated[str | None, typer.Option("--contact")] = None,
    start: Annotated[str | None, typer.Option("--start", help="Start date YYYY-MM-DD.")] = None,
    status: Annotated[str | None, typer.Option("--status")] = None,
    material: Annotated[float | None, typer.Option("--material")] = None,
    labor: Annotated[float | None, typer.Option("--labor")] = None,
    equipment: Annotated[float | None, typer.Option("--equipment")] = None,
    image: Annotated[
        list[str] | None,
        typer.Option("--image", help="Replaces the photo list (repeatable)."),
    ] = None,
    invoice: Annotated[
        list[str] | None,
        typer.Option("--invoice", help="Replaces the invoice list (repeatable)."),
    ] = None,
    clear_images: Annotated[bool, typer.Option("--clear-images", help="Remove all photos.")] = False,
    clear_invoices: Annotated[bool, typer.Option("--clear-invoices", help="Remove all invoices.")] = False,
    db: _DbOption = None,
) -> None:
    """Edit a project. Unspecified fields keep their current values."""
    parsed_start = _parse_date(start) if start else None
    parsed_status = _parse_status(status) if status else None

    ws = open_workspace(db)
    try:
        current = _get_or_exit(ws, project_id)
        draft = current.draft()

        contractor_changes = _given(
            name=contractor, legal_name=legal_name, cnpj=cnpj, manager=manager, contact=contact
        )
        cost_changes = _given(material=material, labor=labor, equipment=equipment)
        changes = _given(
            unit_id=unit,
            title=title,
            description=description,
            requester=requester,
            department=department,
            start_date=parsed_start,
            status=parsed_status,
        )
        if contractor_changes:
            changes["contractor"] = replace(draft.contractor, **contractor_changes)
        if cost_changes:
            changes["costs"] = replace(draft.costs, **cost_changes)
        if clear_images or image:
            changes["images"] = _clean_refs(image)
        if clear_invoices or invoice:
            changes["invoices"] = _clean_refs(invoice)

        try:
            project = ws.store.update(project_id, replace(draft, **changes))
        except UnknownUnitError as exc:
            console.print(err_unknown_unit(exc.unit_id, ws.cfg.units))
            raise typer.Exit(1) from None
        ws.repo.save_project(project)
    finally:
        ws.close()

    console.print(f"[green]✓[/] Updated project [bold]{project.id}[/]: {project.title}")


def rate_cmd(
    project_id: Annotated[str, typer.Argument(help="Project id.")],
    rating: Annotated[int, typer.Option("--rating", "-r", help="Contractor rating, 1 to 5.")],
    comment: Annotated[str, typer.Option("--comment", "-c", help="Evaluation comment.")],
    db: _DbOption = None,
) -> None:
    """Record the post-completion evaluation of a project's contractor."""
    ws = open_workspace(db)
    try:
        _get_or_exit(ws, project_id)
        try:
            project = ws.store.set_evaluation(project_id, rating, comment)
        except EvaluationError as exc:
            console.print(err_invalid_evaluation(str(exc)))
            raise typer.Exit(1) from None
        ws.repo.save_project(project)
    finally:
        ws.close()

    console.print(f"[green]✓[/] Avaliação salva: {'★' * rating}{'☆' * (5 - rating)}")


def advise_cmd(
    project_id: Annotated[str, typer.Argument(help="Project id.")],
    model: Annotated[
        str | None,
        typer.Option("--model", help="LiteLLM model override (provider/model)."),
    ] = None,
    db: _DbOption = None,
) -> None:
    """Request the AI cost advisory for a project and store it."""
    ws = open_workspace(db)
    try:
        _get_or_exit(ws, project_id)
        adv = ws.cfg.advisory
        advisor = LLMAdvisor(
            model=model or adv.model,
            max_tokens=adv.max_tokens,
            temperature=adv.temperature,
            num_retries=adv.num_retries,
            company=ws.cfg.company.name,
        )
        with console.status("Analisando custos…"):
            project = request_advisory(ws.store, advisor, project_id)
        ws.repo.save_project(project)
    finally:
        ws.close()

    if project.advisory in FALLBACK_MESSAGES:
        console.print(warn_advisory_fallback(api_key_env(advisor.model)))
    console.print(Panel(project.advisory or "", title="[bold]Análise IA[/]", expand=False))


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def _render_project(project: Project, unit_name: str) -> None:
    header = [
        f"[bold]{project.title}[/]  [dim]({project.id})[/]",
        f"{_status_markup(project.status)}  Início: {format_date(project.start_date)}  Unidade: {unit_name}",
        f"Solicitante: {project.requester or 'Não informado'}",
        f"Setor: {project.department or 'Não informado'}",
        "",
        project.description or "[dim]Sem descrição.[/]",
    ]
    console.print(Panel("\n".join(header), title="[bold]Obra[/]", expand=False))

    c = project.contractor
    contractor_lines = [
        f"Nome fantasia:  {c.name}",
        f"Razão social:   {c.legal_name}",
        f"CNPJ:           {c.cnpj}",
        f"Responsável:    {c.manager}",
        f"Contato:        {c.contact}",
    ]
    console.print(Panel("\n".join(contractor_lines), title="[bold]Contratada[/]", expand=False))

    costs = Table(show_header=False, box=None, padding=(0, 1))
    costs.add_column("Item", style="bold")
    costs.add_column("Valor", justify="right")
    costs.add_column("%", justify="right", style="dim")
    for share in cost_breakdown(project):
        costs.add_row(share.label, format_brl(share.value), f"{share.percent:.1f}%")
    costs.add_row("TOTAL", f"[bold]{format_brl(project.total_cost)}[/]", "")
    console.print(Panel(costs, title="[bold]Custos[/]", expand=False))

    console.print(Panel(_refs(project.images, "Nenhuma foto."), title=f"[bold]Fotos[/] ({len(project.images)})", expand=False))
    console.print(
        Panel(_refs(project.invoices, "Nenhuma nota fiscal."), title=f"[bold]Notas Fiscais[/] ({len(project.invoices)})", expand=False)
    )

    if project.evaluation:
        ev = project.evaluation
        stars = "★" * ev.rating + "☆" * (5 - ev.rating)
        body = f"[yellow]{stars}[/]  [dim]{ev.date[:10]}[/]\n{ev.comment}"
    else:
        body = "[dim]Sem avaliação.  Run:  obras rate <id> --rating N --comment ...[/]"
    console.print(Panel(body, title="[bold]Avaliação[/]", expand=False))

    if project.advisory:
        console.print(Panel(project.advisory, title="[bold]Análise IA[/]", expand=False))


def _refs(refs: tuple[str, ...], empty: str) -> str:
    if not refs:
        return f"[dim]{empty}[/]"
    return "\n".join(f"{i}. {ref}" for i, ref in enumerate(refs, start=1))


def _status_markup(status: ProjectStatus) -> str:
    return f"[{_STATUS_STYLE[status]}]{status.value}[/]"


# ---------------------------------------------------------------------------
# Parsing helpers
# ---------------------------------------------------------------------------


def _get_or_exit(ws: Workspace, project_id: str) -> Project:
    try:
        return ws.store.get(project_id)
    except ProjectNotFoundError:
        console.print(err_project_not_found(project_id))
        raise typer.Exit(1) from None


def _parse_status(value: str) -> ProjectStatus:
    try:
        return ProjectStatus.parse(value)
    except ValueError:
        console.print(err_invalid_status(value))
        raise typer.Exit(1) from None


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        console.print(err_invalid_date(value))
        raise typer.Exit(1) from None


def _clean_refs(refs: list[str] | None) -> tuple[str, ...]:
    """Trim references and drop blanks, keeping order."""
    return tuple(r.strip() for r in refs or [] if r.strip())


def _given(**values: object) -> dict[str, object]:
    return {k: v for k, v in values.items() if v is not None}
