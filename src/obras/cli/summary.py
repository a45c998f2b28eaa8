"""obras summary / obras units — dashboard overview.

Panels: headline totals, investment per unit (ranked, top 3 highlighted)
and the monthly cost series.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.panel import Panel
from rich.table import Table

from obras.cli.common import bar, console, format_brl, load_cfg, open_workspace
from obras.stats import SummaryStats, compute_summary

_TOP_HIGHLIGHT = 3


def summary_cmd(
    db: Annotated[
        Path | None,
        typer.Option("--db", help="Path to the snapshot database."),
    ] = None,
) -> None:
    """Show the network overview: totals, cost per unit and monthly costs."""
    ws = open_workspace(db)
    try:
        stats = compute_summary(ws.store.list(), ws.cfg.units)
    finally:
        ws.close()

    _show_totals_panel(stats, ws.cfg.company.name, len(ws.cfg.units))
    _show_units_panel(stats)
    _show_monthly_panel(stats)


def units_cmd() -> None:
    """List the reference units (sites)."""
    cfg = load_cfg()
    table = Table(title="Unidades", show_header=True, header_style="bold")
    table.add_column("Id", style="bold")
    table.add_column("Nome")
    table.add_column("Cidade/UF")
    for unit in cfg.units:
        table.add_row(unit.id, unit.name, unit.label)
    console.print(table)


# ---------------------------------------------------------------------------
# Panel renderers
# ---------------------------------------------------------------------------


def _show_totals_panel(stats: SummaryStats, company: str, unit_count: int) -> None:
    lines = [
        f"Investimento Total:  [bold]{format_brl(stats.total_invested)}[/]",
        f"Em Andamento:        [bold]{stats.active_projects}[/]",
        f"Obras Concluídas:    [bold]{stats.completed_projects}[/]",
        f"Total de Projetos:   [bold]{stats.total_projects}[/]",
    ]
    console.print(
        Panel(
            "\n".join(lines),
            title=f"[bold]{company}[/] [dim]— visão geral de {unit_count} unidades[/]",
            expand=False,
        )
    )


def _show_units_panel(stats: SummaryStats) -> None:
    table = Table(show_header=False, box=None, padding=(0, 1))
    table.add_column("Unidade", style="bold")
    table.add_column("Total", justify="right")
    table.add_column("Bar")

    top = stats.cost_by_unit[0].value if stats.cost_by_unit else 0
    for i, entry in enumerate(stats.cost_by_unit):
        colour = "blue" if i < _TOP_HIGHLIGHT and entry.value > 0 else "grey50"
        table.add_row(
            f"{entry.name}/{entry.short_name}",
            format_brl(entry.value),
            f"[{colour}]{bar(entry.value, top)}[/]",
        )

    console.print(Panel(table, title="[bold]Investimento por Unidade[/]", expand=False))


def _show_monthly_panel(stats: SummaryStats) -> None:
    if not stats.monthly_costs:
        console.print(
            Panel("[dim]Nenhuma obra cadastrada.[/]", title="[bold]Custo Total Mensal[/]", expand=False)
        )
        return

    table = Table(show_header=False, box=None, padding=(0, 1))
    table.add_column("Mês", style="bold")
    table.add_column("Total", justify="right")
    table.add_column("Bar")

    peak = max(m.value for m in stats.monthly_costs)
    for month in stats.monthly_costs:
        table.add_row(month.name, format_brl(month.value), f"[green]{bar(month.value, peak)}[/]")

    console.print(Panel(table, title="[bold]Custo Total Mensal[/]", expand=False))
