"""obras remove — delete a project irrevocably.

Usage:
  obras remove p2
  obras remove p2 --yes
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from obras.cli.common import console, format_brl, open_workspace
from obras.cli.errors import err_project_not_found
from obras.errors import ProjectNotFoundError


def remove_cmd(
    project_id: Annotated[str, typer.Argument(help="Project id to delete.")],
    db: Annotated[
        Path | None,
        typer.Option("--db", help="Path to the snapshot database."),
    ] = None,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip confirmation prompt."),
    ] = False,
) -> None:
    """Delete a project. This cannot be undone."""
    ws = open_workspace(db)
    try:
        try:
            project = ws.store.get(project_id)
        except ProjectNotFoundError:
            console.print(err_project_not_found(project_id))
            raise typer.Exit(1) from None

        console.print(f"\nRemove project: [bold]{project.title}[/] ({project.id})")
        console.print(
            f"  Total: {format_brl(project.total_cost)}  |  "
            f"Photos: {len(project.images)}  |  "
            f"Invoices: {len(project.invoices)}  |  "
            f"Evaluation: {'yes' if project.evaluation else 'no'}"
        )

        if not yes:
            if not typer.confirm(
                "Tem certeza que deseja excluir esta obra? Esta ação não pode ser desfeita.",
                default=False,
            ):
                console.print("[dim]Cancelled.[/]")
                raise typer.Exit(0)

        ws.store.delete(project_id)
        ws.repo.delete_project(project_id)
    finally:
        ws.close()

    console.print(f"\n[green]✓[/] Removed: {project.title}")
