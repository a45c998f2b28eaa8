"""obras init — create the snapshot database and config scaffold.

Creates:
  .obras.db                — empty project snapshot with schema
  obras.yaml               — per-directory config (company, advisory, units)
  ~/.obras/config.yaml     — global model config (created once, mode 0o600)

With --sample the three demo projects are loaded into an empty database.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from obras.cli.common import console, load_cfg, open_db, resolve_db
from obras.config import PROJECT_CONFIG_NAME, ensure_global_config
from obras.db.connection import Database
from obras.db.repository import Repository
from obras.units import SAMPLE_PROJECTS

_PROJECT_YAML = """\
# Obras project configuration.
# API keys go in environment variables, e.g.  export GEMINI_API_KEY=...

company:
  name: GP7 Distribuidora

advisory:
  model: gemini/gemini-2.5-flash
  max_tokens: 256

database:
  path: .obras.db

# Replace the built-in site list:
# units:
#   - {id: "1", name: Unidade Capanema, city: Capanema, state: PA}
"""


def init_cmd(
    db: Annotated[
        Path | None,
        typer.Option("--db", help="Path to the snapshot database (default from config)."),
    ] = None,
    sample: Annotated[
        bool,
        typer.Option("--sample", help="Seed an empty database with demo projects."),
    ] = False,
    global_config: Annotated[
        Path | None,
        typer.Option("--global-config", hidden=True, help="Override global config path (for testing)."),
    ] = None,
) -> None:
    """Initialize the project database and config files."""
    cfg = load_cfg()
    db_path = resolve_db(db, cfg)
    existed = Database(db_path).exists()

    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = open_db(db_path)
    try:
        repo = Repository(conn)
        if existed:
            console.print(f"[yellow]⚠[/]  {db_path} already exists — schema checked, data preserved.")
        else:
            console.print(f"  [green]✓[/] {db_path}")

        if sample:
            if repo.count_projects() == 0:
                for project in SAMPLE_PROJECTS:
                    repo.save_project(project)
                console.print(f"  [green]✓[/] {len(SAMPLE_PROJECTS)} sample projects loaded")
            else:
                console.print("  [dim]Database not empty — sample projects skipped.[/]")
    finally:
        conn.close()

    project_yaml = Path(PROJECT_CONFIG_NAME)
    if not project_yaml.exists():
        project_yaml.write_text(_PROJECT_YAML, encoding="utf-8")
        console.print(f"  [green]✓[/] {project_yaml}")

    cfg_path = ensure_global_config(global_config)
    console.print(f"  [green]✓[/] {cfg_path} (global config)")

    console.print("\nNext steps:")
    console.print("  1. obras units                          (list sites)")
    console.print("  2. obras add --unit <id> --title <...>   (register a project)")
    console.print("  3. obras summary                        (dashboard)")
