"""Shared helpers for obras CLI commands: config, snapshot I/O, formatting."""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from datetime import date
from pathlib import Path

import typer
from rich.console import Console

from obras.cli.errors import err_config, err_no_db
from obras.config import ConfigError, ObrasConfig, load_config
from obras.db.connection import Database
from obras.db.repository import Repository
from obras.db.schema import initialize
from obras.store import ProjectStore

console = Console()


@dataclass
class Workspace:
    """Everything a command needs: config, open snapshot and the loaded store."""

    cfg: ObrasConfig
    conn: sqlite3.Connection
    repo: Repository
    store: ProjectStore

    def close(self) -> None:
        self.conn.close()


def load_cfg() -> ObrasConfig:
    """Load config or exit 1 with an actionable message."""
    try:
        return load_config()
    except ConfigError as exc:
        console.print(err_config(str(exc)))
        raise typer.Exit(1) from None


def resolve_db(db: Path | None, cfg: ObrasConfig) -> Path:
    return db if db is not None else Path(cfg.database.path)


def open_db(db_path: Path) -> sqlite3.Connection:
    conn = Database(db_path).connect()
    initialize(conn)
    return conn


def open_workspace(db: Path | None) -> Workspace:
    """Load config and the snapshot into a ProjectStore.

    Exits 1 if the database does not exist yet.
    """
    cfg = load_cfg()
    db_path = resolve_db(db, cfg)
    if not Database(db_path).exists():
        console.print(err_no_db(str(db_path)))
        raise typer.Exit(1)

    conn = open_db(db_path)
    repo = Repository(conn)
    store = ProjectStore(cfg.units, repo.list_projects())
    return Workspace(cfg=cfg, conn=conn, repo=repo, store=store)


# ---------------------------------------------------------------------------
# pt-BR formatting
# ---------------------------------------------------------------------------


def format_brl(value: float) -> str:
    """Format an amount as Brazilian reais, e.g. ``R$ 352.000`` or ``R$ 1.234,50``."""
    if float(value).is_integer():
        text = f"{value:,.0f}"
    else:
        text = f"{value:,.2f}"
    return "R$ " + text.translate(str.maketrans({",": ".", ".": ","}))


def format_date(value: date) -> str:
    return value.strftime("%d/%m/%Y")


def bar(value: float, maximum: float, width: int = 24) -> str:
    """Proportional text bar for chart-like tables."""
    if maximum <= 0 or value <= 0:
        return ""
    return "█" * max(1, round(value / maximum * width))
