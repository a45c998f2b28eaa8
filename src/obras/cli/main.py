"""Obras CLI entry point."""

from __future__ import annotations

import importlib.metadata
import logging
from typing import Annotated

import typer
from rich.logging import RichHandler

from obras.cli.common import console
from obras.cli.init import init_cmd
from obras.cli.projects import (
    add_cmd,
    advise_cmd,
    edit_cmd,
    list_cmd,
    rate_cmd,
    show_cmd,
)
from obras.cli.remove import remove_cmd
from obras.cli.summary import summary_cmd, units_cmd


def _installed_version() -> str:
    try:
        return importlib.metadata.version("obras")
    except importlib.metadata.PackageNotFoundError:
        return "dev"


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"obras {_installed_version()}")
        raise typer.Exit()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False, rich_tracebacks=True)],
        force=True,
    )
    # LiteLLM is chatty at DEBUG; keep it at WARNING even in verbose mode.
    logging.getLogger("LiteLLM").setLevel(logging.WARNING)


app = typer.Typer(
    name="obras",
    help=(
        "Obras — construction project tracking per unit.\n\n"
        "  obras summary   Network overview: totals, cost per unit, monthly costs.\n"
        "  obras list      Projects filtered by unit and search term."
    ),
    add_completion=False,
)


@app.callback()
def main_callback(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging."),
    ] = False,
) -> None:
    """Obras — construction project tracking per unit."""
    _configure_logging(verbose)


app.command("init")(init_cmd)
app.command("units")(units_cmd)
app.command("summary")(summary_cmd)
app.command("list")(list_cmd)
app.command("show")(show_cmd)
app.command("add")(add_cmd)
app.command("edit")(edit_cmd)
app.command("rate")(rate_cmd)
app.command("advise")(advise_cmd)
app.command("remove")(remove_cmd)


@app.command("version")
def version_cmd() -> None:
    """Show the installed Obras version."""
    typer.echo(f"obras {_installed_version()}")


if __name__ == "__main__":
    app()
