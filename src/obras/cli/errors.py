"""Obras rich error messages — actionable feedback.

Every error shown to the user must contain:
  1. What went wrong (clear cause)
  2. The exact action the user should take to fix it

Usage:
    from obras.cli.errors import err_no_db
    console.print(err_no_db(".obras.db"))
    raise typer.Exit(1)
"""

from __future__ import annotations

from obras.models import ProjectStatus, Unit


def err_no_db(db_path: str = ".obras.db") -> str:
    """No snapshot database at *db_path*."""
    return (
        f"[red]Error:[/] No database found at '{db_path}'.\n"
        "  Run:  obras init"
    )


def err_project_not_found(project_id: str) -> str:
    return (
        f"[red]Error:[/] Project '{project_id}' not found.\n"
        "  Run:  obras list  to see all project ids."
    )


def err_unknown_unit(unit_id: str, units: list[Unit]) -> str:
    available = ", ".join(f"{u.id} ({u.label})" for u in units) or "(none)"
    return (
        f"[red]Error:[/] Unknown unit '{unit_id}'.\n"
        f"  Available units: {available}"
    )


def err_invalid_status(value: str) -> str:
    choices = ", ".join(m.name.lower() for m in ProjectStatus)
    return (
        f"[red]Error:[/] Unknown status '{value}'.\n"
        f"  Use one of: {choices}"
    )


def err_invalid_date(value: str) -> str:
    return (
        f"[red]Error:[/] Invalid start date '{value}'.\n"
        "  Use the format YYYY-MM-DD, e.g. 2023-10-15"
    )


def err_invalid_evaluation(reason: str) -> str:
    return (
        f"[red]Error:[/] Evaluation not saved: {reason}.\n"
        "  Provide both:  --rating 1..5  --comment \"...\""
    )


def err_config(message: str) -> str:
    """Config file failed validation."""
    return f"[red]Error:[/] Invalid configuration.\n  {message}"


def warn_advisory_fallback(provider_env: str | None) -> str:
    """Advisory text came back as a fallback message."""
    hint = f"  Set:  export {provider_env}=..." if provider_env else "  Check the model server."
    return (
        "[yellow]Warning:[/] No advisory generated; fallback text stored.\n"
        f"{hint}"
    )
