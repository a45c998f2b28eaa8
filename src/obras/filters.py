"""Visible-project selection: unit filter plus free-text search."""

from __future__ import annotations

from collections.abc import Iterable

from obras.models import Project


def matches_search(project: Project, term: str) -> bool:
    """Case-insensitive substring match on title, contractor, requester, department."""
    needle = term.lower()
    return any(
        needle in field.lower()
        for field in (
            project.title,
            project.contractor.name,
            project.requester,
            project.department,
        )
    )


def filter_projects(
    projects: Iterable[Project],
    unit_id: str | None = None,
    search: str | None = None,
) -> list[Project]:
    """Return the projects visible for the current selection, in input order.

    Both filters are optional and compose with AND. An empty search term
    matches everything.
    """
    result = list(projects)
    if unit_id:
        result = [p for p in result if p.unit_id == unit_id]
    if search:
        result = [p for p in result if matches_search(p, search)]
    return result
