"""Exceptions raised by the project store.

All of them are scoped to the single requested operation: the store leaves
its collection untouched before raising.
"""

from __future__ import annotations


class ObrasError(Exception):
    """Base class for domain errors."""


class ProjectNotFoundError(ObrasError, KeyError):
    """Raised when an operation targets a project id the store does not hold."""

    def __init__(self, project_id: str) -> None:
        super().__init__(project_id)
        self.project_id = project_id

    def __str__(self) -> str:
        return f"Project '{self.project_id}' not found"


class UnknownUnitError(ObrasError, ValueError):
    """Raised when a draft references a unit id missing from the reference list."""

    def __init__(self, unit_id: str) -> None:
        super().__init__(f"Unknown unit '{unit_id}'")
        self.unit_id = unit_id


class EvaluationError(ObrasError, ValueError):
    """Raised when an evaluation has no valid rating (1-5) or an empty comment."""


class DuplicateProjectError(ObrasError, ValueError):
    """Raised when the store is seeded with two projects sharing an id."""
