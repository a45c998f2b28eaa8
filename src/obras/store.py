"""In-memory project store — sole owner of the project collection.

All mutations go through ProjectStore. Each operation either applies fully or
raises before touching the collection; a read after a write always sees it.
Projects are frozen, so updates swap the stored instance in place (keeping
its position) instead of mutating it.
"""

from __future__ import annotations

import logging
import secrets
import string
from collections.abc import Callable, Iterable
from dataclasses import replace
from datetime import datetime, timezone

from obras.errors import (
    DuplicateProjectError,
    EvaluationError,
    ProjectNotFoundError,
    UnknownUnitError,
)
from obras.models import Evaluation, Project, ProjectDraft, Unit

logger = logging.getLogger(__name__)

_ID_ALPHABET = string.ascii_lowercase + string.digits
_ID_LENGTH = 9


def random_id() -> str:
    """Return a 9-character lowercase base-36 token."""
    return "".join(secrets.choice(_ID_ALPHABET) for _ in range(_ID_LENGTH))


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class ProjectStore:
    """Authoritative, insertion-ordered collection of projects.

    Args:
        units: Reference unit list; drafts must point at one of these.
        projects: Initial collection (e.g. loaded from a snapshot).
        id_factory: Callable producing candidate ids (default: random_id).
            Candidates colliding with an existing id are discarded.
        clock: Callable returning the ISO timestamp stamped on evaluations.
    """

    def __init__(
        self,
        units: Iterable[Unit],
        projects: Iterable[Project] = (),
        *,
        id_factory: Callable[[], str] | None = None,
        clock: Callable[[], str] | None = None,
    ) -> None:
        self._unit_ids = {u.id for u in units}
        self._id_factory = id_factory or random_id
        self._clock = clock or utc_now
        self._projects: dict[str, Project] = {}
        for project in projects:
            if project.id in self._projects:
                raise DuplicateProjectError(f"Duplicate project id '{project.id}'")
            self._projects[project.id] = project

    def __len__(self) -> int:
        return len(self._projects)

    def __contains__(self, project_id: object) -> bool:
        return project_id in self._projects

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(self, project_id: str) -> Project:
        """Return the project with *project_id*.

        Raises:
            ProjectNotFoundError: If no such project exists.
        """
        try:
            return self._projects[project_id]
        except KeyError:
            raise ProjectNotFoundError(project_id) from None

    def list(self) -> list[Project]:
        """Return all projects in insertion order (newest last)."""
        return list(self._projects.values())

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def create(self, draft: ProjectDraft) -> Project:
        """Store a new project built from *draft* and return it.

        The new project gets a fresh id, no evaluation and no advisory text.

        Raises:
            UnknownUnitError: If draft.unit_id is not a reference unit.
        """
        self._check_unit(draft.unit_id)
        project = Project.from_draft(self._new_id(), draft)
        self._projects[project.id] = project
        logger.debug("Created project %s (%s)", project.id, project.title)
        return project

    def update(self, project_id: str, draft: ProjectDraft) -> Project:
        """Replace every editable field of a project with *draft*.

        Id, evaluation and advisory text are carried over unchanged.

        Raises:
            ProjectNotFoundError: If no such project exists.
            UnknownUnitError: If draft.unit_id is not a reference unit.
        """
        current = self.get(project_id)
        self._check_unit(draft.unit_id)
        project = Project.from_draft(
            current.id,
            draft,
            evaluation=current.evaluation,
            advisory=current.advisory,
        )
        self._projects[project_id] = project
        logger.debug("Updated project %s", project_id)
        return project

    def set_evaluation(self, project_id: str, rating: int | None, comment: str | None) -> Project:
        """Attach an evaluation, replacing any previous one.

        Raises:
            ProjectNotFoundError: If no such project exists.
            EvaluationError: If rating is not an int in 1..5 or comment is blank.
                Nothing is changed in that case.
        """
        current = self.get(project_id)
        if isinstance(rating, bool) or not isinstance(rating, int) or not 1 <= rating <= 5:
            raise EvaluationError(f"Rating must be an integer from 1 to 5, got {rating!r}")
        if not comment or not comment.strip():
            raise EvaluationError("Evaluation comment must not be empty")

        evaluation = Evaluation(rating=rating, comment=comment, date=self._clock())
        project = replace(current, evaluation=evaluation)
        self._projects[project_id] = project
        logger.debug("Evaluated project %s: %d/5", project_id, rating)
        return project

    def set_advisory(self, project_id: str, text: str) -> Project:
        """Set or replace the cached advisory text of a project.

        Raises:
            ProjectNotFoundError: If no such project exists.
        """
        project = replace(self.get(project_id), advisory=text)
        self._projects[project_id] = project
        return project

    def delete(self, project_id: str) -> None:
        """Remove a project irrevocably.

        Raises:
            ProjectNotFoundError: If no such project exists.
        """
        if project_id not in self._projects:
            raise ProjectNotFoundError(project_id)
        del self._projects[project_id]
        logger.debug("Deleted project %s", project_id)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _check_unit(self, unit_id: str) -> None:
        if unit_id not in self._unit_ids:
            raise UnknownUnitError(unit_id)

    def _new_id(self) -> str:
        while True:
            candidate = self._id_factory()
            if candidate not in self._projects:
                return candidate
            logger.debug("Id collision on %s, regenerating", candidate)
