"""Domain model for construction projects ("obras").

Every record is a frozen dataclass: the ProjectStore swaps whole instances
instead of mutating them, so a Project handed out by the store never changes
underneath the caller.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum


class ProjectStatus(str, Enum):
    """Closed set of project states. Values are the pt-BR display labels."""

    PLANNED = "Planejado"
    IN_PROGRESS = "Em Andamento"
    ON_HOLD = "Pausado"
    COMPLETED = "Concluído"

    @classmethod
    def parse(cls, value: str | ProjectStatus) -> ProjectStatus:
        """Accept a member, a member name (any case) or a display label.

        Raises:
            ValueError: If *value* matches none of the four states.
        """
        if isinstance(value, cls):
            return value
        text = str(value).strip()
        for member in cls:
            if text.upper().replace("-", "_") == member.name or text == member.value:
                return member
        choices = ", ".join(m.name.lower() for m in cls)
        raise ValueError(f"Unknown project status '{value}'. Choose one of: {choices}")


@dataclass(frozen=True)
class Unit:
    """A company site. Reference data only — never created by the store."""

    id: str
    name: str
    city: str
    state: str
    coordinates: tuple[float, float] | None = None  # (lat, lng)

    @property
    def label(self) -> str:
        return f"{self.city}/{self.state}"


@dataclass(frozen=True)
class Contractor:
    name: str  # trade name (nome fantasia)
    legal_name: str = ""  # razão social
    cnpj: str = ""
    manager: str = ""
    contact: str = ""


@dataclass(frozen=True)
class Costs:
    material: float = 0
    labor: float = 0
    equipment: float = 0

    @property
    def total(self) -> float:
        return self.material + self.labor + self.equipment


@dataclass(frozen=True)
class Evaluation:
    rating: int  # 1..5
    comment: str
    date: str  # ISO-8601 timestamp of the save


@dataclass(frozen=True)
class ProjectDraft:
    """User-editable fields of a project, as filled in by the entry form."""

    unit_id: str
    title: str
    description: str = ""
    requester: str = ""
    department: str = ""
    contractor: Contractor = Contractor(name="")
    start_date: date = date(1970, 1, 1)
    status: ProjectStatus = ProjectStatus.PLANNED
    costs: Costs = Costs()
    images: tuple[str, ...] = ()
    invoices: tuple[str, ...] = ()


@dataclass(frozen=True)
class Project:
    """A stored project: draft fields plus identity and attached feedback.

    Attributes:
        id: Assigned by the store at creation; never changes.
        evaluation: Post-completion rating, replaced wholesale on each save.
        advisory: Cached advisory text; None until first requested.
    """

    id: str
    unit_id: str
    title: str
    description: str = ""
    requester: str = ""
    department: str = ""
    contractor: Contractor = Contractor(name="")
    start_date: date = date(1970, 1, 1)
    status: ProjectStatus = ProjectStatus.PLANNED
    costs: Costs = Costs()
    images: tuple[str, ...] = ()
    invoices: tuple[str, ...] = ()
    evaluation: Evaluation | None = None
    advisory: str | None = None

    @property
    def total_cost(self) -> float:
        return self.costs.total

    def draft(self) -> ProjectDraft:
        """Return the editable view of this project (edit-form pre-fill)."""
        return ProjectDraft(
            unit_id=self.unit_id,
            title=self.title,
            description=self.description,
            requester=self.requester,
            department=self.department,
            contractor=self.contractor,
            start_date=self.start_date,
            status=self.status,
            costs=self.costs,
            images=self.images,
            invoices=self.invoices,
        )

    @classmethod
    def from_draft(
        cls,
        project_id: str,
        draft: ProjectDraft,
        *,
        evaluation: Evaluation | None = None,
        advisory: str | None = None,
    ) -> Project:
        return cls(
            id=project_id,
            unit_id=draft.unit_id,
            title=draft.title,
            description=draft.description,
            requester=draft.requester,
            department=draft.department,
            contractor=draft.contractor,
            start_date=draft.start_date,
            status=draft.status,
            costs=draft.costs,
            images=tuple(draft.images),
            invoices=tuple(draft.invoices),
            evaluation=evaluation,
            advisory=advisory,
        )
