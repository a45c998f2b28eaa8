"""Dashboard aggregates derived from the project collection.

Pure functions of (projects, units): nothing here keeps state, so callers
recompute on every change instead of invalidating caches.

Usage:
    stats = compute_summary(store.list(), units)
    stats.total_invested, stats.cost_by_unit[0].name, stats.monthly_costs
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from obras.models import Project, ProjectStatus, Unit

# pt-BR short month names, as rendered by the dashboard charts.
_MONTHS_PT_BR: tuple[str, ...] = (
    "jan", "fev", "mar", "abr", "mai", "jun",
    "jul", "ago", "set", "out", "nov", "dez",
)


@dataclass(frozen=True)
class UnitCost:
    unit_id: str
    name: str  # city
    short_name: str  # state code
    value: float


@dataclass(frozen=True)
class MonthlyCost:
    key: str  # "YYYY-MM"
    name: str  # e.g. "out. de 23"
    value: float


@dataclass(frozen=True)
class CostShare:
    label: str
    value: float
    percent: float


@dataclass(frozen=True)
class SummaryStats:
    total_projects: int = 0
    active_projects: int = 0
    completed_projects: int = 0
    total_invested: float = 0
    cost_by_unit: list[UnitCost] = field(default_factory=list)
    monthly_costs: list[MonthlyCost] = field(default_factory=list)


def compute_summary(projects: Sequence[Project], units: Iterable[Unit]) -> SummaryStats:
    """Compute headline counts, the per-unit ranking and the monthly series."""
    return SummaryStats(
        total_projects=len(projects),
        active_projects=sum(1 for p in projects if p.status is ProjectStatus.IN_PROGRESS),
        completed_projects=sum(1 for p in projects if p.status is ProjectStatus.COMPLETED),
        total_invested=sum((p.total_cost for p in projects), 0),
        cost_by_unit=cost_by_unit(projects, units),
        monthly_costs=monthly_costs(projects),
    )


def cost_by_unit(projects: Iterable[Project], units: Iterable[Unit]) -> list[UnitCost]:
    """Return one entry per unit, sorted by summed cost (highest first).

    Units without projects are included at 0. The sort is stable, so units
    with equal totals keep their reference-list order.
    """
    totals: dict[str, float] = {}
    for project in projects:
        totals[project.unit_id] = totals.get(project.unit_id, 0) + project.total_cost

    entries = [
        UnitCost(
            unit_id=unit.id,
            name=unit.city,
            short_name=unit.state,
            value=totals.get(unit.id, 0),
        )
        for unit in units
    ]
    return sorted(entries, key=lambda e: e.value, reverse=True)


def monthly_costs(projects: Iterable[Project]) -> list[MonthlyCost]:
    """Bucket total cost by start month; empty months are omitted."""
    buckets: dict[str, float] = {}
    for project in projects:
        key = f"{project.start_date.year:04d}-{project.start_date.month:02d}"
        buckets[key] = buckets.get(key, 0) + project.total_cost

    # Zero-padded keys sort chronologically.
    return [
        MonthlyCost(key=key, name=monthly_label(key), value=value)
        for key, value in sorted(buckets.items())
    ]


def monthly_label(key: str) -> str:
    """Render a ``YYYY-MM`` key as a pt-BR short label, e.g. ``set. de 23``."""
    year, month = key.split("-")
    return f"{_MONTHS_PT_BR[int(month) - 1]}. de {year[-2:]}"


def cost_breakdown(project: Project) -> list[CostShare]:
    """Return material/labor/equipment with their share of the project total.

    A zero total yields 0.0 percent for every component.
    """
    total = project.total_cost
    parts = (
        ("Material", project.costs.material),
        ("Mão-de-Obra", project.costs.labor),
        ("Equipamentos", project.costs.equipment),
    )
    return [
        CostShare(label=label, value=value, percent=(value / total * 100) if total else 0.0)
        for label, value in parts
    ]
