"""Reference units and the sample project set used by ``obras init --sample``."""

from __future__ import annotations

from datetime import date

from obras.models import (
    Contractor,
    Costs,
    Evaluation,
    Project,
    ProjectStatus,
    Unit,
)

DEFAULT_UNITS: tuple[Unit, ...] = (
    Unit(id="1", name="Unidade Capanema", city="Capanema", state="PA"),
    Unit(id="2", name="Unidade Paragominas", city="Paragominas", state="PA"),
    Unit(id="3", name="Unidade Marabá", city="Marabá", state="PA"),
    Unit(id="4", name="Unidade Jequié", city="Jequié", state="BA"),
    Unit(id="5", name="Unidade Eunápolis", city="Eunápolis", state="BA"),
    Unit(id="6", name="Unidade Teixeira de Freitas", city="Teixeira de Freitas", state="BA"),
    Unit(id="7", name="Unidade Itapetinga", city="Itapetinga", state="BA"),
    Unit(id="8", name="Unidade Porto Seguro", city="Porto Seguro", state="BA"),
    Unit(id="9", name="Unidade Rio Branco", city="Rio Branco", state="AC"),
)


SAMPLE_PROJECTS: tuple[Project, ...] = (
    Project(
        id="p1",
        unit_id="1",
        title="Reforma do Telhado",
        description=(
            "Substituição completa das telhas de fibrocimento por "
            "termoacústicas devido a infiltrações."
        ),
        requester="João Silva",
        department="Manutenção Predial",
        contractor=Contractor(
            name="ConstruNorte Ltda",
            legal_name="ConstruNorte Engenharia e Construções LTDA",
            cnpj="12.345.678/0001-90",
            manager="Roberto Almeida",
            contact="(91) 98877-6655",
        ),
        start_date=date(2023, 10, 15),
        status=ProjectStatus.IN_PROGRESS,
        costs=Costs(material=45000, labor=20000, equipment=5000),
        images=(
            "https://images.unsplash.com/photo-1503387762-592deb58ef4e?auto=format&fit=crop&q=80&w=300&h=200",
            "https://images.unsplash.com/photo-1590069261209-f8e9b8642343?auto=format&fit=crop&q=80&w=300&h=200",
        ),
        invoices=(
            "https://www.w3.org/WAI/ER/tests/xhtml/testfiles/resources/pdf/dummy.pdf",
        ),
    ),
    Project(
        id="p2",
        unit_id="3",
        title="Ampliação do Galpão B",
        description="Construção de nova área de armazenagem com 500m².",
        requester="Maria Oliveira",
        department="Logística",
        contractor=Contractor(
            name="Marabá Engenharia",
            legal_name="Marabá Soluções em Engenharia S.A.",
            cnpj="98.765.432/0001-10",
            manager="Fernanda Costa",
            contact="contato@marabaeng.com.br",
        ),
        start_date=date(2023, 11, 1),
        status=ProjectStatus.PLANNED,
        costs=Costs(material=150000, labor=80000, equipment=30000),
    ),
    Project(
        id="p3",
        unit_id="2",
        title="Pintura Externa",
        description="Pintura de toda a fachada e muros laterais.",
        requester="Carlos Santos",
        department="Administrativo",
        contractor=Contractor(
            name="Pinturas Express",
            legal_name="Pinturas Express LTDA",
            cnpj="11.222.333/0001-44",
            manager="Carlos Pintor",
            contact="(91) 99999-8888",
        ),
        start_date=date(2023, 9, 10),
        status=ProjectStatus.COMPLETED,
        costs=Costs(material=12000, labor=8000, equipment=2000),
        images=(
            "https://images.unsplash.com/photo-1562259949-e8e7689d7828?auto=format&fit=crop&q=80&w=300&h=200",
        ),
        evaluation=Evaluation(
            rating=5,
            comment="Serviço excelente e rápido.",
            date="2023-10-01T00:00:00+00:00",
        ),
    ),
)


def find_unit(units: tuple[Unit, ...] | list[Unit], unit_id: str) -> Unit | None:
    """Return the unit with *unit_id*, or None."""
    for unit in units:
        if unit.id == unit_id:
            return unit
    return None
