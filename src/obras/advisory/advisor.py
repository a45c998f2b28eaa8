"""Cost advisory — short LLM insight on a project's cost profile.

The advisor always answers with a string: generated text on success, or one
of the fixed fallback messages when the key is missing or the call fails.
Callers store whatever comes back via ProjectStore.set_advisory().
"""

from __future__ import annotations

import logging
from typing import Protocol

from obras.advisory import llm_client
from obras.models import Project
from obras.store import ProjectStore

logger = logging.getLogger(__name__)

MISSING_KEY_MESSAGE = "API Key is missing. Cannot perform AI analysis."
ERROR_MESSAGE = "Erro ao conectar com a IA para análise."
EMPTY_MESSAGE = "Não foi possível gerar a análise."
FALLBACK_MESSAGES = (MISSING_KEY_MESSAGE, ERROR_MESSAGE, EMPTY_MESSAGE)

_DEFAULT_MODEL = "gemini/gemini-2.5-flash"

_ADVISORY_PROMPT = """\
Atue como um especialista em engenharia civil e gestão de custos.
Analise os dados desta obra da {company}:

Título: {title}
Descrição: {description}
Status: {status}
Empresa Contratada: {contractor} (CNPJ: {cnpj})

Custos:
- Material: R$ {material}
- Mão-de-obra: R$ {labor}
- Equipamentos: R$ {equipment}
- TOTAL: R$ {total}

Forneça um breve parágrafo (máximo 50 palavras) com um insight sobre a \
proporção dos custos e se parecem adequados para o tipo de obra descrito. \
Seja direto e profissional."""


class Advisor(Protocol):
    """Anything that turns a project into advisory text."""

    def summarize(self, project: Project) -> str: ...


def build_prompt(project: Project, company: str = "GP7 Distribuidora") -> str:
    """Render the advisory prompt for *project*."""
    costs = project.costs
    return _ADVISORY_PROMPT.format(
        company=company,
        title=project.title,
        description=project.description,
        status=project.status.value,
        contractor=project.contractor.name,
        cnpj=project.contractor.cnpj,
        material=_amount(costs.material),
        labor=_amount(costs.labor),
        equipment=_amount(costs.equipment),
        total=_amount(costs.total),
    )


class LLMAdvisor:
    """Advisor backed by a LiteLLM completion model.

    Args:
        model:       LiteLLM model string ('provider/model').
        max_tokens:  Maximum tokens in the generated text.
        temperature: Sampling temperature.
        num_retries: LiteLLM retries on transient errors.
        company:     Company name quoted in the prompt.
    """

    def __init__(
        self,
        model: str = _DEFAULT_MODEL,
        max_tokens: int = 256,
        temperature: float = 0.2,
        num_retries: int = 2,
        company: str = "GP7 Distribuidora",
    ) -> None:
        self._model = model
        self._max_tokens = max_tokens
        self._temperature = temperature
        self._num_retries = num_retries
        self._company = company

    @property
    def model(self) -> str:
        return self._model

    def summarize(self, project: Project) -> str:
        """Return advisory text for *project*, or a fallback message."""
        try:
            llm_client.validate_api_key(self._model)
        except EnvironmentError as exc:
            logger.warning("%s", exc)
            return MISSING_KEY_MESSAGE

        prompt = build_prompt(project, company=self._company)
        try:
            text = llm_client.complete(
                self._model,
                [{"role": "user", "content": prompt}],
                max_tokens=self._max_tokens,
                temperature=self._temperature,
                num_retries=self._num_retries,
            )
        except Exception:
            logger.exception("Advisory request failed for project %s", project.id)
            return ERROR_MESSAGE

        return text.strip() or EMPTY_MESSAGE


def request_advisory(store: ProjectStore, advisor: Advisor, project_id: str) -> Project:
    """Ask *advisor* about a stored project and cache the answer on it.

    Raises:
        ProjectNotFoundError: If the store has no such project.
    """
    project = store.get(project_id)
    text = advisor.summarize(project)
    return store.set_advisory(project_id, text)


def _amount(value: float) -> str:
    """Plain decimal amount, e.g. ``1234567`` or ``80000.5``; never exponent notation."""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.2f}".rstrip("0").rstrip(".")
