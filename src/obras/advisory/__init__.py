"""Advisory text collaborator (LLM-backed)."""

from obras.advisory.advisor import (
    EMPTY_MESSAGE,
    ERROR_MESSAGE,
    FALLBACK_MESSAGES,
    MISSING_KEY_MESSAGE,
    Advisor,
    LLMAdvisor,
    build_prompt,
    request_advisory,
)

__all__ = [
    "Advisor",
    "LLMAdvisor",
    "build_prompt",
    "request_advisory",
    "MISSING_KEY_MESSAGE",
    "ERROR_MESSAGE",
    "EMPTY_MESSAGE",
    "FALLBACK_MESSAGES",
]
