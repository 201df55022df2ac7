"""Provider fallback chain and response shaping."""

from writerly_ai.orchestration.exceptions import RateLimitError
from writerly_ai.orchestration.orchestrator import (
    FALLBACK_TEMPLATE,
    Orchestrator,
    ProviderCandidate,
)
from writerly_ai.orchestration.suggestions import (
    ExtractionLayer,
    ExtractionOutcome,
    extract_suggestions,
    normalize_suggestions,
)

__all__ = [
    "Orchestrator",
    "ProviderCandidate",
    "FALLBACK_TEMPLATE",
    "RateLimitError",
    "ExtractionLayer",
    "ExtractionOutcome",
    "extract_suggestions",
    "normalize_suggestions",
]
