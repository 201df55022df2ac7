"""
Pydantic data models for the orchestration service.

Includes:
- Enums (TaskEnum, SuggestionCategory, voice taxonomies)
- VoiceSettings (field-by-field validated, immutable)
- GenerationRequest / GenerationResult / Suggestion
- CompletionRequest (what provider adapters receive)
"""

from writerly_ai.models.enums import (
    AudienceEnum,
    DomainEnum,
    IntentEnum,
    SuggestionCategory,
    TaskEnum,
    ToneEnum,
)
from writerly_ai.models.generation import (
    FALLBACK_PROVIDER,
    GenerationRequest,
    GenerationResult,
    Suggestion,
)
from writerly_ai.models.llm_models import CompletionRequest
from writerly_ai.models.voice import DEFAULT_VOICE, VoiceSettings

__all__ = [
    # Enums
    "TaskEnum",
    "SuggestionCategory",
    "ToneEnum",
    "AudienceEnum",
    "IntentEnum",
    "DomainEnum",
    # Voice
    "VoiceSettings",
    "DEFAULT_VOICE",
    # Generation
    "GenerationRequest",
    "GenerationResult",
    "Suggestion",
    "FALLBACK_PROVIDER",
    # Provider-facing
    "CompletionRequest",
]
