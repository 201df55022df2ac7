"""
Request/result models for the orchestration entry point.

GenerationResult is serialized with the camelCase keys the editor expects
(``output``, ``provider``, ``durationMs``, ``from``/``to`` on suggestions).
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from writerly_ai.models.enums import SuggestionCategory, TaskEnum
from writerly_ai.models.voice import VoiceSettings


FALLBACK_PROVIDER = "fallback"


class GenerationRequest(BaseModel):
    """Everything the orchestrator needs for one generation."""

    model_config = ConfigDict(frozen=True)

    task: TaskEnum = Field(default=TaskEnum.REWRITE, description="Unknown tasks become rewrite")
    instruction: str = Field(default="", description="What the user asked for")
    context: str = Field(default="", description="Document text; sent verbatim")
    voice_settings: VoiceSettings = Field(default_factory=VoiceSettings)
    explicit_provider: Optional[str] = Field(
        default=None, description="Provider the caller asked for by name"
    )
    user_id: str = Field(default="anon")
    temperature: Optional[float] = Field(default=None, ge=0.0, le=2.0)
    max_tokens: Optional[int] = Field(default=None, ge=1)

    @field_validator("task", mode="before")
    @classmethod
    def _default_task(cls, value: Any) -> TaskEnum:
        return TaskEnum.parse(value) or TaskEnum.REWRITE

    @field_validator("instruction", "context", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("explicit_provider", mode="before")
    @classmethod
    def _blank_provider_is_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class Suggestion(BaseModel):
    """One targeted writing suggestion with optional offsets into the context."""

    model_config = ConfigDict(populate_by_name=True)

    message: str = ""
    original: str = ""
    suggestion: str = ""
    from_: Optional[int] = Field(default=None, alias="from")
    to: Optional[int] = None
    category: SuggestionCategory = SuggestionCategory.CLARITY


class GenerationResult(BaseModel):
    """Normalized result, whichever provider (or the fallback) produced it."""

    model_config = ConfigDict(populate_by_name=True)

    output_text: str = Field(alias="output")
    provider_used: str = Field(alias="provider")
    suggestions: Optional[list[Suggestion]] = None
    duration_ms: Optional[float] = Field(default=None, alias="durationMs")
    error: Optional[str] = None
    # Headers for the budget of the provider that answered; not part of the body
    rate_limit_headers: dict[str, str] = Field(default_factory=dict, exclude=True, repr=False)

    @property
    def is_fallback(self) -> bool:
        return self.provider_used == FALLBACK_PROVIDER

    def to_response(self) -> dict[str, Any]:
        """
        Wire representation: camelCase keys, top-level ``None`` fields omitted.

        Suggestion offsets stay in the output as ``null`` when unknown.
        """
        data = self.model_dump(by_alias=True, mode="json")
        return {key: value for key, value in data.items() if value is not None}
