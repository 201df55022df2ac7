"""
API-specific request and response models for FastAPI endpoints.

Request bodies accept extra keys so the tool-injection guard can see (and
reject) client-supplied tool configuration instead of it being dropped
silently.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class GenerateBody(BaseModel):
    """Body of POST /api/ai/generate."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    task: Optional[str] = Field(
        default=None,
        description="rewrite | summarize | expand | suggestions (unknown -> rewrite)",
        examples=["rewrite", "suggestions"],
    )
    instruction: Optional[str] = Field(default=None, description="What the user asked for")
    context: Optional[str] = Field(default=None, description="Document text the request applies to")
    text: Optional[str] = Field(
        default=None,
        description="Legacy field; used as context when context is empty",
    )
    settings: Optional[dict[str, Any]] = Field(
        default=None,
        description="Voice settings overriding the user's stored ones, field by field",
    )
    provider: Optional[str] = Field(
        default=None,
        description="Explicit provider; rate limits on it are reported, not skipped",
        examples=["openai", "gemini", "anthropic", "claude", "ollama"],
    )
    temperature: Optional[float] = Field(default=None, ge=0.0, le=2.0)
    max_tokens: Optional[int] = Field(default=None, alias="maxTokens", ge=1)

    def effective_context(self) -> str:
        return self.context or self.text or ""


class RewriteBody(BaseModel):
    """Body of POST /api/rewrite. ``text`` is sanitized before use."""

    model_config = ConfigDict(extra="allow")

    text: Any = Field(default=None, description="Raw text to rewrite")
    instruction: Optional[str] = None
    settings: Optional[dict[str, Any]] = None
    provider: Optional[str] = None


class GrammarCheckBody(BaseModel):
    text: str = Field(description="Text to check")
    language: Optional[str] = Field(default=None, examples=["en-US", "de-DE"])


class CurrentUser(BaseModel):
    """Authenticated identity supplied by the auth collaborator."""

    user_id: str = "anon"
    email: Optional[str] = None
    settings: Optional[dict[str, Any]] = None


class HealthResponse(BaseModel):
    status: str = Field(examples=["ok", "degraded"])
    version: str
    providers: dict[str, str] = Field(
        description="Per-provider availability (adapter constructed or reason it did not)"
    )
