"""
Provider-facing request model.

This is the single, provider-agnostic shape handed to every adapter's
``complete()``. Adapters translate it into their own JSON body.
"""

from pydantic import BaseModel, ConfigDict, Field


class CompletionRequest(BaseModel):
    """Internal request model for one provider completion."""

    model_config = ConfigDict(frozen=True)

    prompt: str = Field(..., description="Complete provider-agnostic prompt")
    temperature: float = Field(default=0.7, ge=0.0, le=2.0, description="Sampling temperature")
    max_tokens: int = Field(default=512, ge=1, description="Maximum tokens to generate")
    force_json: bool = Field(
        default=False,
        description="Ask for JSON output; advisory, providers without support ignore it",
    )
