"""
Voice settings: how the assistant should sound.

Each field is validated against a closed enumeration. Anything invalid or
missing falls back to the default for that field only, so a single bad value
never discards the rest of a user's preferences.
"""

from collections.abc import Mapping
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from writerly_ai.models.enums import AudienceEnum, DomainEnum, IntentEnum, ToneEnum


FORMALITY_MIN = 1
FORMALITY_MAX = 5

DEFAULT_VOICE: dict[str, Any] = {
    "tone": ToneEnum.PROFESSIONAL.value,
    "formality": 3,
    "audience": AudienceEnum.GENERAL.value,
    "intent": IntentEnum.REQUEST.value,
    "domain": DomainEnum.GENERAL.value,
}

_ENUM_FIELDS = {
    "tone": ToneEnum,
    "audience": AudienceEnum,
    "intent": IntentEnum,
    "domain": DomainEnum,
}


def _parse_formality(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value.strip())
    if isinstance(value, int) and FORMALITY_MIN <= value <= FORMALITY_MAX:
        return value
    return None


def _valid_fields(raw: Any) -> dict[str, Any]:
    """Keep only the recognizable, valid fields of a raw settings payload."""
    if isinstance(raw, VoiceSettings):
        return raw.model_dump()
    if not isinstance(raw, Mapping):
        return {}
    # Legacy payloads nest the voice block under "voice"
    if isinstance(raw.get("voice"), Mapping):
        raw = raw["voice"]

    valid: dict[str, Any] = {}
    for name, enum_cls in _ENUM_FIELDS.items():
        member = enum_cls.parse(raw.get(name))
        if member is not None:
            valid[name] = member.value
    formality = _parse_formality(raw.get("formality"))
    if formality is not None:
        valid["formality"] = formality
    return valid


class VoiceSettings(BaseModel):
    """Immutable, fully-populated voice settings."""

    model_config = ConfigDict(frozen=True)

    tone: str = Field(default=DEFAULT_VOICE["tone"], description="One of ToneEnum")
    formality: int = Field(
        default=DEFAULT_VOICE["formality"],
        ge=FORMALITY_MIN,
        le=FORMALITY_MAX,
        description="1 (casual) to 5 (formal)",
    )
    audience: str = Field(default=DEFAULT_VOICE["audience"], description="One of AudienceEnum")
    intent: str = Field(default=DEFAULT_VOICE["intent"], description="One of IntentEnum")
    domain: str = Field(default=DEFAULT_VOICE["domain"], description="One of DomainEnum")

    @classmethod
    def from_raw(cls, raw: Any) -> "VoiceSettings":
        """Build settings from an untrusted payload, defaulting invalid fields."""
        return cls(**{**DEFAULT_VOICE, **_valid_fields(raw)})

    @classmethod
    def merged(cls, stored: Any = None, requested: Any = None) -> "VoiceSettings":
        """
        Overlay request-level settings on the user's stored defaults.

        Merging is field by field: a request that only sets ``tone`` keeps the
        stored formality, audience, intent and domain.
        """
        return cls(**{**DEFAULT_VOICE, **_valid_fields(stored), **_valid_fields(requested)})
