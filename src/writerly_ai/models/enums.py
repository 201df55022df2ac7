"""
Enumerations for the orchestration data models.

All enums are closed taxonomies - values outside these sets are either
rejected or replaced with a default by the models that use them.
"""

from enum import Enum
from typing import Optional


class _CaseInsensitiveEnum(str, Enum):
    """str Enum whose lookup ignores case and surrounding whitespace."""

    @classmethod
    def parse(cls, value: object) -> Optional["_CaseInsensitiveEnum"]:
        """Return the matching member, or None if value is not one of ours."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        needle = value.strip().lower()
        for member in cls:
            if member.value.lower() == needle:
                return member
        return None


class TaskEnum(_CaseInsensitiveEnum):
    """Generation task. Unknown or missing tasks are treated as REWRITE."""

    REWRITE = "rewrite"
    SUMMARIZE = "summarize"
    EXPAND = "expand"
    SUGGESTIONS = "suggestions"


class SuggestionCategory(_CaseInsensitiveEnum):
    """Category attached to every suggestion returned by the suggestions task."""

    CORRECTNESS = "Correctness"
    CLARITY = "Clarity"
    ENGAGEMENT = "Engagement"
    DELIVERY = "Delivery"


class ToneEnum(_CaseInsensitiveEnum):
    CONFIDENT = "Confident"
    FRIENDLY = "Friendly"
    PROFESSIONAL = "Professional"
    DIRECT = "Direct"
    NEUTRAL = "Neutral"


class AudienceEnum(_CaseInsensitiveEnum):
    GENERAL = "General"
    MANAGER = "Manager"
    TEAM = "Team"
    CUSTOMER = "Customer"


class IntentEnum(_CaseInsensitiveEnum):
    INFORM = "Inform"
    REQUEST = "Request"
    SUGGEST = "Suggest"
    APOLOGIZE = "Apologize"


class DomainEnum(_CaseInsensitiveEnum):
    GENERAL = "General"
    ACADEMIC = "Academic"
    BUSINESS = "Business"
    TECHNICAL = "Technical"
    CREATIVE = "Creative"
