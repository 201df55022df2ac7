"""
Best-effort extraction of the suggestions array from provider text.

Providers are asked for strict JSON but often wrap it in markdown fences or
prose. Extraction runs in layers, each returning an explicit outcome:

1. STRICT: the whole text is JSON
2. FENCED: strip code fences and parse the rest whole, else the span from the
   first ``{`` to the last ``}``
3. KEY_REGEX: parse only the array following a ``"suggestions":`` key

Raw items are then normalized into Suggestion models (unknown categories
become Clarity, offsets must be non-negative integers).
"""

import json
import re
from enum import Enum
from typing import Any, Optional

import structlog
from pydantic import BaseModel, ConfigDict

from writerly_ai.models.enums import SuggestionCategory
from writerly_ai.models.generation import Suggestion


logger = structlog.get_logger(__name__)

FENCE_START_RE = re.compile(r"^\s*(?:```|~~~)[\w-]*\s*")
FENCE_END_RE = re.compile(r"\s*(?:```|~~~)\s*$")
SUGGESTIONS_KEY_RE = re.compile(r'"suggestions"\s*:\s*(\[.*?\])\s*(?:,|\}|$)', re.DOTALL)


class ExtractionLayer(str, Enum):
    STRICT = "strict"
    FENCED = "fenced"
    KEY_REGEX = "key_regex"
    NONE = "none"


class ExtractionOutcome(BaseModel):
    """Result of one extraction layer. ``suggestions`` is None on failure."""

    model_config = ConfigDict(frozen=True)

    layer: ExtractionLayer
    suggestions: Optional[list[Any]] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.suggestions is not None


def _from_document(layer: ExtractionLayer, document: Any) -> ExtractionOutcome:
    if isinstance(document, list):
        return ExtractionOutcome(layer=layer, suggestions=document)
    if isinstance(document, dict):
        items = document.get("suggestions")
        if isinstance(items, list):
            return ExtractionOutcome(layer=layer, suggestions=items)
        return ExtractionOutcome(layer=layer, error="JSON object has no 'suggestions' array")
    return ExtractionOutcome(layer=layer, error=f"Expected object or array, got {type(document).__name__}")


def _loads(layer: ExtractionLayer, text: str) -> ExtractionOutcome:
    try:
        document = json.loads(text)
    except json.JSONDecodeError as e:
        return ExtractionOutcome(layer=layer, error=f"{e.msg} at line {e.lineno} col {e.colno}")
    return _from_document(layer, document)


def parse_strict(text: str) -> ExtractionOutcome:
    if not text or not text.strip():
        return ExtractionOutcome(layer=ExtractionLayer.STRICT, error="Empty content")
    return _loads(ExtractionLayer.STRICT, text)


def parse_fenced(text: str) -> ExtractionOutcome:
    stripped = FENCE_END_RE.sub("", FENCE_START_RE.sub("", text or ""))
    if stripped.strip():
        # A fenced top-level array has no enclosing braces
        whole = _loads(ExtractionLayer.FENCED, stripped)
        if whole.ok:
            return whole
    start = stripped.find("{")
    end = stripped.rfind("}")
    if start == -1 or end <= start:
        return ExtractionOutcome(layer=ExtractionLayer.FENCED, error="No JSON object found")
    return _loads(ExtractionLayer.FENCED, stripped[start:end + 1])


def parse_suggestions_key(text: str) -> ExtractionOutcome:
    match = SUGGESTIONS_KEY_RE.search(text or "")
    if match is None:
        return ExtractionOutcome(layer=ExtractionLayer.KEY_REGEX, error="No 'suggestions' key found")
    return _loads(ExtractionLayer.KEY_REGEX, match.group(1))


LAYERS = (parse_strict, parse_fenced, parse_suggestions_key)


def extract_suggestions(text: str) -> ExtractionOutcome:
    """
    Run the extraction layers in order and return the first success.

    Returns:
        The successful layer's outcome, or an outcome with layer NONE, an
        empty suggestions list and the last layer's error.
    """
    error: Optional[str] = None
    for layer in LAYERS:
        outcome = layer(text)
        if outcome.ok:
            logger.debug("Suggestions extracted", layer=outcome.layer.value, count=len(outcome.suggestions))
            return outcome
        error = outcome.error

    logger.debug("No suggestions extracted", error=error, content_length=len(text or ""))
    return ExtractionOutcome(layer=ExtractionLayer.NONE, suggestions=[], error=error)


def _offset(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, int) and value >= 0:
        return value
    return None


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def normalize_suggestions(items: Optional[list[Any]]) -> list[Suggestion]:
    """Turn raw JSON items into Suggestion models; non-object items are skipped."""
    suggestions = []
    for item in items or []:
        if not isinstance(item, dict):
            continue
        suggestions.append(
            Suggestion(
                message=_text(item.get("message")),
                original=_text(item.get("original")),
                suggestion=_text(item.get("suggestion")),
                from_=_offset(item.get("from")),
                to=_offset(item.get("to")),
                category=SuggestionCategory.parse(item.get("category")) or SuggestionCategory.CLARITY,
            )
        )
    return suggestions
