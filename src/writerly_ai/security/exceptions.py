"""
Exceptions raised while screening client input.

Both are terminal: the request is rejected before any provider is called.
"""

from enum import Enum
from typing import Any


class SanitizeErrorType(str, Enum):
    """Machine-readable reason a piece of text was rejected."""

    INVALID_TYPE = "INVALID_TYPE"
    LENGTH_EXCEEDED = "LENGTH_EXCEEDED"
    INVALID_ENCODING = "INVALID_ENCODING"
    STRUCTURED_PAYLOAD = "STRUCTURED_PAYLOAD"
    PROMPT_INJECTION = "PROMPT_INJECTION"
    EMPTY_AFTER_SANITIZATION = "EMPTY_AFTER_SANITIZATION"


class InputRejectedError(Exception):
    """Base exception for client input that must never reach a prompt."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class SanitizeError(InputRejectedError):
    """Raw user text is malformed or unsafe."""

    def __init__(self, error_type: SanitizeErrorType, message: str):
        super().__init__(message, details={"errorType": error_type.value})
        self.error_type = error_type


class ToolInjectionError(InputRejectedError):
    """
    Request body carries tool/function-calling configuration.

    Tool configuration is only ever set server-side.
    """

    def __init__(self, field: str):
        super().__init__(
            f"Tool configuration must be set server-side only. "
            f"Field '{field}' is not allowed in request.",
            details={"field": field},
        )
        self.field = field
