"""
Client-input screening.

- sanitize: type/length/encoding checks, structured-payload and prompt-injection
  rejection, control-character stripping
- validate_no_tool_injection: refuse client-supplied tool configuration
"""

from writerly_ai.security.exceptions import (
    InputRejectedError,
    SanitizeError,
    SanitizeErrorType,
    ToolInjectionError,
)
from writerly_ai.security.sanitizer import (
    DEFAULT_MAX_LENGTH,
    sanitize,
    validate_no_tool_injection,
    wrap_user_prompt,
)

__all__ = [
    "sanitize",
    "validate_no_tool_injection",
    "wrap_user_prompt",
    "DEFAULT_MAX_LENGTH",
    "InputRejectedError",
    "SanitizeError",
    "SanitizeErrorType",
    "ToolInjectionError",
]
