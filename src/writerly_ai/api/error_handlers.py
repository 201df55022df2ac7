"""
FastAPI exception handlers for structured error responses.

Maps domain exceptions to appropriate HTTP status codes and formats. Provider
errors are deliberately absent: the orchestrator never lets them escape.
"""

from datetime import datetime, timezone

import structlog
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError

from writerly_ai.grammar.client import GrammarServiceError, GrammarTimeoutError
from writerly_ai.orchestration.exceptions import RateLimitError
from writerly_ai.ratelimit.limiter import rate_limit_headers
from writerly_ai.security.exceptions import SanitizeError, ToolInjectionError

logger = structlog.get_logger(__name__)


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def _error_list(errors: list[dict]) -> list[dict]:
    # ctx may hold exception instances that are not JSON serializable
    return [
        {"loc": list(e.get("loc", ())), "msg": e.get("msg"), "type": e.get("type")}
        for e in errors
    ]


async def sanitize_error_handler(request: Request, exc: SanitizeError) -> JSONResponse:
    """
    Handle rejected user text.

    Maps to 400 Bad Request with the machine-readable ``errorType``.
    """
    logger.info("Input rejected", error_type=exc.error_type.value)

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": "invalid_input",
            "message": exc.message,
            "errorType": exc.error_type.value,
            "timestamp": _timestamp(),
        },
    )


async def tool_injection_error_handler(request: Request, exc: ToolInjectionError) -> JSONResponse:
    logger.warning("Tool injection attempt rejected", field=exc.field)

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": "tool_injection",
            "message": exc.message,
            "errorType": "TOOL_INJECTION",
            "field": exc.field,
            "timestamp": _timestamp(),
        },
    )


async def rate_limit_error_handler(request: Request, exc: RateLimitError) -> JSONResponse:
    """
    Handle an exhausted budget on an explicitly requested provider.

    Maps to 429 Too Many Requests with the budget in both body and headers.

    Args:
        request: FastAPI request
        exc: RateLimitError instance

    Returns:
        JSON error response
    """
    logger.info("Explicit provider rate limited", **exc.details)

    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content={
            "error": "rate_limited",
            "message": exc.message,
            **exc.details,
            "timestamp": _timestamp(),
        },
        headers=rate_limit_headers(exc.decision),
    )


async def grammar_service_error_handler(request: Request, exc: GrammarServiceError) -> JSONResponse:
    """
    Handle grammar checker failures.

    Maps to 502 Bad Gateway, or 504 Gateway Timeout when the call timed out.
    """
    logger.error("Grammar service error", error=exc.message, details=exc.details)

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": "grammar_timeout" if isinstance(exc, GrammarTimeoutError) else "grammar_unavailable",
            "message": exc.message,
            "timestamp": _timestamp(),
        },
    )


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Handle invalid request bodies.

    Maps to 400 Bad Request (client error).
    """
    details = _error_list(exc.errors())
    logger.warning("Invalid request format", errors=details)

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": "invalid_request",
            "message": "Request validation failed",
            "details": details,
            "timestamp": _timestamp(),
        },
    )


async def pydantic_validation_error_handler(
    request: Request, exc: PydanticValidationError
) -> JSONResponse:
    details = _error_list(exc.errors())
    logger.warning("Invalid request values", errors=details)

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": "invalid_request",
            "message": "Request validation failed",
            "details": details,
            "timestamp": _timestamp(),
        },
    )


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handle unexpected errors.

    Maps to 500 Internal Server Error.
    """
    logger.exception("Unexpected error", error_type=type(exc).__name__)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "internal_error",
            "message": "An unexpected error occurred",
            "timestamp": _timestamp(),
        },
    )


# Exception handler mapping for FastAPI app.add_exception_handler()
EXCEPTION_HANDLERS = {
    SanitizeError: sanitize_error_handler,
    ToolInjectionError: tool_injection_error_handler,
    RateLimitError: rate_limit_error_handler,
    GrammarServiceError: grammar_service_error_handler,
    RequestValidationError: request_validation_error_handler,
    PydanticValidationError: pydantic_validation_error_handler,
    Exception: generic_error_handler,
}
