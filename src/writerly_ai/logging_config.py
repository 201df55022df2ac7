"""Structured logging for the Writerly AI service (structlog over stdlib logging).

Events are key/value pairs. Production renders JSON lines for the log shipper;
other environments get a colored console. A scrubbing processor runs on every
event, including stdlib records from libraries:

- provider credentials and auth headers are masked
- user-supplied text (instructions, context, prompts, upstream snippets) is
  capped so documents do not end up in the logs wholesale
"""

import logging
import sys
from collections.abc import Mapping

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

SERVICE_NAME = "writerly-ai"

SECRET_KEYS = frozenset(
    {"api_key", "authorization", "x-api-key", "x-goog-api-key", "password", "token"}
)
USER_TEXT_KEYS = frozenset(
    {"text", "context", "instruction", "prompt", "output", "content_snippet"}
)
MAX_TEXT_CHARS = 200
REDACTED = "***"

# Provider and grammar calls go through httpx; per-request logs from these are noise
NOISY_LOGGERS = ("httpx", "httpcore", "asyncio")


def add_app_context(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    event_dict["app"] = SERVICE_NAME
    return event_dict


def _scrub(key: str, value):
    lowered = key.lower()
    if lowered in SECRET_KEYS and value:
        return REDACTED
    if isinstance(value, Mapping):
        return {k: _scrub(str(k), v) for k, v in value.items()}
    if lowered in USER_TEXT_KEYS and isinstance(value, str) and len(value) > MAX_TEXT_CHARS:
        return f"{value[:MAX_TEXT_CHARS]}... ({len(value)} chars)"
    return value


def scrub_sensitive_fields(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Mask credentials and cap user text, including inside nested mappings."""
    for key in list(event_dict):
        if key == "event":
            continue
        event_dict[key] = _scrub(key, event_dict[key])
    return event_dict


def _renderer(is_production: bool) -> Processor:
    if is_production:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=True)


def build_processors(is_production: bool) -> list[Processor]:
    """Processors shared by structlog loggers and foreign (stdlib) records."""
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        add_app_context,
        scrub_sensitive_fields,
    ]
    if is_production:
        processors.append(structlog.processors.format_exc_info)
    return processors


def configure_logging(log_level: str = "INFO", environment: str = "development") -> None:
    """Configure structlog and route stdlib logging through it.

    Safe to call more than once (every ``create_app`` call does): the root
    handler is replaced, not added to.

    Args:
        log_level: Logging level name; unknown names fall back to INFO
        environment: Environment name; "production" selects the JSON renderer
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO
    is_production = environment.lower() == "production"
    shared = build_processors(is_production)

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=_renderer(is_production),
            foreign_pre_chain=shared,
        )
    )
    handler.setLevel(level)

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.get_logger(__name__).info(
        "Logging configured",
        log_level=logging.getLevelName(level),
        environment=environment,
        renderer="json" if is_production else "console",
    )
