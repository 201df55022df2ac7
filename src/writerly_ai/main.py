"""
FastAPI application entry point for the Writerly AI service.
"""

from typing import Optional

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator

from writerly_ai.api.error_handlers import EXCEPTION_HANDLERS
from writerly_ai.api.middleware import RequestTracingMiddleware
from writerly_ai.api.routes import router
from writerly_ai.config import Settings
from writerly_ai.config import settings as default_settings
from writerly_ai.grammar.client import GrammarClient
from writerly_ai.llm.prompt_builder import PromptBuilder
from writerly_ai.llm.registry import ProviderRegistry
from writerly_ai.logging_config import configure_logging
from writerly_ai.monitoring.latency import LatencyRecorder
from writerly_ai.orchestration.orchestrator import Orchestrator
from writerly_ai.ratelimit.limiter import RateLimiter

logger = structlog.get_logger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    registry: Optional[ProviderRegistry] = None,
    limiter: Optional[RateLimiter] = None,
    recorder: Optional[LatencyRecorder] = None,
    grammar_client: Optional[GrammarClient] = None,
) -> FastAPI:
    """
    Build the application and its process-wide services.

    Every service can be injected (tests pass fakes); anything not given is
    built from settings. Services live on ``app.state`` for the app's lifetime.
    """
    settings = settings or default_settings
    configure_logging(settings.LOG_LEVEL, settings.ENVIRONMENT)

    registry = registry or ProviderRegistry.from_settings(settings)
    limiter = limiter or RateLimiter.from_settings(settings)
    recorder = recorder or LatencyRecorder(max_samples=settings.METRICS_MAX_SAMPLES)
    grammar_client = grammar_client or GrammarClient(
        settings.GRAMMAR_BASE_URL,
        timeout=settings.GRAMMAR_TIMEOUT,
        recorder=recorder,
        default_language=settings.GRAMMAR_DEFAULT_LANGUAGE,
    )

    app = FastAPI(
        title=settings.APP_NAME,
        description="AI request orchestration for the Writerly writing assistant",
        version=settings.APP_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.state.settings = settings
    app.state.registry = registry
    app.state.limiter = limiter
    app.state.recorder = recorder
    app.state.grammar_client = grammar_client
    app.state.orchestrator = Orchestrator(
        registry=registry,
        limiter=limiter,
        recorder=recorder,
        prompt_builder=PromptBuilder(),
        settings=settings,
    )

    # Request tracing middleware (must be first for request_id in all logs)
    app.add_middleware(RequestTracingMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[
            "X-Request-ID",
            "X-RateLimit-Limit",
            "X-RateLimit-Remaining",
            "X-RateLimit-Reset",
            "Retry-After",
        ],
    )

    for exc_class, handler in EXCEPTION_HANDLERS.items():
        app.add_exception_handler(exc_class, handler)

    app.include_router(router)

    @app.on_event("startup")
    async def startup():
        logger.info(
            "Application startup",
            version=settings.APP_VERSION,
            environment=settings.ENVIRONMENT,
            providers=registry.status(),
            provider_order=settings.PROVIDER_ORDER,
            preferred_provider=settings.LLM_PROVIDER,
        )
        if not registry.available():
            logger.warning("No AI provider configured; every generation will use the fallback")

    @app.on_event("shutdown")
    async def shutdown():
        logger.info("Application shutdown")
        await registry.close()
        await grammar_client.close()
        logger.info("Application shutdown complete")

    if settings.PROMETHEUS_ENABLED:
        Instrumentator().instrument(app).expose(app)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "writerly_ai.main:app",
        host="0.0.0.0",
        port=8000,
        reload=default_settings.DEBUG,
    )
