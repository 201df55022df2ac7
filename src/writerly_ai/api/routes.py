"""
HTTP routes for generation, direct rewrite, grammar checks and monitoring.

Generation endpoints never fail because a provider failed: the orchestrator
degrades to a fallback body. Only rejected input (400) and an exhausted budget
on an explicitly named provider (429) surface as errors.
"""

import structlog
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from writerly_ai.api.dependencies import (
    get_current_user,
    get_grammar_client,
    get_latency_recorder,
    get_orchestrator,
    get_registry,
    get_settings,
)
from writerly_ai.api.models import (
    CurrentUser,
    GenerateBody,
    GrammarCheckBody,
    HealthResponse,
    RewriteBody,
)
from writerly_ai.config import Settings
from writerly_ai.grammar.client import GrammarClient
from writerly_ai.llm.registry import ProviderRegistry
from writerly_ai.models.enums import TaskEnum
from writerly_ai.models.generation import GenerationRequest
from writerly_ai.models.voice import VoiceSettings
from writerly_ai.monitoring.latency import LatencyRecorder
from writerly_ai.orchestration.orchestrator import Orchestrator
from writerly_ai.security.sanitizer import sanitize, validate_no_tool_injection

logger = structlog.get_logger(__name__)

router = APIRouter()

GENERATION_RESPONSES = {
    200: {"description": "Generated text, suggestions, or the fallback body"},
    400: {"description": "Invalid or unsafe input"},
    429: {"description": "Explicitly requested provider is over its rate limit"},
}


@router.post(
    "/api/ai/generate",
    status_code=status.HTTP_200_OK,
    summary="Generate text or suggestions",
    responses=GENERATION_RESPONSES,
)
async def generate(
    body: GenerateBody,
    user: CurrentUser = Depends(get_current_user),
    orchestrator: Orchestrator = Depends(get_orchestrator),
) -> JSONResponse:
    """
    Run one generation through the provider fallback chain.

    The request's voice settings are overlaid field by field on the user's
    stored settings. Rate-limit headers describe the provider that answered.
    """
    validate_no_tool_injection(body.model_dump(by_alias=True))

    request = GenerationRequest(
        task=body.task,
        instruction=body.instruction,
        context=body.effective_context(),
        voice_settings=VoiceSettings.merged(user.settings, body.settings),
        explicit_provider=body.provider,
        user_id=user.user_id,
        temperature=body.temperature,
        max_tokens=body.max_tokens,
    )
    result = await orchestrator.generate(request)
    return JSONResponse(content=result.to_response(), headers=result.rate_limit_headers)


@router.post(
    "/api/rewrite",
    status_code=status.HTTP_200_OK,
    summary="Rewrite sanitized text",
    responses=GENERATION_RESPONSES,
)
async def rewrite(
    body: RewriteBody,
    user: CurrentUser = Depends(get_current_user),
    orchestrator: Orchestrator = Depends(get_orchestrator),
    settings: Settings = Depends(get_settings),
) -> JSONResponse:
    """Direct rewrite path: raw text and any instruction are sanitized before they reach a prompt."""
    validate_no_tool_injection(body.model_dump())
    text = sanitize(body.text, max_length=settings.SANITIZE_MAX_LENGTH)
    instruction = body.instruction
    if instruction and instruction.strip():
        instruction = sanitize(instruction, max_length=settings.SANITIZE_MAX_LENGTH)

    request = GenerationRequest(
        task=TaskEnum.REWRITE,
        instruction=instruction,
        context=text,
        voice_settings=VoiceSettings.merged(user.settings, body.settings),
        explicit_provider=body.provider,
        user_id=user.user_id,
    )
    result = await orchestrator.generate(request)
    return JSONResponse(content=result.to_response(), headers=result.rate_limit_headers)


@router.post(
    "/api/grammar/check",
    summary="Proxy a grammar check",
    responses={
        502: {"description": "Grammar service unreachable or failed"},
        504: {"description": "Grammar service timed out"},
    },
)
async def grammar_check(
    body: GrammarCheckBody,
    client: GrammarClient = Depends(get_grammar_client),
) -> dict:
    return await client.check(body.text, body.language)


@router.get("/api/metrics", summary="Latency percentiles per channel")
async def metrics_snapshot(
    recorder: LatencyRecorder = Depends(get_latency_recorder),
) -> dict:
    return recorder.snapshot()


@router.get("/health", response_model=HealthResponse, summary="Service and provider health")
async def health(
    registry: ProviderRegistry = Depends(get_registry),
    settings: Settings = Depends(get_settings),
) -> HealthResponse:
    return HealthResponse(
        status="ok" if registry.available() else "degraded",
        version=settings.APP_VERSION,
        providers=registry.status(),
    )
