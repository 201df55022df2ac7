"""
Generation orchestrator.

Flow for one request:
    BUILD_PROMPT -> SELECT_CANDIDATES
    -> for each candidate: CHECK_RATE_LIMIT -> CALL_PROVIDER -> SHAPE_RESULT
    -> SUCCESS | ALL_FAILED -> FALLBACK_RESPONSE

Provider errors move on to the next distinct provider; nothing is retried on
the same provider. Exhaustion returns a canned fallback result instead of an
error, so the editor always gets an answer.
"""

import time
from typing import NamedTuple, Optional

import structlog

from writerly_ai.config import Settings
from writerly_ai.config import settings as default_settings
from writerly_ai.llm.base_client import BaseProviderClient
from writerly_ai.llm.exceptions import ProviderEmptyResponseError, ProviderError
from writerly_ai.llm.prompt_builder import PromptBuilder, get_default_builder
from writerly_ai.llm.registry import ProviderRegistry, normalize_name
from writerly_ai.models.enums import TaskEnum
from writerly_ai.models.generation import (
    FALLBACK_PROVIDER,
    GenerationRequest,
    GenerationResult,
)
from writerly_ai.models.llm_models import CompletionRequest
from writerly_ai.monitoring.latency import LatencyRecorder
from writerly_ai.monitoring.metrics import (
    ai_fallback_responses_total,
    ai_generation_requests_total,
    ai_provider_attempts_total,
    ai_provider_latency_seconds,
    ai_rate_limited_total,
)
from writerly_ai.orchestration.exceptions import RateLimitError
from writerly_ai.orchestration.suggestions import extract_suggestions, normalize_suggestions
from writerly_ai.ratelimit.limiter import RateLimiter, rate_limit_headers


logger = structlog.get_logger(__name__)

FALLBACK_TEMPLATE = (
    "Sorry, I couldn't reach the AI provider. "
    "Here's a lightly formatted version of your request:\n\n{instruction}"
)
NO_PROVIDER_ERROR = "No AI provider is configured"


class ProviderCandidate(NamedTuple):
    name: str
    client: BaseProviderClient


class Orchestrator:
    """
    Routes a GenerationRequest through the provider fallback chain.

    Holds references to the process-wide registry, rate limiter and latency
    recorder; builds nothing itself so tests can inject fakes for each.
    """

    def __init__(
        self,
        registry: ProviderRegistry,
        limiter: RateLimiter,
        recorder: LatencyRecorder,
        prompt_builder: Optional[PromptBuilder] = None,
        settings: Optional[Settings] = None,
    ):
        self.registry = registry
        self.limiter = limiter
        self.recorder = recorder
        self.prompt_builder = prompt_builder or get_default_builder()
        self.settings = settings or default_settings

    def select_candidates(self, request: GenerationRequest) -> list[ProviderCandidate]:
        """
        Ordered, de-duplicated providers to try for this request.

        Order: explicit override, then LLM_PROVIDER, then PROVIDER_ORDER.
        Providers without a constructed adapter are dropped.
        """
        explicit = normalize_name(request.explicit_provider)
        names = [explicit, normalize_name(self.settings.LLM_PROVIDER)]
        names.extend(normalize_name(name) for name in self.settings.PROVIDER_ORDER)

        candidates: list[ProviderCandidate] = []
        seen: set[str] = set()
        for name in names:
            if name is None or name in seen:
                continue
            seen.add(name)
            client = self.registry.get(name)
            if client is None:
                if name == explicit:
                    logger.warning(
                        "Requested provider is not available",
                        provider=name,
                        reason=self.registry.unavailable.get(name, "unknown provider"),
                    )
                continue
            candidates.append(ProviderCandidate(name, client))
        return candidates

    def _completion_request(self, request: GenerationRequest, prompt: str) -> CompletionRequest:
        return CompletionRequest(
            prompt=prompt,
            temperature=(
                request.temperature if request.temperature is not None else self.settings.LLM_TEMPERATURE
            ),
            max_tokens=request.max_tokens if request.max_tokens is not None else self.settings.LLM_MAX_TOKENS,
            force_json=request.task is TaskEnum.SUGGESTIONS,
        )

    def _record_latency(self, provider: str, duration_ms: float) -> None:
        self.recorder.record("ai", duration_ms)
        self.recorder.record(f"ai:{provider}", duration_ms)
        ai_provider_latency_seconds.labels(provider=provider).observe(duration_ms / 1000)

    def _shape(self, task: TaskEnum, provider: str, text: str, duration_ms: float) -> GenerationResult:
        """
        Turn provider text into a result.

        Raises:
            ProviderEmptyResponseError: Nothing usable came back
        """
        if task is TaskEnum.SUGGESTIONS:
            outcome = extract_suggestions(text)
            suggestions = normalize_suggestions(outcome.suggestions)
            if not suggestions and not text.strip():
                raise ProviderEmptyResponseError(f"{provider} returned an empty response", provider=provider)
            return GenerationResult(
                output_text=text,
                provider_used=provider,
                suggestions=suggestions,
                duration_ms=duration_ms,
            )

        if not text.strip():
            raise ProviderEmptyResponseError(f"{provider} returned an empty response", provider=provider)
        return GenerationResult(output_text=text, provider_used=provider, duration_ms=duration_ms)

    def _fallback(self, request: GenerationRequest, error: str, reason: str) -> GenerationResult:
        logger.warning(
            "All providers failed, returning fallback",
            task=request.task.value,
            reason=reason,
            error=error,
        )
        ai_fallback_responses_total.labels(reason=reason).inc()
        ai_generation_requests_total.labels(task=request.task.value, outcome="fallback").inc()
        return GenerationResult(
            output_text=FALLBACK_TEMPLATE.format(instruction=request.instruction),
            provider_used=FALLBACK_PROVIDER,
            error=error,
        )

    async def generate(self, request: GenerationRequest) -> GenerationResult:
        """
        Run one generation through the fallback chain.

        Args:
            request: Validated generation request

        Returns:
            The first usable provider result, or the fallback result

        Raises:
            RateLimitError: The explicitly requested provider is over budget
        """
        prompt = self.prompt_builder.build(
            task=request.task,
            instruction=request.instruction,
            context=request.context,
            settings=request.voice_settings,
        )
        completion = self._completion_request(request, prompt)
        candidates = self.select_candidates(request)
        explicit = normalize_name(request.explicit_provider)

        logger.info(
            "Generation started",
            task=request.task.value,
            candidates=[c.name for c in candidates],
            explicit_provider=explicit,
        )

        if not candidates:
            return self._fallback(request, NO_PROVIDER_ERROR, reason="no_provider")

        last_error = ""
        for candidate in candidates:
            decision = self.limiter.consume_provider(request.user_id, candidate.name)
            if not decision.allowed:
                is_explicit = candidate.name == explicit
                ai_rate_limited_total.labels(
                    provider=candidate.name, explicit=str(is_explicit).lower()
                ).inc()
                if is_explicit:
                    ai_generation_requests_total.labels(task=request.task.value, outcome="rate_limited").inc()
                    raise RateLimitError(candidate.name, decision)
                ai_provider_attempts_total.labels(provider=candidate.name, outcome="skipped_rate_limit").inc()
                last_error = f"{candidate.name}: rate limit exceeded"
                continue

            started = time.perf_counter()
            try:
                text = await candidate.client.complete(completion)
                duration_ms = (time.perf_counter() - started) * 1000
                self._record_latency(candidate.name, duration_ms)
                result = self._shape(request.task, candidate.name, text, duration_ms)
            except ProviderError as e:
                outcome = "empty" if isinstance(e, ProviderEmptyResponseError) else "error"
                ai_provider_attempts_total.labels(provider=candidate.name, outcome=outcome).inc()
                logger.warning(
                    "Provider attempt failed",
                    provider=candidate.name,
                    error_type=type(e).__name__,
                    error=e.message,
                )
                last_error = f"{candidate.name}: {e.message}"
                continue

            result.rate_limit_headers = rate_limit_headers(decision)
            ai_provider_attempts_total.labels(provider=candidate.name, outcome="success").inc()
            ai_generation_requests_total.labels(task=request.task.value, outcome="success").inc()
            logger.info(
                "Generation succeeded",
                provider=candidate.name,
                task=request.task.value,
                duration_ms=round(duration_ms, 2),
                suggestions=len(result.suggestions) if result.suggestions is not None else None,
            )
            return result

        return self._fallback(request, last_error, reason="exhausted")
