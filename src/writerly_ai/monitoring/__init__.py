"""Monitoring for the Writerly AI service.

Exports the in-process latency recorder and the custom Prometheus metrics.
"""

from writerly_ai.monitoring.latency import LatencyRecorder
from writerly_ai.monitoring.metrics import (
    ai_fallback_responses_total,
    ai_generation_requests_total,
    ai_provider_attempts_total,
    ai_provider_latency_seconds,
    ai_rate_limited_total,
    grammar_requests_total,
)

__all__ = [
    "LatencyRecorder",
    "ai_generation_requests_total",
    "ai_fallback_responses_total",
    "ai_provider_attempts_total",
    "ai_provider_latency_seconds",
    "ai_rate_limited_total",
    "grammar_requests_total",
]
