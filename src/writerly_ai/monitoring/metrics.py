"""Custom Prometheus metrics for the Writerly AI service.

These metrics are exposed at /metrics endpoint and should be scraped by Prometheus.
Alert rules should be configured for:
- ai_fallback_responses_total (every fallback hides a provider outage from the user)
- ai_provider_attempts_total with outcome="error" (provider instability)
- ai_rate_limited_total (users hitting their per-provider budget)
"""

from prometheus_client import Counter, Histogram

# === Generation Metrics ===

ai_generation_requests_total = Counter(
    "ai_generation_requests_total",
    "Total generation requests by task and outcome",
    ["task", "outcome"],
)
"""
Generation requests counter.

Labels:
- task: rewrite, summarize, expand, suggestions
- outcome: success, fallback, rate_limited
"""

ai_fallback_responses_total = Counter(
    "ai_fallback_responses_total",
    "Total canned fallback responses returned after provider exhaustion",
    ["reason"],
)
"""
Fallback responses counter.

Labels:
- reason: no_provider (nothing configured), exhausted (every candidate failed
  or was rate-limited)

The HTTP response stays 200 on fallback, so this counter is the only signal
of a full outage.

Alert thresholds:
- WARN: any increase over 5 minutes
- CRITICAL: fallback rate > 10% of generation requests
"""

# === Provider Metrics ===

ai_provider_attempts_total = Counter(
    "ai_provider_attempts_total",
    "Total provider call attempts by provider and outcome",
    ["provider", "outcome"],
)
"""
Provider attempts counter.

Labels:
- provider: openai, gemini, anthropic, ollama
- outcome: success, error, empty, skipped_rate_limit
"""

ai_provider_latency_seconds = Histogram(
    "ai_provider_latency_seconds",
    "Provider call latency in seconds (responses only)",
    ["provider"],
    buckets=[0.25, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0],
)
"""
Provider latency histogram.

Observed once a response is obtained, whether or not it was usable.

Alert thresholds:
- WARN: p95 > 10s
- CRITICAL: p95 > 30s
"""

ai_rate_limited_total = Counter(
    "ai_rate_limited_total",
    "Requests denied by the per-user provider rate limiter",
    ["provider", "explicit"],
)
"""
Rate limiter denials.

Labels:
- provider: Provider whose budget was exhausted
- explicit: true (caller named the provider, request rejected with 429),
  false (implicit candidate skipped)
"""

# === Grammar Proxy Metrics ===

grammar_requests_total = Counter(
    "grammar_requests_total",
    "Grammar checker proxy calls by outcome",
    ["outcome"],
)
"""
Grammar proxy counter.

Labels:
- outcome: success, error, timeout
"""
