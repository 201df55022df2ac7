"""Per-user, per-provider request budgets."""

from writerly_ai.ratelimit.limiter import (
    RateLimitDecision,
    RateLimiter,
    provider_key,
    rate_limit_headers,
)

__all__ = [
    "RateLimitDecision",
    "RateLimiter",
    "provider_key",
    "rate_limit_headers",
]
