"""
Exceptions raised by the orchestrator to the caller.

Provider failures never reach the caller (they trigger fallback), so the only
terminal orchestration error is an exhausted budget on an explicitly
requested provider.
"""

from writerly_ai.ratelimit.limiter import RateLimitDecision


class RateLimitError(Exception):
    """The caller named a provider whose per-user budget is exhausted."""

    def __init__(self, provider: str, decision: RateLimitDecision):
        self.provider = provider
        self.decision = decision
        self.message = f"Rate limit exceeded for provider '{provider}'"
        super().__init__(self.message)

    @property
    def details(self) -> dict:
        return {
            "provider": self.provider,
            "retryAfterMs": self.decision.retry_after_ms,
            "limit": self.decision.limit,
            "remaining": self.decision.remaining,
            "resetAt": self.decision.reset_at,
        }
