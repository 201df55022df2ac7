"""
In-memory fixed-window rate limiter, per (user, provider).

Each key owns a deque of request timestamps (epoch ms). Timestamps that fell
out of the trailing window are pruned from the front on every check. Not
distributed: the window map lives in one process and is never evicted.
"""

import math
import time
from collections import deque
from typing import Callable, Optional

import structlog
from pydantic import BaseModel, ConfigDict

from writerly_ai.config import Settings


logger = structlog.get_logger(__name__)

WINDOW_MS = 60_000
DEFAULT_LIMIT = 60


def _epoch_ms() -> int:
    return int(time.time() * 1000)


class RateLimitDecision(BaseModel):
    """Outcome of one consume() call."""

    model_config = ConfigDict(frozen=True)

    allowed: bool
    remaining: int
    retry_after_ms: int = 0
    reset_at: int  # epoch ms when the oldest counted request leaves the window
    limit: int
    key: str


def provider_key(user_id: Optional[str], provider: str) -> str:
    return f"prov:{provider}:user:{user_id or 'anon'}"


class RateLimiter:
    """
    Fixed-window request counter.

    Args:
        provider_limits: Requests per window for named providers
        default_limit: Requests per window for any other provider
        window_ms: Window length in milliseconds
        clock: Callable returning the current time in epoch ms (tests inject one)
    """

    def __init__(
        self,
        provider_limits: Optional[dict[str, int]] = None,
        default_limit: int = DEFAULT_LIMIT,
        window_ms: int = WINDOW_MS,
        clock: Callable[[], int] = _epoch_ms,
    ):
        self.provider_limits = {k.lower(): v for k, v in (provider_limits or {}).items()}
        self.default_limit = default_limit
        self.window_ms = window_ms
        self._clock = clock
        self._windows: dict[str, deque[int]] = {}

    @classmethod
    def from_settings(cls, settings: Settings, clock: Callable[[], int] = _epoch_ms) -> "RateLimiter":
        return cls(
            provider_limits=settings.provider_rpm(),
            default_limit=settings.DEFAULT_LLM_RPM,
            window_ms=settings.RATE_LIMIT_WINDOW_MS,
            clock=clock,
        )

    def _prune(self, window: deque[int], now: int) -> None:
        cutoff = now - self.window_ms
        while window and window[0] <= cutoff:
            window.popleft()

    def consume(self, key: str, limit: int) -> RateLimitDecision:
        """
        Count one request against ``key`` if budget remains.

        A denied request is not recorded.
        """
        now = self._clock()
        window = self._windows.setdefault(key, deque())
        self._prune(window, now)

        if len(window) >= limit:
            reset_at = window[0] + self.window_ms
            return RateLimitDecision(
                allowed=False,
                remaining=0,
                retry_after_ms=max(0, reset_at - now),
                reset_at=reset_at,
                limit=limit,
                key=key,
            )

        window.append(now)
        return RateLimitDecision(
            allowed=True,
            remaining=max(0, limit - len(window)),
            retry_after_ms=0,
            reset_at=window[0] + self.window_ms,
            limit=limit,
            key=key,
        )

    def limit_for(self, provider: str) -> int:
        name = provider.lower()
        if name == "claude":
            name = "anthropic"
        return self.provider_limits.get(name, self.default_limit)

    def consume_provider(self, user_id: Optional[str], provider: str) -> RateLimitDecision:
        name = provider.lower()
        decision = self.consume(provider_key(user_id, name), self.limit_for(name))
        if not decision.allowed:
            logger.info(
                "Rate limit reached",
                provider=name,
                user_id=user_id,
                retry_after_ms=decision.retry_after_ms,
            )
        return decision

    def __len__(self) -> int:
        return len(self._windows)


def rate_limit_headers(decision: RateLimitDecision) -> dict[str, str]:
    """HTTP headers for a decision; ``Retry-After`` only when denied."""
    headers = {
        "X-RateLimit-Limit": str(decision.limit),
        "X-RateLimit-Remaining": str(decision.remaining),
        "X-RateLimit-Reset": str(math.ceil(decision.reset_at / 1000)),
    }
    if not decision.allowed:
        headers["Retry-After"] = str(math.ceil(decision.retry_after_ms / 1000))
    return headers
