"""Unit test fixtures (fakes and stubs).

Provides provider fakes, a controllable clock and in-memory services so the
orchestrator can be tested without any network access.
"""

from unittest.mock import AsyncMock

import pytest

from writerly_ai.llm.registry import ProviderRegistry
from writerly_ai.monitoring.latency import LatencyRecorder
from writerly_ai.ratelimit.limiter import RateLimiter


class FakeClock:
    """Epoch-millisecond clock that only moves when told to."""

    def __init__(self, start: int = 1_700_000_000_000):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


class FakeProvider:
    """Stands in for a provider adapter; ``complete`` is an AsyncMock."""

    def __init__(self, name: str, text: str = "", error: Exception | None = None):
        self.name = name
        self.complete = AsyncMock(return_value=text, side_effect=error)
        self.close = AsyncMock()


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_provider():
    """Factory fixture for FakeProvider.

    Usage:
        openai = make_provider("openai", text="Hello")
        gemini = make_provider("gemini", error=ProviderHTTPError("boom", provider="gemini"))
    """
    def _create(name: str, text: str = "ok", error: Exception | None = None) -> FakeProvider:
        return FakeProvider(name, text=text, error=error)

    return _create


@pytest.fixture
def make_registry():
    """Build a ProviderRegistry from fakes keyed by their name."""
    def _create(*providers: FakeProvider, unavailable: dict | None = None) -> ProviderRegistry:
        return ProviderRegistry({p.name: p for p in providers}, unavailable or {})

    return _create


@pytest.fixture
def limiter(fake_clock: FakeClock) -> RateLimiter:
    return RateLimiter(
        provider_limits={"openai": 60, "gemini": 60, "anthropic": 60},
        default_limit=60,
        clock=fake_clock,
    )


@pytest.fixture
def recorder() -> LatencyRecorder:
    return LatencyRecorder()
