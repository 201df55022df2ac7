"""
In-process latency recorder with rolling buffers and percentile summaries.

Backs the ``GET /api/metrics`` snapshot. Prometheus histograms in
``monitoring.metrics`` cover the same calls for scraping; this recorder keeps
the exact nearest-rank summaries the editor dashboard reads.
"""

import math
from collections import deque
from numbers import Real
from typing import Any, Optional

DEFAULT_MAX_SAMPLES = 1000
FIXED_CHANNELS = ("grammar", "ai")


def _is_recordable(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, Real):
        return False
    return math.isfinite(value) and value >= 0


def _round_avg(value: float) -> float:
    # Half up to two places, as the dashboard shows it (0.125 -> 0.13)
    return math.floor(value * 100 + 0.5) / 100


def _pick(ordered: list[float], p: float) -> float:
    n = len(ordered)
    index = min(n - 1, max(0, math.floor(p * (n - 1))))
    return ordered[index]


class LatencyRecorder:
    """
    Rolling per-channel latency samples (milliseconds).

    Channels ``grammar`` and ``ai`` always exist; any other name (for example
    ``ai:openai``) gets a bucket on first write. Each bucket keeps the most
    recent ``max_samples`` values.
    """

    def __init__(self, max_samples: int = DEFAULT_MAX_SAMPLES):
        self.max_samples = max_samples
        self._buckets: dict[str, deque] = {
            name: deque(maxlen=max_samples) for name in FIXED_CHANNELS
        }

    def record(self, channel: str, value_ms: Any) -> None:
        """Add one sample; invalid values are dropped silently."""
        if not _is_recordable(value_ms):
            return
        bucket = self._buckets.get(channel)
        if bucket is None:
            bucket = self._buckets[channel] = deque(maxlen=self.max_samples)
        bucket.append(float(value_ms))

    def summary(self, channel: str) -> dict[str, Optional[float]]:
        ordered = sorted(self._buckets.get(channel, ()))
        n = len(ordered)
        if n == 0:
            return {"count": 0, "min": None, "max": None, "avg": None, "p50": None, "p95": None, "p99": None}
        return {
            "count": n,
            "min": ordered[0],
            "max": ordered[-1],
            "avg": _round_avg(sum(ordered) / n),
            "p50": _pick(ordered, 0.50),
            "p95": _pick(ordered, 0.95),
            "p99": _pick(ordered, 0.99),
        }

    def snapshot(self) -> dict[str, dict[str, Optional[float]]]:
        return {channel: self.summary(channel) for channel in self._buckets}

    def channels(self) -> list[str]:
        return list(self._buckets)
