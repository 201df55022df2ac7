"""
Writerly AI orchestration service.

Sits between the writing assistant's clients and several hosted language-model
providers:
- Sanitizes raw user text and guards against prompt/tool injection
- Builds provider-agnostic prompts (rewrite, summarize, expand, suggestions)
- Routes each request through an ordered provider fallback chain
- Enforces per-user, per-provider request budgets
- Records latency percentiles and normalizes provider output

Architecture: FastAPI surface + httpx provider adapters + in-process limiter/metrics
"""

__version__ = "0.1.0"
