"""
FastAPI dependency injection for the Writerly AI service.

Long-lived services (provider registry, rate limiter, latency recorder,
orchestrator, grammar client) are built once in ``create_app`` and kept on
``app.state``; these dependencies hand them to route handlers.
"""

from collections.abc import Mapping
from typing import Any

from fastapi import Request

from writerly_ai.api.models import CurrentUser
from writerly_ai.config import Settings
from writerly_ai.grammar.client import GrammarClient
from writerly_ai.llm.registry import ProviderRegistry
from writerly_ai.monitoring.latency import LatencyRecorder
from writerly_ai.orchestration.orchestrator import Orchestrator


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_orchestrator(request: Request) -> Orchestrator:
    return request.app.state.orchestrator


def get_registry(request: Request) -> ProviderRegistry:
    return request.app.state.registry


def get_latency_recorder(request: Request) -> LatencyRecorder:
    return request.app.state.recorder


def get_grammar_client(request: Request) -> GrammarClient:
    return request.app.state.grammar_client


def _user_field(user: Any, *names: str) -> Any:
    for name in names:
        value = user.get(name) if isinstance(user, Mapping) else getattr(user, name, None)
        if value is not None:
            return value
    return None


def get_current_user(request: Request) -> CurrentUser:
    """
    Resolve the caller's identity.

    Uses ``request.state.user`` when an auth layer set it, otherwise the
    ``X-User-Id`` / ``X-User-Email`` headers forwarded by the gateway.
    Unauthenticated callers share the ``anon`` identity.
    """
    user = getattr(request.state, "user", None)
    if user is not None:
        user_id = _user_field(user, "user_id", "userId", "id")
        stored = _user_field(user, "settings")
        return CurrentUser(
            user_id=str(user_id) if user_id is not None else "anon",
            email=_user_field(user, "email"),
            settings=stored if isinstance(stored, Mapping) else None,
        )

    user_id = (request.headers.get("X-User-Id") or "").strip()
    email = (request.headers.get("X-User-Email") or "").strip()
    return CurrentUser(user_id=user_id or "anon", email=email or None)
