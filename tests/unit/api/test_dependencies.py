"""
Unit tests for API dependency injection.
"""

from types import SimpleNamespace

from starlette.requests import Request

from writerly_ai.api.dependencies import (
    get_current_user,
    get_grammar_client,
    get_latency_recorder,
    get_orchestrator,
    get_registry,
    get_settings,
)


def make_request(headers: dict | None = None, user=None, **app_state) -> Request:
    scope = {
        "type": "http",
        "method": "POST",
        "path": "/api/ai/generate",
        "headers": [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()],
        "app": SimpleNamespace(state=SimpleNamespace(**app_state)),
    }
    request = Request(scope)
    if user is not None:
        request.state.user = user
    return request


def test_services_come_from_app_state(test_settings):
    services = {
        "settings": test_settings,
        "orchestrator": object(),
        "registry": object(),
        "recorder": object(),
        "grammar_client": object(),
    }
    request = make_request(**services)

    assert get_settings(request) is services["settings"]
    assert get_orchestrator(request) is services["orchestrator"]
    assert get_registry(request) is services["registry"]
    assert get_latency_recorder(request) is services["recorder"]
    assert get_grammar_client(request) is services["grammar_client"]


def test_anonymous_user():
    user = get_current_user(make_request())

    assert user.user_id == "anon"
    assert user.email is None
    assert user.settings is None


def test_user_from_gateway_headers():
    user = get_current_user(make_request({"X-User-Id": "42", "X-User-Email": "ada@example.com"}))

    assert user.user_id == "42"
    assert user.email == "ada@example.com"


def test_user_from_request_state_mapping():
    request = make_request(
        {"X-User-Id": "ignored"},
        user={"userId": 7, "email": "grace@example.com", "settings": {"tone": "Friendly"}},
    )

    user = get_current_user(request)

    assert user.user_id == "7"
    assert user.email == "grace@example.com"
    assert user.settings == {"tone": "Friendly"}


def test_user_from_request_state_object():
    request = make_request(user=SimpleNamespace(user_id="u-9", email=None, settings="not a mapping"))

    user = get_current_user(request)

    assert user.user_id == "u-9"
    assert user.settings is None
