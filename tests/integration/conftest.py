"""Integration test fixtures (full application over mocked upstreams).

The real provider adapters and grammar client are used; only the network is
replaced by httpx.MockTransport, so requests travel through every layer.
"""

import json

import httpx
import pytest
from fastapi.testclient import TestClient

from writerly_ai.grammar.client import GrammarClient
from writerly_ai.llm.registry import ProviderRegistry
from writerly_ai.main import create_app
from writerly_ai.monitoring.latency import LatencyRecorder

HOST_TO_PROVIDER = {
    "api.openai.com": "openai",
    "generativelanguage.googleapis.com": "gemini",
    "api.anthropic.com": "anthropic",
    "ollama.test": "ollama",
}


def success_body(provider: str, text: str) -> dict:
    if provider == "openai":
        return {"choices": [{"message": {"content": text}}]}
    if provider == "gemini":
        return {"candidates": [{"content": {"parts": [{"text": text}]}}]}
    if provider == "anthropic":
        return {"content": [{"type": "text", "text": text}]}
    return {"response": text, "done": True}


class ProviderBackend:
    """Programmable stand-in for every provider API.

    By default each provider answers 200 with "<name> says hi".
    """

    def __init__(self):
        self.responses: dict[str, tuple[int, dict]] = {}
        self.requests: dict[str, list[dict]] = {name: [] for name in HOST_TO_PROVIDER.values()}

    def reply(self, provider: str, text: str) -> None:
        self.responses[provider] = (200, success_body(provider, text))

    def fail(self, provider: str, status_code: int = 500, message: str = "upstream error") -> None:
        self.responses[provider] = (status_code, {"error": {"message": message}})

    def prompt_sent_to(self, provider: str) -> str:
        payload = self.requests[provider][-1]
        if provider == "openai" or provider == "anthropic":
            return payload["messages"][0]["content"]
        if provider == "gemini":
            return payload["contents"][0]["parts"][0]["text"]
        return payload["prompt"]

    def handler(self, request: httpx.Request) -> httpx.Response:
        provider = HOST_TO_PROVIDER[request.url.host]
        self.requests[provider].append(json.loads(request.content))
        status_code, body = self.responses.get(
            provider, (200, success_body(provider, f"{provider} says hi"))
        )
        return httpx.Response(status_code, json=body)


class GrammarBackend:
    def __init__(self):
        self.status_code = 200
        self.body: dict = {"matches": []}

    def handler(self, request: httpx.Request) -> httpx.Response:
        return httpx.Response(self.status_code, json=self.body)


@pytest.fixture
def provider_backend() -> ProviderBackend:
    return ProviderBackend()


@pytest.fixture
def grammar_backend() -> GrammarBackend:
    return GrammarBackend()


@pytest.fixture
def make_client(test_settings, provider_backend, grammar_backend):
    """Factory fixture building a TestClient; tweak ``test_settings`` before calling."""
    clients = []

    def _create() -> TestClient:
        registry = ProviderRegistry.from_settings(
            test_settings, transport=httpx.MockTransport(provider_backend.handler)
        )
        recorder = LatencyRecorder()
        grammar_client = GrammarClient(
            test_settings.GRAMMAR_BASE_URL,
            timeout=test_settings.GRAMMAR_TIMEOUT,
            recorder=recorder,
            transport=httpx.MockTransport(grammar_backend.handler),
        )
        app = create_app(test_settings, registry=registry, recorder=recorder, grammar_client=grammar_client)
        client = TestClient(app)
        client.__enter__()
        clients.append(client)
        return client

    yield _create

    for client in clients:
        client.__exit__(None, None, None)


@pytest.fixture
def client(make_client) -> TestClient:
    return make_client()
