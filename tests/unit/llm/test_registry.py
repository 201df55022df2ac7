"""Unit tests for ProviderRegistry."""

import pytest

from writerly_ai.llm.anthropic_client import AnthropicClient
from writerly_ai.llm.ollama_client import OllamaClient
from writerly_ai.llm.registry import ProviderRegistry, normalize_name


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("OpenAI", "openai"),
        ("  gemini ", "gemini"),
        ("Claude", "anthropic"),
        ("", None),
        (None, None),
    ],
)
def test_normalize_name(raw, expected):
    assert normalize_name(raw) == expected


def test_from_settings_builds_every_configured_provider(test_settings):
    registry = ProviderRegistry.from_settings(test_settings)

    assert sorted(registry.available()) == ["anthropic", "gemini", "ollama", "openai"]
    assert registry.unavailable == {}
    assert isinstance(registry.get("claude"), AnthropicClient)
    assert isinstance(registry.get("OLLAMA"), OllamaClient)


def test_missing_keys_are_recorded_as_unavailable(test_settings):
    test_settings.OPENAI_API_KEY = None
    test_settings.GEMINI_API_KEY = None

    registry = ProviderRegistry.from_settings(test_settings)

    assert registry.get("openai") is None
    assert registry.get("gemini") is None
    assert "OPENAI_API_KEY" in registry.unavailable["openai"]
    assert "GEMINI_API_KEY" in registry.unavailable["gemini"]
    assert registry.status()["openai"].startswith("unavailable")
    assert registry.status()["anthropic"] == "available"


def test_disabled_ollama(test_settings):
    test_settings.OLLAMA_ENABLED = False

    registry = ProviderRegistry.from_settings(test_settings)

    assert registry.get("ollama") is None
    assert registry.unavailable["ollama"] == "disabled"


def test_unknown_provider_is_none(test_settings):
    registry = ProviderRegistry.from_settings(test_settings)

    assert registry.get("mistral") is None
    assert "mistral" not in registry
    assert "openai" in registry


@pytest.mark.asyncio
async def test_close_closes_every_client(make_provider, make_registry):
    first, second = make_provider("openai"), make_provider("gemini")
    registry = make_registry(first, second)

    await registry.close()

    first.close.assert_awaited_once()
    second.close.assert_awaited_once()
