"""Shared test fixtures and configuration for all tests.

This conftest.py provides common fixtures used across unit and integration tests.
"""

import pytest

from writerly_ai.config import Settings
from writerly_ai.models.generation import GenerationRequest
from writerly_ai.models.voice import VoiceSettings


@pytest.fixture
def test_settings() -> Settings:
    """Test settings with every hosted provider configured.

    Override specific settings in individual tests as needed:
        def test_something(test_settings):
            test_settings.LLM_PROVIDER = "anthropic"
    """
    return Settings(
        _env_file=None,
        # === Application ===
        APP_NAME="Writerly AI (Test)",
        APP_VERSION="0.1.0",
        DEBUG=True,
        LOG_LEVEL="DEBUG",
        ENVIRONMENT="development",
        # === Providers ===
        LLM_PROVIDER=None,
        PROVIDER_ORDER=["openai", "gemini", "anthropic", "ollama"],
        OPENAI_API_KEY="sk-test",
        GEMINI_API_KEY="gemini-test",
        ANTHROPIC_API_KEY="anthropic-test",
        OLLAMA_ENABLED=True,
        OLLAMA_BASE_URL="http://ollama.test:11434",
        # === Rate limits ===
        OPENAI_RPM=60,
        GEMINI_RPM=60,
        ANTHROPIC_RPM=60,
        DEFAULT_LLM_RPM=60,
        # === Grammar ===
        GRAMMAR_BASE_URL="http://grammar.test",
        GRAMMAR_TIMEOUT=1.0,
        PROMETHEUS_ENABLED=False,  # Disable /metrics in tests unless explicitly needed
    )


@pytest.fixture
def create_generation_request():
    """Factory fixture to create GenerationRequest with custom values.

    Usage:
        def test_something(create_generation_request):
            request = create_generation_request(task="suggestions")
    """
    def _create(
        task: str = "rewrite",
        instruction: str = "Make this friendlier",
        context: str = "Please send the report by Friday.",
        explicit_provider: str | None = None,
        user_id: str = "user-1",
        voice: dict | None = None,
    ) -> GenerationRequest:
        return GenerationRequest(
            task=task,
            instruction=instruction,
            context=context,
            voice_settings=VoiceSettings.from_raw(voice or {}),
            explicit_provider=explicit_provider,
            user_id=user_id,
        )

    return _create
