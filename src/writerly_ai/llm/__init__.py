"""
Language-model provider adapters and prompt construction.

Components:
- BaseProviderClient: Abstract base class for provider adapters
- OpenAIClient, AnthropicClient, GeminiClient, OllamaClient: Concrete adapters
- ProviderRegistry: Name -> adapter lookup built once from settings
- PromptBuilder: Renders the generation prompt template
- exceptions: Provider-specific exceptions
"""

from writerly_ai.llm.anthropic_client import AnthropicClient
from writerly_ai.llm.base_client import BaseProviderClient
from writerly_ai.llm.exceptions import (
    ProviderConfigurationError,
    ProviderConnectionError,
    ProviderEmptyResponseError,
    ProviderError,
    ProviderHTTPError,
    ProviderResponseError,
    ProviderTimeoutError,
)
from writerly_ai.llm.gemini_client import GeminiClient
from writerly_ai.llm.ollama_client import OllamaClient
from writerly_ai.llm.openai_client import OpenAIClient
from writerly_ai.llm.prompt_builder import PromptBuilder, build_prompt
from writerly_ai.llm.registry import ProviderRegistry, normalize_name

__all__ = [
    "BaseProviderClient",
    "OpenAIClient",
    "AnthropicClient",
    "GeminiClient",
    "OllamaClient",
    "ProviderRegistry",
    "normalize_name",
    "PromptBuilder",
    "build_prompt",
    "ProviderError",
    "ProviderConfigurationError",
    "ProviderConnectionError",
    "ProviderTimeoutError",
    "ProviderHTTPError",
    "ProviderResponseError",
    "ProviderEmptyResponseError",
]
