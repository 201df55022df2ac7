"""
Provider registry: name -> constructed adapter.

Every known adapter is constructed once at startup. A provider whose
construction fails (missing key, disabled) is kept as an explicit
"unavailable" reason instead of an adapter, so request handling never needs
to catch construction errors.
"""

from typing import Optional

import httpx
import structlog

from writerly_ai.config import Settings
from writerly_ai.llm.anthropic_client import AnthropicClient
from writerly_ai.llm.base_client import BaseProviderClient
from writerly_ai.llm.exceptions import ProviderConfigurationError
from writerly_ai.llm.gemini_client import GeminiClient
from writerly_ai.llm.ollama_client import OllamaClient
from writerly_ai.llm.openai_client import OpenAIClient


logger = structlog.get_logger(__name__)

PROVIDER_ALIASES = {"claude": "anthropic"}
KNOWN_PROVIDERS = ("openai", "gemini", "anthropic", "ollama")


def normalize_name(name: Optional[str]) -> Optional[str]:
    """Lower-case, trim and resolve aliases; blank names become None."""
    if name is None:
        return None
    key = str(name).strip().lower()
    if not key:
        return None
    return PROVIDER_ALIASES.get(key, key)


class ProviderRegistry:
    """Closed set of provider adapters keyed by canonical name."""

    def __init__(
        self,
        clients: dict[str, BaseProviderClient],
        unavailable: Optional[dict[str, str]] = None,
    ):
        self._clients = {normalize_name(name): client for name, client in clients.items()}
        self.unavailable = dict(unavailable or {})

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "ProviderRegistry":
        """
        Construct every known adapter from settings.

        Args:
            settings: Application settings (keys, models, base URLs)
            transport: Optional httpx transport shared by all adapters (tests)

        Returns:
            Registry holding the adapters that constructed
        """
        timeout = settings.PROVIDER_TIMEOUT
        factories = {
            "openai": lambda: OpenAIClient(
                settings.OPENAI_API_KEY,
                model=settings.OPENAI_MODEL,
                base_url=settings.OPENAI_BASE_URL,
                timeout=timeout,
                transport=transport,
            ),
            "gemini": lambda: GeminiClient(
                settings.GEMINI_API_KEY,
                model=settings.GEMINI_MODEL,
                base_url=settings.GEMINI_BASE_URL,
                timeout=timeout,
                transport=transport,
            ),
            "anthropic": lambda: AnthropicClient(
                settings.ANTHROPIC_API_KEY,
                model=settings.ANTHROPIC_MODEL,
                base_url=settings.ANTHROPIC_BASE_URL,
                api_version=settings.ANTHROPIC_VERSION,
                timeout=timeout,
                transport=transport,
            ),
            "ollama": lambda: OllamaClient(
                base_url=settings.OLLAMA_BASE_URL,
                model=settings.OLLAMA_MODEL,
                timeout=timeout,
                transport=transport,
            ),
        }

        clients: dict[str, BaseProviderClient] = {}
        unavailable: dict[str, str] = {}
        for name in KNOWN_PROVIDERS:
            if name == "ollama" and not settings.OLLAMA_ENABLED:
                unavailable[name] = "disabled"
                continue
            try:
                clients[name] = factories[name]()
            except ProviderConfigurationError as e:
                unavailable[name] = e.message

        logger.info(
            "Provider registry built",
            available=sorted(clients),
            unavailable=unavailable,
        )
        return cls(clients, unavailable)

    def get(self, name: Optional[str]) -> Optional[BaseProviderClient]:
        """Adapter for ``name`` (aliases allowed), or None if unknown/unconfigured."""
        key = normalize_name(name)
        if key is None:
            return None
        return self._clients.get(key)

    def available(self) -> list[str]:
        return list(self._clients)

    def status(self) -> dict[str, str]:
        """Per-provider availability, used by the health endpoint."""
        result = {name: "available" for name in self._clients}
        for name, reason in self.unavailable.items():
            result[name] = f"unavailable: {reason}"
        return result

    async def close(self) -> None:
        for client in self._clients.values():
            await client.close()

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.get(name) is not None
