"""
Anthropic adapter (Messages API over REST).

POST /v1/messages with ``x-api-key`` and ``anthropic-version`` headers.
The response carries a list of content blocks; text blocks are concatenated.
The Messages API has no JSON mode, so ``force_json`` is ignored.
"""

from typing import Any, Optional

import httpx

from writerly_ai.llm.base_client import BaseProviderClient
from writerly_ai.llm.exceptions import ProviderConfigurationError
from writerly_ai.models.llm_models import CompletionRequest


class AnthropicClient(BaseProviderClient):
    name = "anthropic"

    def __init__(
        self,
        api_key: Optional[str],
        model: str = "claude-3-5-haiku-latest",
        base_url: str = "https://api.anthropic.com",
        api_version: str = "2023-06-01",
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not api_key:
            raise ProviderConfigurationError("Missing ANTHROPIC_API_KEY", provider=self.name)
        self.api_key = api_key
        self.api_version = api_version
        super().__init__(base_url, model, timeout=timeout, transport=transport)

    def _build_request(self, request: CompletionRequest) -> tuple[str, dict[str, Any], dict[str, str]]:
        payload = {
            "model": self.model,
            "max_tokens": request.max_tokens,
            "temperature": request.temperature,
            "messages": [{"role": "user", "content": request.prompt}],
        }
        headers = {
            "content-type": "application/json",
            "x-api-key": self.api_key,
            "anthropic-version": self.api_version,
        }
        return "/v1/messages", payload, headers

    def _extract_text(self, data: Any) -> str:
        parts = data.get("content")
        if not isinstance(parts, list):
            return ""
        return "".join(
            part.get("text", "")
            for part in parts
            if isinstance(part, dict) and part.get("type") == "text"
        )
