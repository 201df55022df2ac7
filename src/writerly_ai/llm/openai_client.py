"""
OpenAI adapter (Chat Completions API over REST).

POST /v1/chat/completions
{
    "model": "gpt-4o-mini",
    "messages": [{"role": "user", "content": "..."}],
    "temperature": 0.7,
    "max_tokens": 512,
    "response_format": {"type": "json_object"}     # only when force_json
}
Text lives at choices[0].message.content.
"""

from typing import Any, Optional

import httpx

from writerly_ai.llm.base_client import BaseProviderClient
from writerly_ai.llm.exceptions import ProviderConfigurationError
from writerly_ai.models.llm_models import CompletionRequest


class OpenAIClient(BaseProviderClient):
    """Bearer-token auth; honours ``force_json`` via ``response_format``."""

    name = "openai"

    def __init__(
        self,
        api_key: Optional[str],
        model: str = "gpt-4o-mini",
        base_url: str = "https://api.openai.com",
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not api_key:
            raise ProviderConfigurationError("Missing OPENAI_API_KEY", provider=self.name)
        self.api_key = api_key
        super().__init__(base_url, model, timeout=timeout, transport=transport)

    def _build_request(self, request: CompletionRequest) -> tuple[str, dict[str, Any], dict[str, str]]:
        payload: dict[str, Any] = {
            "model": self.model,
            "messages": [{"role": "user", "content": request.prompt}],
            "temperature": request.temperature,
            "max_tokens": request.max_tokens,
        }
        if request.force_json:
            payload["response_format"] = {"type": "json_object"}
        headers = {
            "content-type": "application/json",
            "authorization": f"Bearer {self.api_key}",
        }
        return "/v1/chat/completions", payload, headers

    def _extract_text(self, data: Any) -> str:
        choices = data.get("choices") or []
        if not choices:
            return ""
        content = (choices[0].get("message") or {}).get("content")
        return content if isinstance(content, str) else ""
