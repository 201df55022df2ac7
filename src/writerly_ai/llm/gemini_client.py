"""
Gemini adapter (Generative Language REST API).

POST /v1beta/models/{model}:generateContent with the key in ``x-goog-api-key``.
{
    "contents": [{"role": "user", "parts": [{"text": "..."}]}],
    "generationConfig": {
        "temperature": 0.7,
        "maxOutputTokens": 512,
        "responseMimeType": "application/json"      # only when force_json
    }
}
Text is the concatenation of candidates[0].content.parts[].text.
"""

from typing import Any, Optional

import httpx

from writerly_ai.llm.base_client import BaseProviderClient
from writerly_ai.llm.exceptions import ProviderConfigurationError
from writerly_ai.models.llm_models import CompletionRequest


class GeminiClient(BaseProviderClient):
    name = "gemini"

    def __init__(
        self,
        api_key: Optional[str],
        model: str = "gemini-1.5-flash",
        base_url: str = "https://generativelanguage.googleapis.com",
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not api_key:
            raise ProviderConfigurationError("Missing GEMINI_API_KEY", provider=self.name)
        self.api_key = api_key
        super().__init__(base_url, model, timeout=timeout, transport=transport)

    def _build_request(self, request: CompletionRequest) -> tuple[str, dict[str, Any], dict[str, str]]:
        generation_config: dict[str, Any] = {
            "temperature": request.temperature,
            "maxOutputTokens": request.max_tokens,
        }
        if request.force_json:
            generation_config["responseMimeType"] = "application/json"
        payload = {
            "contents": [{"role": "user", "parts": [{"text": request.prompt}]}],
            "generationConfig": generation_config,
        }
        headers = {
            "content-type": "application/json",
            "x-goog-api-key": self.api_key,
        }
        return f"/v1beta/models/{self.model}:generateContent", payload, headers

    def _extract_text(self, data: Any) -> str:
        candidates = data.get("candidates") or []
        if not candidates:
            return ""
        parts = (candidates[0].get("content") or {}).get("parts") or []
        return "".join(
            part.get("text", "") for part in parts if isinstance(part, dict)
        )
