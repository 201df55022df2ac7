"""
Ollama adapter for locally hosted models.

POST /api/generate
{
    "model": "llama3.2:3b",
    "prompt": "...",
    "stream": false,
    "format": "json",                    # only when force_json
    "options": {"temperature": 0.7, "num_predict": 512}
}
Response: {"model": "...", "response": "...", "done": true, ...}

No API key: the client always constructs.
"""

from typing import Any, Optional

import httpx

from writerly_ai.llm.base_client import BaseProviderClient
from writerly_ai.models.llm_models import CompletionRequest


class OllamaClient(BaseProviderClient):
    name = "ollama"

    def __init__(
        self,
        base_url: str = "http://localhost:11434",
        model: str = "llama3.2:3b",
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(base_url, model, timeout=timeout, transport=transport)

    def _build_request(self, request: CompletionRequest) -> tuple[str, dict[str, Any], dict[str, str]]:
        payload: dict[str, Any] = {
            "model": self.model,
            "prompt": request.prompt,
            "stream": False,  # Streaming is not supported by the orchestrator
            "options": {
                "temperature": request.temperature,
                "num_predict": request.max_tokens,
            },
        }
        if request.force_json:
            payload["format"] = "json"
        return "/api/generate", payload, {"content-type": "application/json"}

    def _extract_text(self, data: Any) -> str:
        content = data.get("response")
        return content if isinstance(content, str) else ""
