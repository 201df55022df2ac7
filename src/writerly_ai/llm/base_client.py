"""
Abstract base client for language-model providers.

Every adapter exposes the same ``complete(CompletionRequest) -> str`` contract.
The base class owns the HTTP plumbing (pooled httpx.AsyncClient, timeout and
transport error mapping, JSON decoding); subclasses only describe their own
request body, auth headers and response/error paths.
"""

import json
from abc import ABC, abstractmethod
from typing import Any, Optional

import httpx
import structlog

from writerly_ai.llm.exceptions import (
    ProviderConnectionError,
    ProviderHTTPError,
    ProviderResponseError,
    ProviderTimeoutError,
)
from writerly_ai.models.llm_models import CompletionRequest


logger = structlog.get_logger(__name__)


class BaseProviderClient(ABC):
    """
    Abstract base class for provider adapters.

    Responsibilities:
    - Translate a CompletionRequest into the provider's HTTP request
    - Map transport failures, non-2xx responses and bad bodies to ProviderError
    - Return the generated text

    Does NOT handle:
    - Prompt construction (PromptBuilder)
    - Choosing between providers or rate limiting (Orchestrator)
    - Retries: a failed call is never repeated on the same provider
    """

    name: str = "base"

    def __init__(
        self,
        base_url: str,
        model: str,
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize base client.

        Args:
            base_url: Provider API root (trailing slashes are dropped)
            model: Model identifier sent with every request
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests inject MockTransport)
        """
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

        logger.info(
            "Initialized provider client",
            provider=self.name,
            base_url=self.base_url,
            model=model,
            timeout=timeout,
        )

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the pooled async HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout),
                transport=self._transport,
                follow_redirects=True,
            )
        return self._client

    @abstractmethod
    def _build_request(self, request: CompletionRequest) -> tuple[str, dict[str, Any], dict[str, str]]:
        """Return (path, json_body, headers) for this provider."""

    @abstractmethod
    def _extract_text(self, data: Any) -> str:
        """Pull the generated text out of a parsed 2xx response body."""

    def _error_message(self, data: Any, raw_text: str) -> str:
        """Provider's own error message from an error body; falls back to the raw body."""
        if isinstance(data, dict):
            error = data.get("error")
            if isinstance(error, dict) and isinstance(error.get("message"), str):
                return error["message"]
            if isinstance(error, str):
                return error
        return raw_text or f"{self.name} request failed"

    async def complete(self, request: CompletionRequest) -> str:
        """
        Run one completion.

        Args:
            request: Provider-agnostic completion request

        Returns:
            Generated text (may be empty; the orchestrator decides if it is usable)

        Raises:
            ProviderTimeoutError: Request exceeded the timeout
            ProviderConnectionError: Network failure
            ProviderHTTPError: Non-2xx status, with the provider's message
            ProviderResponseError: 2xx with an unparsable body
        """
        path, payload, headers = self._build_request(request)

        logger.debug(
            "Sending completion request",
            provider=self.name,
            model=self.model,
            prompt_length=len(request.prompt),
            force_json=request.force_json,
        )

        try:
            client = await self._get_client()
            response = await client.post(path, json=payload, headers=headers)
        except httpx.TimeoutException as e:
            raise ProviderTimeoutError(
                f"{self.name} request timed out after {self.timeout}s",
                provider=self.name,
                details={"error": str(e)},
            ) from e
        except httpx.HTTPError as e:
            raise ProviderConnectionError(
                f"{self.name} network error: {e}",
                provider=self.name,
                details={"error_type": type(e).__name__},
            ) from e

        raw_text = response.text
        data: Any = None
        parse_error: Optional[str] = None
        if raw_text:
            try:
                data = json.loads(raw_text)
            except json.JSONDecodeError as e:
                parse_error = e.msg

        if not response.is_success:
            message = self._error_message(data, raw_text)
            logger.warning(
                "Provider returned error status",
                provider=self.name,
                status_code=response.status_code,
                error=message[:500],
            )
            raise ProviderHTTPError(
                message,
                provider=self.name,
                status_code=response.status_code,
            )

        if parse_error is not None or data is None:
            raise ProviderResponseError(
                f"Invalid JSON response from {self.name}",
                provider=self.name,
                details={"parse_error": parse_error or "empty body", "content_snippet": raw_text[:500]},
            )

        try:
            return self._extract_text(data)
        except (KeyError, IndexError, TypeError, AttributeError) as e:
            raise ProviderResponseError(
                f"Unexpected response shape from {self.name}: {e}",
                provider=self.name,
                details={"content_snippet": raw_text[:500]},
            ) from e

    async def close(self) -> None:
        """Close the pooled HTTP client, if one was opened."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            logger.debug("Closed provider client", provider=self.name)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"base_url={self.base_url}, "
            f"model={self.model}, "
            f"timeout={self.timeout}s)"
        )
