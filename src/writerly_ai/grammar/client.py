"""
Thin client for the external grammar checker (LanguageTool-compatible).

POST {GRAMMAR_BASE_URL}/v2/check, form-encoded {text, language}
-> {"matches": [{"offset", "length", "message", "rule": {"id", "category"}, "replacements"}]}

One call per check, bounded by a hard timeout. Latency goes to the ``grammar``
channel of the LatencyRecorder.
"""

import time
from typing import Any, Optional

import httpx
import structlog

from writerly_ai.monitoring.latency import LatencyRecorder
from writerly_ai.monitoring.metrics import grammar_requests_total


logger = structlog.get_logger(__name__)


class GrammarServiceError(Exception):
    """The grammar checker could not be reached or answered badly."""

    status_code = 502

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class GrammarTimeoutError(GrammarServiceError):
    status_code = 504


class GrammarClient:
    def __init__(
        self,
        base_url: str,
        timeout: float = 8.0,
        recorder: Optional[LatencyRecorder] = None,
        default_language: str = "en-US",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.recorder = recorder
        self.default_language = default_language
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

    async def check(self, text: str, language: Optional[str] = None) -> dict[str, Any]:
        """
        Run one grammar check.

        Returns:
            The checker's JSON body; ``matches`` is always present

        Raises:
            GrammarTimeoutError: No answer within ``timeout``
            GrammarServiceError: Network failure, non-2xx or unparsable body
        """
        form = {"text": text, "language": language or self.default_language}
        started = time.perf_counter()
        try:
            response = await self._client.post("/v2/check", data=form)
        except httpx.TimeoutException as e:
            grammar_requests_total.labels(outcome="timeout").inc()
            logger.warning("Grammar check timed out", timeout=self.timeout)
            raise GrammarTimeoutError(
                f"Grammar service timed out after {self.timeout}s"
            ) from e
        except httpx.HTTPError as e:
            grammar_requests_total.labels(outcome="error").inc()
            logger.warning("Grammar service unreachable", error=str(e))
            raise GrammarServiceError(
                "Grammar service unreachable", details={"error_type": type(e).__name__}
            ) from e

        if self.recorder is not None:
            self.recorder.record("grammar", (time.perf_counter() - started) * 1000)

        if not response.is_success:
            grammar_requests_total.labels(outcome="error").inc()
            logger.warning("Grammar service error", status_code=response.status_code)
            raise GrammarServiceError(
                "Grammar service error",
                details={"status_code": response.status_code, "body": response.text[:500]},
            )

        try:
            data = response.json()
        except ValueError as e:
            grammar_requests_total.labels(outcome="error").inc()
            raise GrammarServiceError("Invalid response from grammar service") from e

        if not isinstance(data, dict):
            grammar_requests_total.labels(outcome="error").inc()
            raise GrammarServiceError("Invalid response from grammar service")

        data.setdefault("matches", [])
        grammar_requests_total.labels(outcome="success").inc()
        return data

    async def close(self) -> None:
        await self._client.aclose()
