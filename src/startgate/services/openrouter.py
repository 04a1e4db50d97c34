"""OpenRouter collaborator.

Only the connectivity test used at startup lives here.
"""

from __future__ import annotations

from typing import Any

import httpx

from startgate.core.config import DEFAULT_OPENROUTER_BASE_URL, DEFAULT_OPENROUTER_MODEL
from startgate.core.exceptions import DependencyCheckError
from startgate.core.logging_config import StructuredLogger, get_logger

DEFAULT_TIMEOUT = 7.0
CONNECTION_TEST_PROMPT = (
    "Hello, this is a connection test. Please respond with 'Connection successful'."
)


class OpenRouterClient:
    """Minimal OpenRouter chat-completions client."""

    def __init__(
        self,
        api_key: str,
        *,
        logger: StructuredLogger | None = None,
        site_url: str | None = None,
        site_name: str | None = None,
        base_url: str = DEFAULT_OPENROUTER_BASE_URL,
        model: str = DEFAULT_OPENROUTER_MODEL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = api_key
        self.site_url = site_url
        self.site_name = site_name
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.timeout = timeout
        self.transport = transport
        self.logger = logger or get_logger(__name__)

    def _headers(self) -> dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        if self.site_url:
            headers["HTTP-Referer"] = self.site_url
        if self.site_name:
            headers["X-Title"] = self.site_name
        return headers

    async def test_connection(self) -> bool:
        """Ask the model for a fixed reply.

        Returns False when the provider answers with something unexpected;
        raises ``DependencyCheckError`` when it cannot be reached at all.
        """
        self.logger.info("Testing OpenRouter connection")
        payload: dict[str, Any] = {
            "model": self.model,
            "messages": [{"role": "user", "content": CONNECTION_TEST_PROMPT}],
            "max_tokens": 50,
        }

        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout),
                headers=self._headers(),
                transport=self.transport,
            ) as client:
                response = await client.post("/chat/completions", json=payload)
        except httpx.HTTPError as e:
            self.logger.error(
                "OpenRouter connection test failed", extra={"error": str(e)}
            )
            msg = f"OpenRouter is unreachable: {e!s}"
            raise DependencyCheckError(msg, "openrouter") from e

        if response.status_code >= 400:  # noqa: PLR2004
            self.logger.error(
                "OpenRouter connection test rejected",
                extra={"status_code": response.status_code},
            )
            msg = f"OpenRouter returned HTTP {response.status_code}"
            raise DependencyCheckError(msg, "openrouter")

        content = ""
        try:
            choices = response.json().get("choices") or []
            if choices:
                content = (choices[0].get("message") or {}).get("content") or ""
        except (ValueError, AttributeError):
            content = ""

        text = content.lower()
        if "connection" in text or "successful" in text:
            self.logger.info("OpenRouter connection test successful")
            return True

        self.logger.warning(
            "OpenRouter connection test returned unexpected response",
            extra={"response": content[:100]},
        )
        return False
