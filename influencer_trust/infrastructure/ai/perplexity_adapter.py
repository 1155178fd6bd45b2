"""Perplexity implementation of the completion provider interface."""

import logging
import os
from typing import Any, Dict, Optional

import httpx
from pydantic import BaseModel, Field

from ...domain.errors import UpstreamError, UpstreamUnavailable
from ...domain.ports.completion_provider import CompletionOptions, CompletionProvider, CompletionResult

logger = logging.getLogger(__name__)


class PerplexityConfig(BaseModel):
    """Configuration for Perplexity adapter."""

    api_key: str = Field(..., description="Perplexity API key")
    model: str = Field(default="sonar", description="Online model with web search")
    base_url: str = Field(default="https://api.perplexity.ai", description="API base URL")
    timeout: float = Field(default=120.0, description="API timeout in seconds")

    @classmethod
    def from_env(cls) -> "PerplexityConfig":
        """Create configuration from environment variables."""
        api_key = os.getenv("PERPLEXITY_API_KEY", "")
        if not api_key:
            logger.warning("⚠️ PERPLEXITY_API_KEY not found in environment variables")
        return cls(
            api_key=api_key,
            model=os.getenv("PERPLEXITY_MODEL", "sonar"),
            base_url=os.getenv("PERPLEXITY_BASE_URL", "https://api.perplexity.ai"),
            timeout=float(os.getenv("PERPLEXITY_TIMEOUT", "120")),
        )


class PerplexityAdapter(CompletionProvider):
    """Perplexity implementation of the completion provider interface.

    One chat completion per call, no streaming and no retry.
    """

    def __init__(
        self,
        config: Optional[PerplexityConfig] = None,
        provider_name: str = "Perplexity",
    ):
        """Initialize the adapter."""
        self._config = config or PerplexityConfig(api_key="")
        self._name = provider_name
        self._client: Optional[httpx.AsyncClient] = None
        self._initialized = False

    async def initialize(self) -> None:
        """Create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._config.base_url,
                timeout=self._config.timeout,
                headers={
                    "Authorization": f"Bearer {self._config.api_key}",
                    "Accept": "application/json",
                    "Content-Type": "application/json",
                },
            )
        self._initialized = True

    def _build_payload(self, prompt: str, options: CompletionOptions) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "model": self._config.model,
            "messages": [{"role": "user", "content": prompt}],
            "max_tokens": options.max_tokens,
            "temperature": options.temperature,
            "top_p": options.top_p,
            "stream": False,
        }
        if options.search_recency_filter:
            payload["search_recency_filter"] = options.search_recency_filter.value
        return payload

    async def complete(self, prompt: str, options: CompletionOptions) -> CompletionResult:
        """Run one chat completion request."""
        if not self._client:
            raise RuntimeError("Provider not initialized")

        try:
            response = await self._client.post(
                "/chat/completions",
                json=self._build_payload(prompt, options),
            )
        except httpx.TransportError as e:
            raise UpstreamUnavailable(f"Perplexity API unreachable: {type(e).__name__}: {e}") from e

        if not response.is_success:
            logger.warning(f"⚠️ Perplexity returned status {response.status_code}")
            raise UpstreamError(response.status_code, response.text)

        try:
            choice = response.json()["choices"][0]
            content = choice["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise UpstreamError(response.status_code, f"Invalid API response format: {response.text[:500]}") from e
        if not content:
            raise UpstreamError(response.status_code, "Invalid API response format: empty content")

        finish_reason = choice.get("finish_reason")
        return CompletionResult(
            text=content,
            truncated=finish_reason == "length",
            finish_reason=finish_reason,
        )

    async def shutdown(self) -> None:
        """Clean up resources and shut down the provider."""
        if self._client:
            await self._client.aclose()
            self._client = None
        self._initialized = False

    @property
    def provider_name(self) -> str:
        """Get the name of the completion provider."""
        return self._name

    @property
    def is_available(self) -> bool:
        """Check if the provider is available and ready."""
        return self._initialized and self._client is not None
