"""Single-request access to the research provider with JSON extraction."""

import logging
from typing import Any, Dict, List

from ..errors import TruncatedResponse
from ..ports.completion_provider import CompletionOptions, CompletionProvider
from .response_extractor import ResponseShape, extract_json

logger = logging.getLogger(__name__)


class ResearchClient:
    """Issues completion requests and hands back raw or parsed answers.

    There is no retry here: a failed request surfaces to the caller, which
    decides whether the failure aborts its stage or only one batch.
    """

    def __init__(self, provider: CompletionProvider):
        """Initialize the client.

        Args:
            provider: Completion provider port implementation
        """
        self._provider = provider

    async def query(self, prompt: str, options: CompletionOptions) -> str:
        """Run one completion request and return its text.

        Raises:
            TruncatedResponse: The provider stopped because of its length limit
            UpstreamError: Non-success status from the provider
            UpstreamUnavailable: The provider could not be reached
        """
        logger.debug(f"Research request ({len(prompt)} chars, max_tokens={options.max_tokens})")
        result = await self._provider.complete(prompt, options)
        if result.truncated:
            logger.warning(f"⚠️ Completion truncated (finish_reason={result.finish_reason})")
            raise TruncatedResponse()
        return result.text

    async def query_json(self, prompt: str, shape: ResponseShape, options: CompletionOptions) -> Any:
        """Run one completion request and parse its JSON answer."""
        text = await self.query(prompt, options)
        return extract_json(text, shape)

    async def query_array(self, prompt: str, options: CompletionOptions) -> List[Any]:
        """Run one completion request expecting a JSON array."""
        return await self.query_json(prompt, ResponseShape.ARRAY, options)

    async def query_object(self, prompt: str, options: CompletionOptions) -> Dict[str, Any]:
        """Run one completion request expecting a JSON object."""
        return await self.query_json(prompt, ResponseShape.OBJECT, options)

    @property
    def provider_name(self) -> str:
        """Get the underlying provider name."""
        return self._provider.provider_name
