"""Port interface for text-completion (research) providers."""

from abc import ABC, abstractmethod
from typing import Optional

from pydantic import BaseModel, Field

from ..models.analysis import RecencyFilter


class CompletionOptions(BaseModel):
    """Sampling parameters for a single completion request."""

    max_tokens: int = Field(default=4096, ge=1, description="Maximum tokens in the answer")
    temperature: float = Field(default=0.0, ge=0.0, le=2.0, description="Sampling temperature")
    top_p: float = Field(default=1.0, gt=0.0, le=1.0, description="Nucleus sampling mass")
    search_recency_filter: Optional[RecencyFilter] = Field(
        default=None,
        description="Restrict web search results to this window",
    )


class CompletionResult(BaseModel):
    """Raw text returned by a completion request."""

    text: str
    truncated: bool = False
    finish_reason: Optional[str] = None


class CompletionProvider(ABC):
    """Abstract interface for the text-completion provider.

    Implementations send exactly one request per call and never retry.
    Transport failures raise UpstreamUnavailable, non-success statuses
    raise UpstreamError.
    """

    @abstractmethod
    async def initialize(self) -> None:
        """Initialize the provider and its resources."""
        pass

    @abstractmethod
    async def complete(self, prompt: str, options: CompletionOptions) -> CompletionResult:
        """Run one completion request.

        Args:
            prompt: User prompt sent to the provider
            options: Sampling parameters

        Returns:
            Raw completion text and truncation flag
        """
        pass

    @abstractmethod
    async def shutdown(self) -> None:
        """Shutdown the provider and clean up resources."""
        pass

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Get the provider name."""
        pass

    @property
    @abstractmethod
    def is_available(self) -> bool:
        """Check if the provider is available."""
        pass
