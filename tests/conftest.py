"""Test configuration and common fixtures."""

import asyncio
import json
from typing import Any, Callable, List, Optional, Tuple, Union

import pytest
import pytest_asyncio

from influencer_trust.domain.ports.completion_provider import (
    CompletionOptions,
    CompletionProvider,
    CompletionResult,
)
from influencer_trust.domain.ports.row_store import CLAIMS_TABLE, INFLUENCERS_TABLE
from influencer_trust.domain.services.research_client import ResearchClient
from influencer_trust.infrastructure.storage.memory_store import InMemoryRowStore

Handler = Callable[[str, CompletionOptions], Union[str, CompletionResult]]


class FakeCompletionProvider(CompletionProvider):
    """Scripted completion provider.

    The handler receives every prompt and returns the completion text (or a
    full CompletionResult); raising from it simulates a failed request.
    """

    def __init__(self, handler: Optional[Handler] = None, delay: float = 0.0):
        self.handler = handler or (lambda prompt, options: "[]")
        self.delay = delay
        self.calls: List[Tuple[str, CompletionOptions]] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self._initialized = False

    async def initialize(self) -> None:
        self._initialized = True

    async def complete(self, prompt: str, options: CompletionOptions) -> CompletionResult:
        self.calls.append((prompt, options))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            answer = self.handler(prompt, options)
        finally:
            self.in_flight -= 1
        if isinstance(answer, CompletionResult):
            return answer
        return CompletionResult(text=answer, finish_reason="stop")

    async def shutdown(self) -> None:
        self._initialized = False

    @property
    def provider_name(self) -> str:
        return "Fake"

    @property
    def is_available(self) -> bool:
        return self._initialized

    def prompts_starting_with(self, header: str) -> List[str]:
        return [prompt for prompt, _ in self.calls if prompt.startswith(header)]


def json_after(prompt: str, marker: str) -> Any:
    """Decode the JSON value that follows ``marker`` inside a prompt."""
    start = prompt.index(marker) + len(marker)
    value, _ = json.JSONDecoder().raw_decode(prompt[start:].lstrip())
    return value


def classify_all(status: str = "Verified", confidence: int = 90) -> Handler:
    """Handler answering every classification prompt with one record per claim."""

    def handler(prompt: str, options: CompletionOptions) -> str:
        texts = json_after(prompt, "Claims to classify:")
        return json.dumps([
            {
                "claim_text": text,
                "status": status,
                "category": "Sleep",
                "confidence_score": confidence,
                "journals_supporting": ["Sleep"],
                "journals_questioning": [],
                "journals_contradicting": [],
            }
            for text in texts
        ])

    return handler


INFLUENCER_ROW = {
    "id": "inf-1",
    "canonical_name": "Andrew Huberman",
    "known_aliases": ["Andrew Huberman", "Dr. Huberman", "hubermanlab"],
    "platform_handles": {"twitter": "hubermanlab", "instagram": "hubermanlab", "youtube": None},
    "credentials": ["PhD Neuroscience"],
    "categories": ["Sleep", "Performance"],
    "follower_count": 5000000,
    "trust_score": 0.0,
    "verified_claims_count": 0,
    "questionable_claims_count": 0,
    "debunked_claims_count": 0,
    "last_analyzed": None,
    "created_at": "2024-01-01T00:00:00+00:00",
}


@pytest.fixture
def fake_provider() -> FakeCompletionProvider:
    """Provide a scripted completion provider that answers with an empty array."""
    return FakeCompletionProvider()


@pytest.fixture
def research_client(fake_provider: FakeCompletionProvider) -> ResearchClient:
    """Provide a research client backed by the fake provider."""
    return ResearchClient(fake_provider)


@pytest.fixture
def empty_store() -> InMemoryRowStore:
    """Provide a store without any rows."""
    return InMemoryRowStore()


@pytest_asyncio.fixture
async def seeded_store() -> InMemoryRowStore:
    """Provide a store holding one tracked influencer and no claims."""
    store = InMemoryRowStore({INFLUENCERS_TABLE: [INFLUENCER_ROW], CLAIMS_TABLE: []})
    await store.initialize()
    yield store
    await store.shutdown()


@pytest.fixture
def prompt_json() -> Callable[[str, str], Any]:
    """Provide the helper decoding JSON embedded in a prompt."""
    return json_after


@pytest.fixture
def classify_handler() -> Callable[..., Handler]:
    """Provide the factory of classification handlers."""
    return classify_all
