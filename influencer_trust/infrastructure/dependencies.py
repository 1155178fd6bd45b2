"""Dependency injection configuration for hexagonal architecture."""

import asyncio
import logging
from functools import lru_cache
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from ..domain.models.pipeline_settings import PipelineSettings
from ..domain.ports.completion_provider import CompletionProvider
from ..domain.ports.row_store import RowStore
from ..domain.services.analysis_pipeline import AnalysisPipeline
from ..domain.services.claim_ingestion import ClaimIngestionStage
from ..domain.services.classification import ClassificationStage
from ..domain.services.concurrency import ConcurrencyLimiter
from ..domain.services.deduplication import DeduplicationStage
from ..domain.services.influencer_verification_service import InfluencerVerificationService
from ..domain.services.leaderboard_service import LeaderboardService
from ..domain.services.research_client import ResearchClient
from ..domain.services.trust_score import TrustScoreAggregator
from .ai.factory import CompletionProviderFactory
from .storage.factory import create_row_store

# Load environment variables from .env file if it exists
load_dotenv()

logger = logging.getLogger(__name__)


class ServiceContainer:
    """Service container for dependency injection.

    Adapters are created on first use so importing the API does not require
    credentials; `initialize` can be called at startup to connect eagerly.
    """

    def __init__(
        self,
        settings: Optional[PipelineSettings] = None,
        store: Optional[RowStore] = None,
        provider: Optional[CompletionProvider] = None,
        provider_name: str = "perplexity",
    ):
        """Initialize service container.

        Args:
            settings: Pipeline tuning; read from the environment when omitted
            store: Row store; selected from the environment when omitted
            provider: Completion provider; created by the factory when omitted
            provider_name: Factory name of the completion provider
        """
        self._settings = settings or PipelineSettings.from_env()
        self._store = store
        self._provider = provider
        self._provider_name = provider_name
        self._provider_factory = CompletionProviderFactory()
        self._services: Dict[str, Any] = {}
        self._ready = False
        self._init_lock = asyncio.Lock()

    @property
    def settings(self) -> PipelineSettings:
        return self._settings

    async def initialize(self) -> None:
        """Connect the store and the provider and build all services."""
        async with self._init_lock:
            if not self._ready:
                await self._setup()

    async def _setup(self) -> None:
        logger.info("🔧 Setting up service container...")
        if self._store is None:
            self._store = create_row_store()
        await self._store.initialize()

        if self._provider is None:
            logger.info("🤖 Setting up completion provider...")
            self._provider = await self._provider_factory.create_provider(self._provider_name)
        elif not self._provider.is_available:
            await self._provider.initialize()
        logger.info(f"✅ Completion provider ready: {self._provider.provider_name}")

        self._setup_services(self._store, self._provider)
        self._ready = True
        logger.info("✅ Service container setup completed")

    def _setup_services(self, store: RowStore, provider: CompletionProvider) -> None:
        """Setup all services and their dependencies."""
        settings = self._settings
        research = ResearchClient(provider)
        limiter = ConcurrencyLimiter(settings.max_concurrency)

        self._services = {
            "research_client": research,
            "verification_service": InfluencerVerificationService(
                store,
                research,
                max_tokens=settings.verification_max_tokens,
                cache_ttl=settings.verification_cache_ttl,
                cache_maxsize=settings.verification_cache_maxsize,
            ),
            "analysis_pipeline": AnalysisPipeline(
                store,
                ClaimIngestionStage(research, max_tokens=settings.ingestion_max_tokens),
                DeduplicationStage(
                    research,
                    limiter,
                    batch_size=settings.dedup_batch_size,
                    max_tokens=settings.dedup_max_tokens,
                ),
                ClassificationStage(
                    research,
                    limiter,
                    batch_size=settings.classification_batch_size,
                    max_tokens=settings.classification_max_tokens,
                ),
                TrustScoreAggregator(store),
            ),
            "leaderboard_service": LeaderboardService(store),
        }

    async def get(self, service_name: str) -> Any:
        """Get a service by name, initializing the container if needed.

        Raises:
            KeyError: If service not found
        """
        await self.initialize()
        if service_name not in self._services:
            raise KeyError(f"Service '{service_name}' not found")
        return self._services[service_name]

    async def get_analysis_pipeline(self) -> AnalysisPipeline:
        return await self.get("analysis_pipeline")

    async def get_verification_service(self) -> InfluencerVerificationService:
        return await self.get("verification_service")

    async def get_leaderboard_service(self) -> LeaderboardService:
        return await self.get("leaderboard_service")

    def status(self) -> Dict[str, Any]:
        """Describe the wired adapters for health reporting."""
        return {
            "ready": self._ready,
            "store": self._store.store_name if self._store else None,
            "provider": self._provider.provider_name if self._provider else None,
            "provider_available": bool(self._provider and self._provider.is_available),
        }

    async def shutdown(self) -> None:
        """Release the provider and the store."""
        await self._provider_factory.shutdown()
        if self._provider is not None and self._provider.is_available:
            await self._provider.shutdown()
        if self._store is not None:
            await self._store.shutdown()
        self._services.clear()
        self._ready = False
        logger.info("👋 Service container shut down")


# Global service container instance
@lru_cache()
def get_service_container() -> ServiceContainer:
    """Get global service container instance.

    Returns:
        Service container instance
    """
    return ServiceContainer()


# Convenience functions for FastAPI dependency injection
async def get_analysis_pipeline() -> AnalysisPipeline:
    """FastAPI dependency for the analysis pipeline."""
    return await get_service_container().get_analysis_pipeline()


async def get_verification_service() -> InfluencerVerificationService:
    """FastAPI dependency for the influencer verification service."""
    return await get_service_container().get_verification_service()


async def get_leaderboard_service() -> LeaderboardService:
    """FastAPI dependency for the leaderboard service."""
    return await get_service_container().get_leaderboard_service()
