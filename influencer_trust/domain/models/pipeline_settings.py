"""Tunable parameters of the claim analysis pipeline."""

import logging
import os

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class PipelineSettings(BaseModel):
    """Batching, concurrency and token budgets for pipeline stages."""

    dedup_batch_size: int = Field(default=10, ge=1, description="New claims per dedup request")
    classification_batch_size: int = Field(default=3, ge=1, description="Claims per classification request")
    max_concurrency: int = Field(default=3, ge=1, description="Concurrent provider calls per stage")
    ingestion_max_tokens: int = Field(default=5000, description="Token budget for claim gathering")
    dedup_max_tokens: int = Field(default=4000, description="Token budget per dedup batch")
    classification_max_tokens: int = Field(default=4000, description="Token budget per classification batch")
    verification_max_tokens: int = Field(default=1500, description="Token budget for influencer verification")
    verification_cache_ttl: int = Field(default=3600, description="Verification cache TTL in seconds")
    verification_cache_maxsize: int = Field(default=256, description="Maximum cached verifications")

    @classmethod
    def from_env(cls) -> "PipelineSettings":
        """Create settings from PIPELINE_* environment variables."""
        overrides = {}
        for name in cls.model_fields:
            value = os.getenv(f"PIPELINE_{name.upper()}")
            if value is not None:
                overrides[name] = value
        if overrides:
            logger.info(f"⚙️ Pipeline settings overridden from environment: {sorted(overrides)}")
        return cls(**overrides)
