"""Gathering of recent claims for an influencer."""

import logging
from typing import List, Optional

from ..models.analysis import RecencyFilter
from ..models.claim import RawClaim
from ..ports.completion_provider import CompletionOptions
from .prompts import recent_claims_prompt
from .record_validation import RAW_CLAIM_SCHEMA, partition_records
from .research_client import ResearchClient

logger = logging.getLogger(__name__)


class ClaimIngestionStage:
    """Asks the research provider for an influencer's recent health claims."""

    def __init__(self, research_client: ResearchClient, max_tokens: int = 5000):
        self._research = research_client
        self._max_tokens = max_tokens

    async def ingest(
        self,
        influencer_name: str,
        limit: int,
        recency_filter: Optional[RecencyFilter] = None,
    ) -> List[RawClaim]:
        """Fetch up to ``limit`` distinct recent claims.

        A failed request propagates; an empty answer is a normal outcome.

        Args:
            influencer_name: Canonical name of the influencer
            limit: Maximum number of claims to return
            recency_filter: Search recency window

        Returns:
            Raw claims in the order the provider listed them
        """
        options = CompletionOptions(
            max_tokens=self._max_tokens,
            temperature=0,
            top_p=1,
            search_recency_filter=recency_filter,
        )
        answer = await self._research.query_array(recent_claims_prompt(influencer_name, limit), options)

        claims, rejected = partition_records(answer, RAW_CLAIM_SCHEMA)
        for rejection in rejected:
            logger.warning(f"⚠️ Discarding gathered claim: {rejection.as_error().message}: {rejection.raw!r}")

        unique: List[RawClaim] = []
        seen = set()
        for claim in claims:
            if claim.claim_text in seen:
                continue
            seen.add(claim.claim_text)
            unique.append(claim)

        if len(unique) > limit:
            logger.info(f"Provider returned {len(unique)} claims, keeping the first {limit}")
            unique = unique[:limit]

        logger.info(f"📝 Gathered {len(unique)} claims for {influencer_name}")
        return unique
