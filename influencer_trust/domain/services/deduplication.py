"""Filtering of newly gathered claims against already persisted ones."""

import logging
from typing import List, Sequence

from ..models.claim import DedupVerdict, RawClaim
from ..ports.completion_provider import CompletionOptions
from .concurrency import ConcurrencyLimiter, chunked
from .prompts import dedup_prompt
from .record_validation import DEDUP_VERDICT_SCHEMA, partition_records
from .research_client import ResearchClient

logger = logging.getLogger(__name__)


class DeduplicationStage:
    """Drops new claims the research provider judges to duplicate existing ones.

    New claim texts are compared in batches, each batch against the whole
    list of existing texts. Verdicts are joined back onto the new claims by
    exact text, so a verdict that paraphrases its claim matches nothing and
    that claim is kept.
    """

    def __init__(
        self,
        research_client: ResearchClient,
        limiter: ConcurrencyLimiter,
        batch_size: int = 10,
        max_tokens: int = 4000,
    ):
        self._research = research_client
        self._limiter = limiter
        self._batch_size = batch_size
        self._max_tokens = max_tokens

    def batches(self, claim_texts: Sequence[str]) -> List[List[str]]:
        """Split new claim texts into request batches."""
        return chunked(claim_texts, self._batch_size)

    async def _judge_batch(self, batch: List[str], existing_claim_texts: List[str]) -> List[DedupVerdict]:
        options = CompletionOptions(max_tokens=self._max_tokens, temperature=0, top_p=1)
        answer = await self._research.query_array(dedup_prompt(batch, existing_claim_texts), options)

        verdicts, rejected = partition_records(answer, DEDUP_VERDICT_SCHEMA)
        for rejection in rejected:
            logger.warning(f"⚠️ Discarding dedup verdict: {rejection.as_error().message}: {rejection.raw!r}")
        return verdicts

    async def dedup(self, new_claims: List[RawClaim], existing_claim_texts: List[str]) -> List[RawClaim]:
        """Return the new claims that are not duplicates.

        Args:
            new_claims: Claims gathered in this run
            existing_claim_texts: Texts of every persisted claim of the influencer

        Returns:
            Subset of ``new_claims`` in their original order
        """
        if not existing_claim_texts:
            logger.info("No existing claims to compare against, skipping deduplication")
            return list(new_claims)

        batches = self.batches([claim.claim_text for claim in new_claims])
        logger.info(f"🔍 Deduplicating {len(new_claims)} claims in {len(batches)} batches against {len(existing_claim_texts)} existing claims")

        outcomes = await self._limiter.run_all([
            lambda batch=batch: self._judge_batch(batch, existing_claim_texts)
            for batch in batches
        ])

        verdicts: List[DedupVerdict] = []
        for outcome in outcomes:
            if outcome.succeeded:
                verdicts.extend(outcome.value)
            else:
                logger.error(f"❌ Dedup batch {outcome.index + 1}/{len(batches)} failed: {outcome.error}")

        duplicate_texts = {verdict.new_claim_text for verdict in verdicts if verdict.is_duplicate}
        unique = [claim for claim in new_claims if claim.claim_text not in duplicate_texts]

        logger.info(f"✅ Deduplication kept {len(unique)} of {len(new_claims)} claims")
        return unique
