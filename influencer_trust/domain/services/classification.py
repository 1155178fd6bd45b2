"""Scientific classification of unique claims."""

import logging
from dataclasses import dataclass, field
from typing import List, Sequence

from ..errors import ClassificationFailed
from ..models.claim import ClassificationRecord, RawClaim
from ..ports.completion_provider import CompletionOptions
from .concurrency import ConcurrencyLimiter, chunked
from .prompts import classification_prompt
from .record_validation import CLASSIFICATION_SCHEMA, partition_records
from .research_client import ResearchClient

logger = logging.getLogger(__name__)


@dataclass
class ClassificationOutcome:
    """Records produced by a classification run plus diagnostics."""

    records: List[ClassificationRecord] = field(default_factory=list)
    missing_claim_texts: List[str] = field(default_factory=list)


class ClassificationStage:
    """Assigns status, category, confidence and journal evidence to claims.

    Every returned record is checked against the batch that produced it;
    records that fail are dropped and a failed batch contributes nothing.
    Only a run without any usable record is an error.
    """

    def __init__(
        self,
        research_client: ResearchClient,
        limiter: ConcurrencyLimiter,
        batch_size: int = 3,
        max_tokens: int = 4000,
    ):
        self._research = research_client
        self._limiter = limiter
        self._batch_size = batch_size
        self._max_tokens = max_tokens

    def batches(self, claims: Sequence[RawClaim]) -> List[List[RawClaim]]:
        """Split claims into request batches."""
        return chunked(claims, self._batch_size)

    async def _classify_batch(self, batch: List[RawClaim], selected_journals: List[str]) -> List[ClassificationRecord]:
        batch_texts = [claim.claim_text for claim in batch]
        options = CompletionOptions(max_tokens=self._max_tokens, temperature=0, top_p=1)
        answer = await self._research.query_array(classification_prompt(batch_texts, selected_journals), options)

        records, rejected = partition_records(answer, CLASSIFICATION_SCHEMA, allowed_keys=set(batch_texts))
        for rejection in rejected:
            logger.error(f"Invalid result format or claim text mismatch: {rejection.as_error().message}: {rejection.raw!r}")
        return records

    async def classify(self, claims: List[RawClaim], selected_journals: List[str]) -> ClassificationOutcome:
        """Classify claims in concurrent batches.

        Args:
            claims: Unique claims to classify
            selected_journals: Journals to draw evidence from

        Returns:
            Valid records, one per classified claim, and the texts left unclassified

        Raises:
            ClassificationFailed: No batch produced a valid record
        """
        batches = self.batches(claims)
        logger.info(f"🧪 Classifying {len(claims)} claims in {len(batches)} batches")

        outcomes = await self._limiter.run_all([
            lambda batch=batch: self._classify_batch(batch, selected_journals)
            for batch in batches
        ])

        records: List[ClassificationRecord] = []
        classified = set()
        for outcome in outcomes:
            if not outcome.succeeded:
                logger.error(f"❌ Classification batch {outcome.index + 1}/{len(batches)} failed: {outcome.error}")
                continue
            for record in outcome.value:
                if record.claim_text in classified:
                    logger.warning(f"⚠️ Ignoring repeated classification for claim: {record.claim_text}")
                    continue
                classified.add(record.claim_text)
                records.append(record)

        missing = [claim.claim_text for claim in claims if claim.claim_text not in classified]
        if missing:
            logger.error(f"Missing classification results for {len(missing)} claims: {missing}")

        if not records:
            raise ClassificationFailed()

        logger.info(f"✅ Classified {len(records)} of {len(claims)} claims")
        return ClassificationOutcome(records=records, missing_claim_texts=missing)
