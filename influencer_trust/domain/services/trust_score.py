"""Trust score computation from the persisted claim-status distribution."""

import logging
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal

from ..errors import SubjectNotFound
from ..models.analysis import TrustScoreSummary
from ..models.claim import ClaimStatus
from ..ports.row_store import CLAIMS_TABLE, INFLUENCERS_TABLE, RowStore

logger = logging.getLogger(__name__)

STATUS_WEIGHTS = {
    ClaimStatus.VERIFIED: Decimal("1.0"),
    ClaimStatus.QUESTIONABLE: Decimal("0.5"),
    ClaimStatus.DEBUNKED: Decimal("0.0"),
}

_TWO_PLACES = Decimal("0.01")


def calculate_trust_score(verified: int, questionable: int, debunked: int, total: int) -> float:
    """Weighted share of accurate claims as a 0-100 score, rounded half-up to 2 places.

    ``total`` counts every claim, including ones without a status.
    """
    if total <= 0:
        return 0.0
    weighted = (
        verified * STATUS_WEIGHTS[ClaimStatus.VERIFIED]
        + questionable * STATUS_WEIGHTS[ClaimStatus.QUESTIONABLE]
        + debunked * STATUS_WEIGHTS[ClaimStatus.DEBUNKED]
    )
    score = weighted / Decimal(total) * 100
    return float(score.quantize(_TWO_PLACES, rounding=ROUND_HALF_UP))


class TrustScoreAggregator:
    """Recomputes an influencer's score from all of their persisted claims.

    Nothing is updated incrementally, so the score always matches the claim
    table no matter how many earlier runs failed part-way.
    """

    def __init__(self, store: RowStore):
        self._store = store

    async def recompute(self, influencer_id: str) -> TrustScoreSummary:
        """Count persisted claims by status and derive the score."""
        rows = await self._store.get(CLAIMS_TABLE, {"influencer_id": influencer_id})
        statuses = [row.get("status") for row in rows]

        verified = statuses.count(ClaimStatus.VERIFIED.value)
        questionable = statuses.count(ClaimStatus.QUESTIONABLE.value)
        debunked = statuses.count(ClaimStatus.DEBUNKED.value)
        total = len(rows)

        return TrustScoreSummary(
            verified=verified,
            questionable=questionable,
            debunked=debunked,
            total=total,
            trust_score=calculate_trust_score(verified, questionable, debunked, total),
        )

    async def refresh(self, influencer_id: str) -> TrustScoreSummary:
        """Recompute the score and store it with the per-status counts."""
        summary = await self.recompute(influencer_id)
        updated = await self._store.update(
            INFLUENCERS_TABLE,
            {"id": influencer_id},
            {
                "verified_claims_count": summary.verified,
                "questionable_claims_count": summary.questionable,
                "debunked_claims_count": summary.debunked,
                "trust_score": summary.trust_score,
                "last_analyzed": datetime.now(timezone.utc).isoformat(),
            },
        )
        if not updated:
            raise SubjectNotFound(f"Influencer {influencer_id} disappeared before its score could be stored")

        logger.info(f"📊 Trust score for {influencer_id}: {summary.trust_score} ({summary.total} claims)")
        return summary
