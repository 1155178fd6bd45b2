"""Leaderboard and influencer detail queries."""

import asyncio
import logging
import math
from typing import Dict, List, Sequence

from ..errors import SubjectNotFound
from ..models.claim import Claim, ClaimStatus
from ..models.influencer import Influencer, InfluencerDetail
from ..models.leaderboard import Leaderboard, LeaderboardEntry, LeaderboardStats, Trend
from ..ports.row_store import CLAIMS_TABLE, INFLUENCERS_TABLE, RowStore

logger = logging.getLogger(__name__)

# Trend weights; unlike the trust score, questionable and debunked claims pull down.
TREND_WEIGHTS: Dict[str, float] = {
    ClaimStatus.VERIFIED.value: 1.0,
    ClaimStatus.QUESTIONABLE.value: -0.5,
    ClaimStatus.DEBUNKED.value: -1.0,
}

RECENT_SHARE = 0.2


def _weighted_average(claims: Sequence[dict]) -> float:
    total = sum(
        TREND_WEIGHTS.get(claim.get("status"), 0.0) * (claim.get("confidence_score") or 0)
        for claim in claims
    )
    return total / (len(claims) or 1)


def calculate_trend(claims: Sequence[dict]) -> Trend:
    """Compare the newest ~20% of claims with the rest.

    Args:
        claims: Claim rows ordered oldest first

    Returns:
        UP when recent claims score at least as well as older ones
    """
    if not claims:
        return Trend.DOWN

    recent_count = max(math.ceil(len(claims) * RECENT_SHARE), 1)
    older = claims[:-recent_count]
    recent = claims[-recent_count:]

    return Trend.UP if _weighted_average(recent) >= _weighted_average(older) else Trend.DOWN


class LeaderboardService:
    """Read-side queries over influencers and their claims."""

    def __init__(self, store: RowStore):
        self._store = store

    async def _trend(self, influencer_id: str) -> Trend:
        claims = await self._store.get(CLAIMS_TABLE, {"influencer_id": influencer_id}, order_by="created_at")
        return calculate_trend(claims)

    async def get_leaderboard(self) -> Leaderboard:
        """Rank influencers by trust score and attach trends."""
        influencer_rows, claim_rows = await asyncio.gather(
            self._store.get(INFLUENCERS_TABLE, order_by="trust_score", descending=True),
            self._store.get(CLAIMS_TABLE),
        )
        influencers = [Influencer.model_validate(row) for row in influencer_rows]
        # Null scores read as 0, so rank again after coercion
        influencers.sort(key=lambda i: i.trust_score, reverse=True)

        average = sum(i.trust_score for i in influencers) / (len(influencers) or 1)
        stats = LeaderboardStats(
            total_influencers=len(influencers),
            total_claims=len(claim_rows),
            average_trust_score=round(average, 2),
        )

        trends = await asyncio.gather(*(self._trend(i.id) for i in influencers))
        entries: List[LeaderboardEntry] = [
            LeaderboardEntry(
                id=influencer.id,
                canonical_name=influencer.canonical_name,
                trust_score=influencer.trust_score,
                follower_count=influencer.follower_count,
                verified_claims_count=influencer.verified_claims_count,
                trend=trend,
            )
            for influencer, trend in zip(influencers, trends)
        ]
        logger.info(f"🏆 Leaderboard built for {len(entries)} influencers")
        return Leaderboard(stats=stats, influencers=entries)

    async def get_influencer(self, influencer_id: str) -> InfluencerDetail:
        """Load one influencer with their claims, newest first.

        Raises:
            SubjectNotFound: No influencer has this id
        """
        row = await self._store.get_one(INFLUENCERS_TABLE, {"id": influencer_id})
        if row is None:
            raise SubjectNotFound()

        claim_rows = await self._store.get(
            CLAIMS_TABLE,
            {"influencer_id": influencer_id},
            order_by="created_at",
            descending=True,
        )
        return InfluencerDetail(
            **Influencer.model_validate(row).model_dump(),
            claims=[Claim.model_validate(claim) for claim in claim_rows],
        )
