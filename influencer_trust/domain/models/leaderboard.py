"""Domain models for the influencer leaderboard."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class Trend(str, Enum):
    """Direction of an influencer's recent claim accuracy."""

    UP = "up"
    DOWN = "down"


class LeaderboardStats(BaseModel):
    """Totals across all tracked influencers."""

    total_influencers: int = 0
    total_claims: int = 0
    average_trust_score: float = 0.0


class LeaderboardEntry(BaseModel):
    """One ranked influencer."""

    id: Optional[str] = None
    canonical_name: str
    trust_score: float = 0.0
    follower_count: int = 0
    verified_claims_count: int = 0
    trend: Trend = Trend.DOWN


class Leaderboard(BaseModel):
    """Influencers ranked by trust score, with global stats."""

    stats: LeaderboardStats = Field(default_factory=LeaderboardStats)
    influencers: List[LeaderboardEntry] = Field(default_factory=list)
