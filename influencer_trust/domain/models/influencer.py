"""Domain models for tracked health influencers."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .claim import Claim


class PlatformHandles(BaseModel):
    """Social platform handles; any of them may be unknown."""

    twitter: Optional[str] = None
    instagram: Optional[str] = None
    youtube: Optional[str] = None


class Influencer(BaseModel):
    """A person whose health claims are tracked."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: Optional[str] = None
    canonical_name: str = Field(..., description="Most widely recognized name")
    known_aliases: List[str] = Field(default_factory=list)
    platform_handles: PlatformHandles = Field(default_factory=PlatformHandles)
    credentials: List[str] = Field(default_factory=list)
    categories: List[str] = Field(default_factory=list)
    follower_count: int = 0
    trust_score: float = Field(0.0, ge=0.0, le=100.0)
    verified_claims_count: int = 0
    questionable_claims_count: int = 0
    debunked_claims_count: int = 0
    last_analyzed: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @field_validator(
        "follower_count",
        "trust_score",
        "verified_claims_count",
        "questionable_claims_count",
        "debunked_claims_count",
        mode="before",
    )
    @classmethod
    def _null_as_zero(cls, value):
        return 0 if value is None else value

    @field_validator("known_aliases", "credentials", "categories", mode="before")
    @classmethod
    def _null_as_empty(cls, value):
        return [] if value is None else value

    @field_validator("platform_handles", mode="before")
    @classmethod
    def _null_handles(cls, value):
        return {} if value is None else value

    def to_row(self) -> dict:
        """Serialize for insertion, leaving store-assigned columns out."""
        return self.model_dump(mode="json", exclude={"id", "created_at", "last_analyzed"})


class InfluencerDetail(Influencer):
    """An influencer together with their claims, newest first."""

    claims: List[Claim] = Field(default_factory=list)


class VerificationResult(BaseModel):
    """Answer to "is this person a health influencer?".

    The research provider answers in camelCase; both spellings are accepted.
    """

    model_config = ConfigDict(populate_by_name=True)

    canonical_name: str = Field(..., alias="canonicalName")
    known_aliases: List[str] = Field(default_factory=list, alias="knownAliases")
    is_health_influencer: bool = Field(..., alias="isHealthInfluencer")
    confidence: int = Field(0, ge=0, le=100)
    platform_handles: PlatformHandles = Field(
        default_factory=PlatformHandles, alias="platformHandles"
    )
    credentials: List[str] = Field(default_factory=list)
    categories: List[str] = Field(default_factory=list)
    approximate_followers: Optional[int] = Field(None, alias="approximateFollowers")

    @classmethod
    def from_influencer(cls, influencer: Influencer) -> "VerificationResult":
        """Describe an already tracked influencer."""
        return cls(
            canonical_name=influencer.canonical_name,
            known_aliases=influencer.known_aliases,
            is_health_influencer=True,
            confidence=100,
            platform_handles=influencer.platform_handles,
            credentials=influencer.credentials,
            categories=influencer.categories,
            approximate_followers=influencer.follower_count,
        )
