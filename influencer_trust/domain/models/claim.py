"""Domain models for health claims and their classification."""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ClaimStatus(str, Enum):
    """Scientific validity of a claim."""

    VERIFIED = "Verified"
    QUESTIONABLE = "Questionable"
    DEBUNKED = "Debunked"


class ClaimCategory(str, Enum):
    """Closed set of health topics a claim can belong to."""

    SLEEP = "Sleep"
    PERFORMANCE = "Performance"
    HORMONES = "Hormones"
    STRESS = "Stress"
    NUTRITION = "Nutrition"
    EXERCISE = "Exercise"
    COGNITION = "Cognition"
    MOTIVATION = "Motivation"
    RECOVERY = "Recovery"
    MENTAL_HEALTH = "Mental Health"
    OTHER = "Other"


class ScientificEvidence(BaseModel):
    """Journals grouped by how they relate to a claim."""

    journals_supporting: List[str] = Field(default_factory=list)
    journals_questioning: List[str] = Field(default_factory=list)
    journals_contradicting: List[str] = Field(default_factory=list)


class RawClaim(BaseModel):
    """A claim as gathered from the research provider, before any analysis."""

    claim_text: str = Field(..., description="The statement attributed to the influencer")
    source_content: Optional[str] = Field(None, description="Excerpt the claim was taken from")
    source_platform: Optional[str] = Field(None, description="Platform the claim appeared on")
    found_date: Optional[str] = Field(None, description="When the claim was made, as reported")


class DedupVerdict(BaseModel):
    """Duplicate determination for one newly gathered claim."""

    new_claim_text: str
    is_duplicate: bool
    matched_existing_claim_text: Optional[str] = None
    similarity_score: Optional[float] = Field(None, description="Similarity in [0, 1]; informational only")

    @field_validator("similarity_score", mode="before")
    @classmethod
    def _normalize_similarity(cls, value):
        # Percent-scale answers are rescaled, anything else out of range is clamped
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return None
        if 1.0 < value <= 100.0:
            value = value / 100.0
        return min(max(float(value), 0.0), 1.0)


class ClassificationRecord(BaseModel):
    """Classification of one claim returned by the research provider."""

    claim_text: str
    status: ClaimStatus
    category: Optional[ClaimCategory] = None
    confidence_score: int = Field(..., ge=0, le=100)
    journals_supporting: List[str] = Field(default_factory=list)
    journals_questioning: List[str] = Field(default_factory=list)
    journals_contradicting: List[str] = Field(default_factory=list)

    @property
    def scientific_evidence(self) -> ScientificEvidence:
        """Journal lists packed the way they are persisted."""
        return ScientificEvidence(
            journals_supporting=self.journals_supporting,
            journals_questioning=self.journals_questioning,
            journals_contradicting=self.journals_contradicting,
        )


class Claim(BaseModel):
    """A persisted, classified claim."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: Optional[str] = None
    influencer_id: str
    claim_text: str
    source_content: Optional[str] = None
    source_platform: Optional[str] = None
    category: Optional[ClaimCategory] = None
    status: Optional[ClaimStatus] = None
    confidence_score: Optional[int] = Field(None, ge=0, le=100)
    scientific_evidence: ScientificEvidence = Field(default_factory=ScientificEvidence)
    created_at: Optional[datetime] = None

    @classmethod
    def from_classification(
        cls,
        influencer_id: str,
        record: ClassificationRecord,
        raw_claim: RawClaim,
    ) -> "Claim":
        """Build the row to persist from a classification and its source claim."""
        return cls(
            influencer_id=influencer_id,
            claim_text=record.claim_text,
            source_content=raw_claim.source_content,
            source_platform=raw_claim.source_platform,
            category=record.category,
            status=record.status,
            confidence_score=record.confidence_score,
            scientific_evidence=record.scientific_evidence,
        )

    def to_row(self) -> dict:
        """Serialize for insertion, leaving store-assigned columns out."""
        return self.model_dump(mode="json", exclude={"id", "created_at"})
