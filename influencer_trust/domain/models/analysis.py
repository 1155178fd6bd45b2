"""Domain models for claim analysis runs."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from .claim import ClassificationRecord


class RecencyFilter(str, Enum):
    """How far back the research provider should look for claims."""

    HOUR = "hour"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


class PipelineState(str, Enum):
    """States an analysis run moves through."""

    VERIFYING = "verifying"
    INGESTING = "ingesting"
    DEDUPLICATING = "deduplicating"
    CLASSIFYING = "classifying"
    PERSISTING = "persisting"
    AGGREGATING = "aggregating"
    DONE = "done"
    ABORTED = "aborted"


class AnalysisOutcome(str, Enum):
    """How a successful run ended."""

    COMPLETED = "completed"
    NO_NEW_CLAIMS = "no_new_claims"
    ALL_DUPLICATES = "all_duplicates"


class AnalysisRequest(BaseModel):
    """Parameters of one analysis run."""

    influencer_name: str = Field(..., min_length=1, description="Canonical name of a tracked influencer")
    recency_filter: RecencyFilter = Field(RecencyFilter.WEEK, description="Search recency window")
    claims_limit: int = Field(10, ge=1, le=100, description="Maximum number of claims to gather")
    selected_journals: List[str] = Field(
        default_factory=list,
        description="Journals the classifier should draw evidence from",
    )


class TrustScoreSummary(BaseModel):
    """Claim-status distribution and the score derived from it."""

    verified: int = 0
    questionable: int = 0
    debunked: int = 0
    total: int = 0
    trust_score: float = 0.0


class AnalysisReport(BaseModel):
    """Result of one analysis run."""

    influencer_id: str
    state: PipelineState = PipelineState.DONE
    outcome: AnalysisOutcome = AnalysisOutcome.COMPLETED
    message: str = ""
    visited_states: List[PipelineState] = Field(default_factory=list)
    new_claims_found: int = 0
    new_unique_claims: int = 0
    inserted_claims: int = 0
    new_verified: int = 0
    new_questionable: int = 0
    new_debunked: int = 0
    trust_score: Optional[float] = None
    total_claims_in_db: Optional[int] = None
    details: List[ClassificationRecord] = Field(default_factory=list)
    missing_classifications: List[str] = Field(default_factory=list)
