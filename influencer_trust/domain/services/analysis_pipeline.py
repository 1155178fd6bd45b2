"""Orchestration of a full claim analysis run for one influencer."""

import logging
from collections import Counter
from typing import Dict, List

from ..errors import InfluencerTrustError, StoreError, SubjectNotFound
from ..models.analysis import AnalysisOutcome, AnalysisReport, AnalysisRequest, PipelineState
from ..models.claim import Claim, ClaimStatus, RawClaim
from ..models.influencer import Influencer
from ..ports.row_store import CLAIMS_TABLE, INFLUENCERS_TABLE, RowStore
from .claim_ingestion import ClaimIngestionStage
from .classification import ClassificationStage
from .deduplication import DeduplicationStage
from .trust_score import TrustScoreAggregator

logger = logging.getLogger(__name__)


class _RunTracker:
    """Records the states one run passes through."""

    def __init__(self, influencer_name: str):
        self.influencer_name = influencer_name
        self.visited: List[PipelineState] = []

    @property
    def state(self) -> PipelineState:
        return self.visited[-1]

    def enter(self, state: PipelineState) -> None:
        self.visited.append(state)
        logger.debug(f"Analysis of {self.influencer_name}: entering {state.value}")

    def abort(self, error: InfluencerTrustError) -> InfluencerTrustError:
        """Move to ABORTED and tag the error with the state that failed."""
        error.aborted_state = self.state.value
        error.visited_states = [state.value for state in self.visited]
        self.enter(PipelineState.ABORTED)
        return error


class AnalysisPipeline:
    """Sequences ingestion, deduplication, classification, persistence and scoring.

    Stages run one after another. Any domain error raised by a stage aborts
    the run and propagates to the caller unchanged; claims inserted before a
    scoring failure stay persisted and the next run's full recomputation
    repairs the score.
    """

    def __init__(
        self,
        store: RowStore,
        ingestion: ClaimIngestionStage,
        deduplication: DeduplicationStage,
        classification: ClassificationStage,
        aggregator: TrustScoreAggregator,
    ):
        """Initialize the pipeline.

        Args:
            store: Row store holding influencers and claims
            ingestion: Claim gathering stage
            deduplication: Duplicate filtering stage
            classification: Scientific classification stage
            aggregator: Trust score recomputation
        """
        self._store = store
        self._ingestion = ingestion
        self._deduplication = deduplication
        self._classification = classification
        self._aggregator = aggregator

    async def run(self, request: AnalysisRequest) -> AnalysisReport:
        """Analyze the recent claims of a tracked influencer.

        Args:
            request: Analysis parameters

        Returns:
            Report of the run

        Raises:
            SubjectNotFound: The influencer is not tracked
            ClassificationFailed: No claim could be classified
            InfluencerTrustError: Any other stage failure
        """
        tracker = _RunTracker(request.influencer_name)
        logger.info(f"🚀 Starting analysis for {request.influencer_name}")
        try:
            return await self._run(request, tracker)
        except InfluencerTrustError as e:
            logger.error(f"❌ Analysis of {request.influencer_name} aborted while {tracker.state.value}: {e.message}")
            raise tracker.abort(e)
        except Exception as e:
            logger.error(f"❌ Analysis of {request.influencer_name} aborted while {tracker.state.value}: {e}", exc_info=True)
            raise tracker.abort(InfluencerTrustError(f"Analysis failed while {tracker.state.value}")) from e

    async def _run(self, request: AnalysisRequest, tracker: _RunTracker) -> AnalysisReport:
        tracker.enter(PipelineState.VERIFYING)
        influencer = await self._load_influencer(request.influencer_name)

        tracker.enter(PipelineState.INGESTING)
        raw_claims = await self._ingestion.ingest(
            influencer.canonical_name,
            request.claims_limit,
            request.recency_filter,
        )
        if not raw_claims:
            tracker.enter(PipelineState.DONE)
            return AnalysisReport(
                influencer_id=influencer.id,
                outcome=AnalysisOutcome.NO_NEW_CLAIMS,
                message="No new claims found",
                visited_states=tracker.visited,
                trust_score=influencer.trust_score,
            )

        tracker.enter(PipelineState.DEDUPLICATING)
        existing_rows = await self._store.get(CLAIMS_TABLE, {"influencer_id": influencer.id})
        existing_texts = [row["claim_text"] for row in existing_rows]
        unique_claims = await self._deduplication.dedup(raw_claims, existing_texts)
        if not unique_claims:
            tracker.enter(PipelineState.DONE)
            return AnalysisReport(
                influencer_id=influencer.id,
                outcome=AnalysisOutcome.ALL_DUPLICATES,
                message="All recent claims were duplicates",
                visited_states=tracker.visited,
                new_claims_found=len(raw_claims),
                trust_score=influencer.trust_score,
                total_claims_in_db=len(existing_rows),
            )

        tracker.enter(PipelineState.CLASSIFYING)
        classification = await self._classification.classify(unique_claims, request.selected_journals)

        tracker.enter(PipelineState.PERSISTING)
        originals: Dict[str, RawClaim] = {claim.claim_text: claim for claim in unique_claims}
        claims = [
            Claim.from_classification(influencer.id, record, originals[record.claim_text])
            for record in classification.records
        ]
        inserted = await self._store.insert(CLAIMS_TABLE, [claim.to_row() for claim in claims])
        if len(inserted) != len(claims):
            raise StoreError(f"Expected {len(claims)} inserted claims, store reported {len(inserted)}")

        tracker.enter(PipelineState.AGGREGATING)
        summary = await self._aggregator.refresh(influencer.id)

        tracker.enter(PipelineState.DONE)
        tallies = Counter(record.status for record in classification.records)
        logger.info(f"✅ Analysis of {influencer.canonical_name} complete: {len(inserted)} claims added, trust score {summary.trust_score}")

        return AnalysisReport(
            influencer_id=influencer.id,
            outcome=AnalysisOutcome.COMPLETED,
            message=f"Analyzed {len(inserted)} new claims",
            visited_states=tracker.visited,
            new_claims_found=len(raw_claims),
            new_unique_claims=len(unique_claims),
            inserted_claims=len(inserted),
            new_verified=tallies[ClaimStatus.VERIFIED],
            new_questionable=tallies[ClaimStatus.QUESTIONABLE],
            new_debunked=tallies[ClaimStatus.DEBUNKED],
            trust_score=summary.trust_score,
            total_claims_in_db=summary.total,
            details=classification.records,
            missing_classifications=classification.missing_claim_texts,
        )

    async def _load_influencer(self, influencer_name: str) -> Influencer:
        row = await self._store.get_one(INFLUENCERS_TABLE, {"canonical_name": influencer_name})
        if row is None:
            raise SubjectNotFound()
        return Influencer.model_validate(row)
