"""Claim analysis endpoint."""

import logging

from fastapi import APIRouter, Depends

from ...domain.models.analysis import AnalysisReport, AnalysisRequest
from ...domain.services.analysis_pipeline import AnalysisPipeline
from ...infrastructure.dependencies import get_analysis_pipeline
from .errors import to_http_exception

logger = logging.getLogger(__name__)

router = APIRouter(tags=["analysis"])


@router.post("/analyze", response_model=AnalysisReport)
async def analyze_influencer(
    request: AnalysisRequest,
    pipeline: AnalysisPipeline = Depends(get_analysis_pipeline),
) -> AnalysisReport:
    """Run the claims pipeline for a tracked influencer.

    Args:
        request: Influencer name, recency window, claim limit and journals

    Returns:
        Report of the run, including the refreshed trust score
    """
    logger.info(f"Starting analysis for {request.influencer_name} ({request.recency_filter.value})")
    try:
        return await pipeline.run(request)
    except Exception as e:
        raise to_http_exception(e, "Analysis")
