"""Influencer verification and detail endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from ...domain.models.influencer import InfluencerDetail, VerificationResult
from ...domain.services.influencer_verification_service import InfluencerVerificationService
from ...domain.services.leaderboard_service import LeaderboardService
from ...infrastructure.dependencies import get_leaderboard_service, get_verification_service
from .errors import to_http_exception

logger = logging.getLogger(__name__)

router = APIRouter(tags=["influencers"])


class VerifyRequest(BaseModel):
    """Request model for influencer verification."""

    influencer_name: str = Field(..., min_length=1, description="Name or alias to verify")


@router.post("/verify", response_model=VerificationResult)
async def verify_influencer(
    request: VerifyRequest,
    verification_service: InfluencerVerificationService = Depends(get_verification_service),
) -> VerificationResult:
    """Verify that a person is a health influencer and start tracking them.

    Args:
        request: Verification request

    Returns:
        Verification result of the tracked influencer
    """
    name = request.influencer_name.strip()
    if not name:
        raise HTTPException(status_code=400, detail="Influencer name is required")

    try:
        return await verification_service.verify(name)
    except Exception as e:
        raise to_http_exception(e, "Influencer verification")


@router.get("/influencers/{influencer_id}", response_model=InfluencerDetail)
async def get_influencer(
    influencer_id: str,
    leaderboard_service: LeaderboardService = Depends(get_leaderboard_service),
) -> InfluencerDetail:
    """Get one influencer together with their claims, newest first."""
    try:
        return await leaderboard_service.get_influencer(influencer_id)
    except Exception as e:
        raise to_http_exception(e, "Loading influencer")
