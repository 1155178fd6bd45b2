"""Leaderboard endpoint."""

from fastapi import APIRouter, Depends

from ...domain.models.leaderboard import Leaderboard
from ...domain.services.leaderboard_service import LeaderboardService
from ...infrastructure.dependencies import get_leaderboard_service
from .errors import to_http_exception

router = APIRouter(tags=["leaderboard"])


@router.get("/leaderboard", response_model=Leaderboard)
async def get_leaderboard(
    leaderboard_service: LeaderboardService = Depends(get_leaderboard_service),
) -> Leaderboard:
    """Rank tracked influencers by trust score."""
    try:
        return await leaderboard_service.get_leaderboard()
    except Exception as e:
        raise to_http_exception(e, "Building leaderboard")
