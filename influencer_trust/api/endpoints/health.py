"""Health check endpoints."""

from typing import Any, Dict

from fastapi import APIRouter

from ...infrastructure.dependencies import get_service_container

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check() -> Dict[str, Any]:
    """Check the health of all service components.

    Returns:
        Service status with the wired store and completion provider
    """
    return {
        "status": "healthy",
        "version": "0.1.0",
        "components": get_service_container().status(),
    }
