"""Translation of domain errors into HTTP errors."""

import logging

from fastapi import HTTPException

from ...domain.errors import InfluencerTrustError

logger = logging.getLogger(__name__)


def to_http_exception(error: Exception, action: str) -> HTTPException:
    """Map an exception raised by a service to an HTTPException.

    Domain errors keep their message and status class; anything else is
    logged with its traceback and reported as a generic 500.
    """
    if isinstance(error, InfluencerTrustError):
        if error.status_code >= 500:
            logger.error(f"❌ {action} failed: {type(error).__name__}: {error.message}")
        return HTTPException(status_code=error.status_code, detail=error.message)

    logger.error(f"❌ {action} failed: {type(error).__name__}: {error}", exc_info=True)
    return HTTPException(status_code=500, detail=f"{action} failed")
