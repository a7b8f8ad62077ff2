"""
Note Translator — Health Check Route
======================================

What:  Health check endpoint for monitoring and container probes.
How:   Reports whether the Gemini transcriber is usable and the uptime.

Status levels:
    - healthy:   Transcriber configured (HTTP 200)
    - degraded:  No API key; every image would come back as a fallback
                 note (HTTP 200, flagged for monitoring)
"""

import logging
import time

from fastapi import APIRouter

from note_translator import __version__
from note_translator.schemas.note import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Track when the service started for uptime reporting
_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    description="Returns the health status of the service and its Gemini credential.",
)
async def health_check() -> HealthResponse:
    """
    Check the health of the service.

    The Gemini check only inspects configuration; it never calls the API,
    so frequent probes cost nothing.
    """
    gemini_status = "configured"
    overall = "healthy"

    try:
        from note_translator.services.gemini_service import gemini_service
        if not await gemini_service.health_check():
            gemini_status = "missing_api_key"
            overall = "degraded"
    except Exception as e:
        gemini_status = "unavailable"
        overall = "degraded"
        logger.warning("Health check: Gemini transcriber unusable: %s", str(e))

    return HealthResponse(
        status=overall,
        version=__version__,
        gemini=gemini_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
