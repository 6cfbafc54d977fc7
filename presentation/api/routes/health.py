"""Health check endpoint: served outside the API prefix, no token required."""

import logging
import time

from fastapi import APIRouter

from domain.exceptions import UpstreamLookupError
from presentation.api.dependencies import get_container
from presentation.api.schemas.system import HealthResponse

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
)
async def health_check() -> HealthResponse:
    db_ok = True
    try:
        await get_container().user_repository().find_by_id("")
    except UpstreamLookupError:
        logger.warning("Health check: user store unavailable")
        db_ok = False

    return HealthResponse(
        status="ok" if db_ok else "degraded",
        database_ok=db_ok,
        uptime_seconds=round(time.time() - _start_time, 1),
    )
