"""
BlogSpace — Health Check Route
===============================

What:  Liveness plus a probe of the hosted auth service.
How:   The backend being down does not make this process unhealthy, only
       degraded: pages still render and show their errors.
"""

import logging
import time

from fastapi import APIRouter, Depends

from blogspace import __version__
from blogspace.exceptions import BackendError
from blogspace.router import ViewRouter
from blogspace.routes.deps import get_router
from blogspace.schemas import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get("/health", response_model=HealthResponse, summary="Service health check")
async def health_check(app_router: ViewRouter = Depends(get_router)) -> HealthResponse:
    backend_status = "available"
    overall = "healthy"
    try:
        await app_router.context.client.auth.health()
    except BackendError as e:
        backend_status = "unavailable"
        overall = "degraded"
        logger.warning("Health check: backend unreachable: %s", e.message)

    return HealthResponse(
        status=overall,
        version=__version__,
        page=app_router.page,
        dependencies={"backend": backend_status},
        uptime_seconds=round(time.time() - _start_time, 2),
    )
