"""
Quill Backend — Health Check & Root Routes
===========================================

What:  GET /health for probes and GET / as a plain liveness banner.
Why:   Load balancers and docker healthchecks need to know whether the
       service can reach its post store, not just whether the process is up.
How:   Asks the store to ping its engine.

Status levels:
    - healthy:   store reachable (HTTP 200)
    - unhealthy: store unreachable (HTTP 503, stop routing traffic)
"""

import logging
import time

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import PlainTextResponse

from app import __version__
from app.dependencies import get_post_store
from app.schemas.post import HealthResponse
from app.services.post_store import PostStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

BANNER = "Blogging Platform API is running!"

_start_time = time.time()


@router.get("/", response_class=PlainTextResponse, include_in_schema=False)
async def root() -> str:
    return BANNER


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Post store unreachable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(
    response: Response,
    store: PostStore = Depends(get_post_store),
) -> HealthResponse:
    connected = await store.ping()
    if not connected:
        logger.warning("Health check: post store unreachable")
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return HealthResponse(
        status="healthy" if connected else "unhealthy",
        version=__version__,
        database="connected" if connected else "disconnected",
        store=store.engine_name,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
