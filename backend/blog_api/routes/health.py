"""
Blog API - Health Check Route
===============================

What:  GET /health for container probes and load balancers.
How:   Pings the post store; the service is "healthy" only if the store answers.
       The identity provider is not probed: reads keep working without it.
"""

import logging
import time

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from blog_api import __version__
from blog_api.repositories.base import PostRepository
from blog_api.schemas.post import HealthResponse

logger = logging.getLogger(__name__)

_start_time = time.time()


def create_router(repository: PostRepository) -> APIRouter:
    router = APIRouter(tags=["Health"])

    @router.get(
        "/health",
        response_model=HealthResponse,
        responses={503: {"description": "Post store unreachable", "model": HealthResponse}},
        summary="Service health check",
    )
    async def health_check():
        """Returns 200 when the post store answers a probe, 503 otherwise."""
        connected = await repository.ping()
        if not connected:
            logger.warning("Health check: post store unreachable")

        health = HealthResponse(
            status="healthy" if connected else "unhealthy",
            version=__version__,
            database="connected" if connected else "disconnected",
            uptime_seconds=round(time.time() - _start_time, 2),
        )
        return JSONResponse(
            status_code=200 if connected else 503,
            content=health.model_dump(),
        )

    return router
