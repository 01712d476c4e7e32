"""
Hospeda Backend — Health Check Route
=====================================

What:  GET /health for Docker health checks and load balancers.
How:   Runs `SELECT 1` against the database. The service is "healthy" only
       when the database answers; otherwise it reports "unhealthy" with
       HTTP 503 so the load balancer routes traffic elsewhere.

The body is plain (no envelope) because probes only read the status code
and these four fields.
"""

import logging
import time

from fastapi import APIRouter, Response
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from hospeda import __version__
from hospeda.database import engine
from hospeda.schemas.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Module load time approximates process start
_start_time = time.time()


async def database_reachable() -> bool:
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as exc:
        logger.warning("Health check: database unreachable: %s", str(exc))
        return False
    return True


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Database unreachable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(response: Response) -> HealthResponse:
    connected = await database_reachable()
    if not connected:
        response.status_code = 503
    return HealthResponse(
        status="healthy" if connected else "unhealthy",
        version=__version__,
        database="connected" if connected else "disconnected",
        uptime_seconds=round(time.time() - _start_time, 2),
    )
