"""
BeliLite Backend — Health Check Route
=======================================

What:  GET /health for container probes and quick manual checks.
How:   Runs SELECT 1 against the store and reports whether the summarization
       credential is configured. The upstream API is never called from here.

Status levels:
    - healthy:   store reachable and summarizer configured
    - degraded:  store reachable, summarizer not configured
    - unhealthy: store unreachable
"""

import logging
import time

from fastapi import APIRouter, Request
from sqlalchemy import text

from belilite import __version__
from belilite.schemas.note import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get("/health", response_model=HealthResponse, summary="Service health check")
async def health_check(request: Request) -> HealthResponse:
    db_status = "connected"
    overall = "healthy"

    try:
        async with request.app.state.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: database unreachable: %s", str(e))

    if request.app.state.summarizer.is_configured:
        summarizer_status = "configured"
    else:
        summarizer_status = "not_configured"
        if overall == "healthy":
            overall = "degraded"

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        summarizer=summarizer_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
