"""Health check endpoint.

/api/health runs SELECT 1 against the database and reports its latency.
It is public so load balancers can check it without a session.
"""

from __future__ import annotations

import time
from datetime import datetime, timezone

import structlog
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from src.constellation.core.database import ping_db

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health")
async def health_check():
    """Database connectivity check. Returns 200 when reachable, 503 otherwise."""
    start = time.perf_counter()
    timestamp = datetime.now(timezone.utc).isoformat()
    try:
        await ping_db()
    except Exception as e:
        logger.error("health.db_unreachable", error=str(e))
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "degraded",
                "db": "disconnected",
                "error": str(e),
                "timestamp": timestamp,
            },
        )

    latency_ms = round((time.perf_counter() - start) * 1000)
    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content={
            "status": "ok",
            "db": "connected",
            "latencyMs": latency_ms,
            "timestamp": timestamp,
        },
    )
