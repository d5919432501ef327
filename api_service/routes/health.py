"""
Health check route.

GET /api/health reports database reachability and AI configuration. The
body is not wrapped in the success envelope so load balancers can read
``status`` directly.
"""

import logging
import time
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from src.common.ai_config import is_ai_configured
from src.common.repositories import Collections, get_repository
from version import __version__

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["health"])

_started_at = time.monotonic()

NO_CACHE_HEADERS = {"Cache-Control": "no-store, no-cache, must-revalidate"}


def check_database() -> Dict[str, Any]:
    start = time.perf_counter()
    try:
        get_repository(Collections.USERS).ping()
    except Exception as e:
        logger.error(f"Health check: database down: {e}")
        return {"status": "down", "error": str(e)}
    return {"status": "up", "latency": round((time.perf_counter() - start) * 1000, 2)}


@router.get("/health")
async def health() -> JSONResponse:
    """
    Service health.

    healthy: database up and AI configured; degraded: database up, AI not
    configured; unhealthy (503): database down.
    """
    database = await run_in_threadpool(check_database)
    ai = {"status": "configured" if is_ai_configured() else "not_configured"}

    if database["status"] == "down":
        status = "unhealthy"
    elif ai["status"] == "not_configured":
        status = "degraded"
    else:
        status = "healthy"

    body = {
        "status": status,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": __version__,
        "uptime": int(time.monotonic() - _started_at),
        "checks": {"database": database, "ai": ai},
    }
    return JSONResponse(
        status_code=503 if status == "unhealthy" else 200,
        content=body,
        headers=NO_CACHE_HEADERS,
    )
