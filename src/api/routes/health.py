"""``GET /api/health``: liveness plus a database ping."""

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from src.core import check_database_connection
from src.core.config import settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["Health"])


@router.get("")
async def health_check(request: Request) -> JSONResponse:
    """
    200 when the database answers ``SELECT 1``, 503 when it does not.

    Both outcomes use the success envelope shape so monitors can always read
    ``data.checks``.
    """
    database_ok = await check_database_connection(getattr(request.app.state, "sessionmaker", None))
    if not database_ok:
        logger.warning("Health check failed: database unavailable")

    return JSONResponse(
        status_code=200 if database_ok else 503,
        content={
            "success": database_ok,
            "data": {
                "status": "healthy" if database_ok else "degraded",
                "app": settings.app_name,
                "version": settings.version,
                "environment": settings.environment,
                "checks": {"database": "ok" if database_ok else "unavailable"},
            },
        },
    )
