"""Service banner at ``/``."""

from fastapi import APIRouter

from src.core.config import settings

router = APIRouter(tags=["Root"])


@router.get("/")
async def root() -> dict[str, str]:
    """Name, version and where to look next."""
    banner = {
        "message": f"{settings.app_name} is running",
        "version": settings.version,
        "health": "/api/health",
    }
    if settings.debug:
        banner["docs"] = "/docs"
    return banner
