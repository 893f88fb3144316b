"""Health check endpoint: no dependencies, always available."""

from fastapi import APIRouter

from ai2pdf.config import get_settings

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check() -> dict:
    """Liveness probe: reports the service name, version and environment."""
    settings = get_settings()
    return {
        "service": settings.app_title,
        "status": "healthy",
        "version": settings.app_version,
        "environment": settings.app_env,
    }
