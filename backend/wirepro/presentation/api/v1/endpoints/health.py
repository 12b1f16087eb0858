"""Health check endpoint — no dependencies, always available."""

from fastapi import APIRouter

from wirepro.config import get_settings
from wirepro.infrastructure.dependencies import build_providers

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check() -> dict:
    """Returns the current application health status and configured providers."""
    settings = get_settings()
    providers = [
        d.name for d in build_providers(settings) if d.provider.is_configured()
    ]
    return {
        "status": "healthy",
        "version": settings.app_version,
        "environment": settings.app_env,
        "providers": providers,
    }
