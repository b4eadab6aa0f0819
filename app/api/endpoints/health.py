"""
Health check endpoints.
"""
from typing import Any, Dict

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from app.core.config import get_settings
from app.services.oauth import OAuthProvider

router = APIRouter()


@router.get("/", response_class=PlainTextResponse)
async def root() -> str:
    """Liveness marker."""
    return "Vibe relay is running"


@router.get("/health")
async def health_check() -> Dict[str, Any]:
    """
    Health check endpoint.

    Returns:
        Health status and which upstream credentials are configured
    """
    settings = get_settings()
    return {
        "status": "healthy",
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "ai_configured": bool(settings.ai_api_key),
        "oauth_providers": {
            provider.value: settings.oauth_provider_configured(provider.value)
            for provider in OAuthProvider
        },
    }
