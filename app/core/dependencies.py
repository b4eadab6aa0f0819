"""
Dependency injection for FastAPI.
"""
from functools import lru_cache
from typing import Dict

from fastapi import Depends

from app.core.config import get_settings
from app.core.exceptions import ServiceNotConfiguredError
from app.services.ai import AIProviderBase, AlbumArtService, GeminiProvider
from app.services.oauth import (
    CallbackFinisher,
    InMemoryTransactionStore,
    OAuthProvider,
    OAuthProviderInterface,
    TransactionStore,
    build_oauth_provider,
)

# Process-wide; one relay instance owns all pending flows
_transaction_store = InMemoryTransactionStore()


def get_transaction_store() -> TransactionStore:
    """Get the shared OAuth transaction store."""
    return _transaction_store


def get_callback_finisher(
    store: TransactionStore = Depends(get_transaction_store),
) -> CallbackFinisher:
    """Get a callback finisher bound to the transaction store."""
    return CallbackFinisher(store)


def get_oauth_providers() -> Dict[OAuthProvider, OAuthProviderInterface]:
    """
    Build adapters for every provider with complete credentials.

    Returns:
        Mapping of provider to adapter; unconfigured providers are absent
    """
    settings = get_settings()
    return {
        provider: build_oauth_provider(provider, settings)
        for provider in OAuthProvider
        if settings.oauth_provider_configured(provider.value)
    }


@lru_cache
def _gemini_provider(api_key: str) -> GeminiProvider:
    return GeminiProvider(api_key=api_key)


def get_ai_provider() -> AIProviderBase:
    """
    Get the AI provider.

    Raises:
        ServiceNotConfiguredError: If no AI API key is configured
    """
    api_key = get_settings().ai_api_key
    if not api_key:
        raise ServiceNotConfiguredError("AI service", "AI service not configured.")
    return _gemini_provider(api_key)


def get_album_service(
    provider: AIProviderBase = Depends(get_ai_provider),
) -> AlbumArtService:
    """Get the album art service."""
    return AlbumArtService(provider)
