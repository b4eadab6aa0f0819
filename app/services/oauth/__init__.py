"""
OAuth relay for the music-playlist (Spotify) and video-platform (Google/YouTube)
providers.

The browser opens a popup on /oauth/start, the provider redirects back to
/callback/{provider}, and the relay page posts the token to the opener window.
"""
from enum import Enum
from typing import Dict, Type

from app.core.config import Settings

from .base import OAuthError, OAuthProviderInterface, OAuthTokens
from .google import GoogleOAuthProvider
from .relay import CallbackFinisher, invalid_state_response, origin_of
from .spotify import SpotifyOAuthProvider
from .state_store import (
    InMemoryTransactionStore,
    Transaction,
    TransactionNotFoundError,
    TransactionStore,
    TransactionStoreError,
)


class OAuthProvider(str, Enum):
    """Supported OAuth providers."""
    SPOTIFY = "spotify"
    GOOGLE = "google"


PROVIDER_CLASSES: Dict[OAuthProvider, Type[OAuthProviderInterface]] = {
    OAuthProvider.SPOTIFY: SpotifyOAuthProvider,
    OAuthProvider.GOOGLE: GoogleOAuthProvider,
}

SUPPORTED_PROVIDERS = frozenset(p.value for p in OAuthProvider)


def build_oauth_provider(provider: OAuthProvider, settings: Settings) -> OAuthProviderInterface:
    """
    Create a provider adapter from configuration.

    Args:
        provider: Provider to build
        settings: Application settings holding its credentials

    Returns:
        Configured provider adapter
    """
    prefix = provider.value.upper()
    return PROVIDER_CLASSES[provider](
        client_id=getattr(settings, f"{prefix}_CLIENT_ID"),
        client_secret=getattr(settings, f"{prefix}_CLIENT_SECRET"),
        redirect_uri=getattr(settings, f"{prefix}_REDIRECT_URI"),
        scope=getattr(settings, f"{prefix}_SCOPE"),
        timeout_seconds=settings.OAUTH_HTTP_TIMEOUT_SECONDS,
    )


__all__ = [
    # Base classes and types
    "OAuthError",
    "OAuthProviderInterface",
    "OAuthTokens",

    # Providers
    "GoogleOAuthProvider",
    "SpotifyOAuthProvider",
    "OAuthProvider",
    "PROVIDER_CLASSES",
    "SUPPORTED_PROVIDERS",
    "build_oauth_provider",

    # State management
    "InMemoryTransactionStore",
    "Transaction",
    "TransactionNotFoundError",
    "TransactionStore",
    "TransactionStoreError",

    # Callback relay
    "CallbackFinisher",
    "invalid_state_response",
    "origin_of",
]
