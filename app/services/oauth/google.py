"""
Google OAuth Provider Implementation

Handles Google OAuth for YouTube playlist access.
"""
from typing import Dict

from .base import OAuthProviderInterface


class GoogleOAuthProvider(OAuthProviderInterface):
    """Google OAuth provider for YouTube."""

    name = "google"

    @property
    def authorization_base_url(self) -> str:
        """Google OAuth authorization endpoint."""
        return "https://accounts.google.com/o/oauth2/v2/auth"

    @property
    def token_url(self) -> str:
        """Google OAuth token endpoint."""
        return "https://oauth2.googleapis.com/token"

    @property
    def default_scope(self) -> str:
        return "https://www.googleapis.com/auth/youtube"

    def _get_additional_auth_params(self) -> Dict[str, str]:
        """Get Google-specific authorization parameters."""
        return {
            "access_type": "offline",  # Request refresh token
            "prompt": "consent",  # Force consent screen to get refresh token
            "include_granted_scopes": "true",
        }

    def _get_client_credentials_body(self) -> Dict[str, str]:
        # Google expects the client credentials as form fields
        return {
            "client_id": self.client_id,
            "client_secret": self.client_secret,
        }
