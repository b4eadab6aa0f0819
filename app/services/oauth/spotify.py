"""
Spotify OAuth Provider Implementation

Spotify authenticates the token request with HTTP Basic auth; the client
secret never goes in the form body.
"""
import base64
from typing import Dict

from .base import OAuthProviderInterface


class SpotifyOAuthProvider(OAuthProviderInterface):
    """Spotify OAuth provider for playlist management."""

    name = "spotify"

    @property
    def authorization_base_url(self) -> str:
        """Spotify OAuth authorization endpoint."""
        return "https://accounts.spotify.com/authorize"

    @property
    def token_url(self) -> str:
        """Spotify OAuth token endpoint."""
        return "https://accounts.spotify.com/api/token"

    @property
    def default_scope(self) -> str:
        # ugc-image-upload is needed to set the generated cover art
        return "playlist-modify-public playlist-modify-private ugc-image-upload"

    def _get_additional_auth_params(self) -> Dict[str, str]:
        """Always show the consent dialog so users can switch accounts."""
        return {"show_dialog": "true"}

    def _get_client_auth_headers(self) -> Dict[str, str]:
        credentials = f"{self.client_id}:{self.client_secret}".encode()
        return {"Authorization": f"Basic {base64.b64encode(credentials).decode('ascii')}"}
