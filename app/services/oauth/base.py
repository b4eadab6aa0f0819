"""
OAuth Provider Base Interface

Defines the interface every provider adapter implements: building the
authorization URL and exchanging an authorization code for tokens.
"""
import asyncio
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional
from urllib.parse import urlencode

import aiohttp
import structlog
from pydantic import BaseModel
from pydantic import ValidationError as SchemaValidationError

logger = structlog.get_logger(__name__)

GENERIC_EXCHANGE_ERROR = "Token exchange failed"


class OAuthTokens(BaseModel):
    """OAuth token information."""
    access_token: str
    token_type: str = "Bearer"
    expires_in: Optional[int] = None
    refresh_token: Optional[str] = None
    scope: Optional[str] = None


class OAuthError(Exception):
    """OAuth-specific error."""
    def __init__(self, error: str, description: Optional[str] = None):
        self.error = error
        self.description = description
        super().__init__(f"{error}: {description}" if description else error)

    @property
    def message(self) -> str:
        """Text relayed to the browser."""
        return self.description or self.error


class OAuthProviderInterface(ABC):
    """Abstract base class for OAuth providers."""

    name: str = ""

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        scope: Optional[str] = None,
        timeout_seconds: float = 15.0,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self._scope = scope
        self.timeout = aiohttp.ClientTimeout(total=timeout_seconds)

    @property
    @abstractmethod
    def authorization_base_url(self) -> str:
        """Base URL for OAuth authorization."""
        pass

    @property
    @abstractmethod
    def token_url(self) -> str:
        """URL for token exchange."""
        pass

    @property
    @abstractmethod
    def default_scope(self) -> str:
        """Scopes requested when none are configured."""
        pass

    @property
    def scope(self) -> str:
        """Requested OAuth scopes."""
        return self._scope or self.default_scope

    def generate_authorization_url(self, state: str) -> str:
        """
        Generate OAuth authorization URL.

        Args:
            state: CSRF protection state parameter

        Returns:
            Authorization URL
        """
        params = {
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "scope": self.scope,
            "response_type": "code",
            "state": state,
        }

        # Provider-specific parameters are fixed configuration
        params.update(self._get_additional_auth_params())

        url = f"{self.authorization_base_url}?{urlencode(params)}"
        logger.info(
            "oauth_authorization_url_generated",
            provider=self.name,
            state=state,
        )
        return url

    async def exchange_code_for_tokens(self, code: str) -> OAuthTokens:
        """
        Exchange authorization code for access tokens.

        Issues a single form-encoded POST to the token endpoint. Failures are
        reported, never retried.

        Args:
            code: Authorization code from OAuth callback

        Returns:
            OAuth tokens

        Raises:
            OAuthError: If token exchange fails
        """
        token_data = {
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": self.redirect_uri,
            **self._get_client_credentials_body(),
        }

        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                async with session.post(
                    self.token_url,
                    data=token_data,
                    headers={"Accept": "application/json", **self._get_client_auth_headers()},
                ) as response:
                    token_response = await self._read_json(response)

                    if response.status >= 300:
                        description = (
                            token_response.get("error_description")
                            or token_response.get("error")
                            or GENERIC_EXCHANGE_ERROR
                        )
                        logger.error(
                            f"{self.name}_token_exchange_failed",
                            status=response.status,
                            error=token_response.get("error"),
                        )
                        raise OAuthError(
                            token_response.get("error") or "token_exchange_failed",
                            description,
                        )

        except asyncio.TimeoutError:
            logger.error(f"{self.name}_token_request_timeout", timeout=self.timeout.total)
            raise OAuthError("network_error", f"Timed out contacting {self.name}")
        except aiohttp.ClientError as e:
            logger.error(f"{self.name}_token_request_failed", error=str(e))
            raise OAuthError("network_error", f"Failed to connect to {self.name}: {e}")

        access_token = token_response.get("access_token")
        if not access_token:
            logger.error(f"{self.name}_token_missing")
            raise OAuthError("invalid_response", "No access token returned")

        try:
            tokens = OAuthTokens(
                access_token=access_token,
                token_type=token_response.get("token_type") or "Bearer",
                expires_in=token_response.get("expires_in"),
                refresh_token=token_response.get("refresh_token"),
                scope=token_response.get("scope"),
            )
        except SchemaValidationError as e:
            logger.error(f"{self.name}_token_response_invalid", errors=e.error_count())
            raise OAuthError("invalid_response", "Malformed token response")

        logger.info(
            f"{self.name}_tokens_obtained",
            has_refresh_token=bool(tokens.refresh_token),
            expires_in=tokens.expires_in,
        )
        return tokens

    @staticmethod
    async def _read_json(response: aiohttp.ClientResponse) -> Dict[str, Any]:
        # Error bodies are not always JSON
        try:
            payload = await response.json(content_type=None)
        except ValueError:
            return {}
        return payload if isinstance(payload, dict) else {}

    def _get_additional_auth_params(self) -> Dict[str, str]:
        """
        Get provider-specific authorization parameters.
        Override in subclasses if needed.
        """
        return {}

    def _get_client_auth_headers(self) -> Dict[str, str]:
        """Authorization header for the token request, if the provider uses one."""
        return {}

    def _get_client_credentials_body(self) -> Dict[str, str]:
        """Client credentials sent as form fields, if the provider uses them."""
        return {}
