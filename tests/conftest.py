"""
Shared fixtures for relay tests.
"""
import base64

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.core.dependencies import get_ai_provider, get_oauth_providers, get_transaction_store
from app.main import app
from app.services.oauth import (
    GoogleOAuthProvider,
    InMemoryTransactionStore,
    OAuthProvider,
    SpotifyOAuthProvider,
)
from tests.mocks.ai_providers import FakeAIProvider

SPOTIFY_REDIRECT_URI = "https://relay.example.com/callback/spotify"
GOOGLE_REDIRECT_URI = "https://relay.example.com/callback/google"
CLIENT_ORIGIN = "https://vibe.example.com"


@pytest.fixture
def store():
    """Fresh transaction store per test."""
    return InMemoryTransactionStore()


@pytest.fixture
def spotify_provider():
    return SpotifyOAuthProvider(
        client_id="test-spotify-client-id",
        client_secret="test-spotify-client-secret",
        redirect_uri=SPOTIFY_REDIRECT_URI,
    )


@pytest.fixture
def google_provider():
    return GoogleOAuthProvider(
        client_id="test-google-client-id",
        client_secret="test-google-client-secret",
        redirect_uri=GOOGLE_REDIRECT_URI,
    )


@pytest.fixture
def oauth_providers(spotify_provider, google_provider):
    return {
        OAuthProvider.SPOTIFY: spotify_provider,
        OAuthProvider.GOOGLE: google_provider,
    }


@pytest.fixture
def ai_provider():
    return FakeAIProvider()


@pytest.fixture
def image_b64():
    return base64.b64encode(b"\xff\xd8\xff\xe0fake-jpeg-bytes").decode("ascii")


@pytest_asyncio.fixture
async def client(store, oauth_providers, ai_provider):
    """HTTP client against the app with fake collaborators injected."""
    app.dependency_overrides[get_transaction_store] = lambda: store
    app.dependency_overrides[get_oauth_providers] = lambda: oauth_providers
    app.dependency_overrides[get_ai_provider] = lambda: ai_provider

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
        yield ac

    app.dependency_overrides.clear()
