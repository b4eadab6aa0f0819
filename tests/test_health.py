"""
Tests for the liveness and health endpoints, and app-wide error handling.
"""
import pytest

from app.core.config import get_settings


class TestHealth:
    """Test GET / and GET /health."""

    @pytest.mark.asyncio
    async def test_root_liveness(self, client):
        response = await client.get("/")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert response.text == "Vibe relay is running"

    @pytest.mark.asyncio
    async def test_health_reports_configuration(self, client):
        """Test that health exposes which credentials are present, not their values."""
        settings = get_settings()

        response = await client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["version"] == settings.APP_VERSION
        assert set(body["oauth_providers"]) == {"spotify", "google"}
        assert isinstance(body["ai_configured"], bool)
        if settings.ai_api_key:
            assert settings.ai_api_key not in response.text

    @pytest.mark.asyncio
    async def test_request_id_echoed(self, client):
        response = await client.get("/", headers={"X-Request-ID": "req-123"})

        assert response.headers["x-request-id"] == "req-123"

    @pytest.mark.asyncio
    async def test_request_id_generated(self, client):
        response = await client.get("/")

        assert response.headers["x-request-id"]

    @pytest.mark.asyncio
    async def test_unknown_route(self, client):
        response = await client.get("/nope")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_cors_allows_dev_origin(self, client):
        """Test CORS preflight for the local web client."""
        response = await client.options(
            "/generate-playlist-vibe",
            headers={
                "Origin": "http://localhost:5173",
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "content-type",
            },
        )

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "http://localhost:5173"
