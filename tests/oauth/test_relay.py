"""
Tests for the callback relay page.
"""
import json
import re

import pytest

from app.core.exceptions import StateMismatchError
from app.services.oauth import CallbackFinisher, invalid_state_response, origin_of


def _script_value(page: str, name: str):
    """Pull a ``var name = <json>;`` literal out of the relay script."""
    match = re.search(rf"var {name} = (.*?);\n", page)
    assert match, f"{name} not found in page"
    return json.loads(match.group(1))


class TestOriginOf:
    """Test reducing a redirect URL to its origin."""

    @pytest.mark.parametrize("url,expected", [
        ("https://vibe.example.com/app?x=1#frag", "https://vibe.example.com"),
        ("HTTPS://Vibe.Example.COM/", "https://vibe.example.com"),
        ("http://localhost:5173/callback", "http://localhost:5173"),
        ("https://vibe.example.com:443/", "https://vibe.example.com"),
        ("http://vibe.example.com:80/", "http://vibe.example.com"),
        ("https://user:pw@vibe.example.com:8443/a", "https://vibe.example.com:8443"),
        ("http://[::1]:3000/", "http://[::1]:3000"),
    ])
    def test_origin(self, url, expected):
        assert origin_of(url) == expected

    @pytest.mark.parametrize("url", [
        "javascript:alert(1)",
        "ftp://vibe.example.com/",
        "/relative/path",
        "https://",
    ])
    def test_rejects_non_http_urls(self, url):
        with pytest.raises(ValueError):
            origin_of(url)


class TestCallbackFinisher:
    """Test consuming a transaction and rendering the relay page."""

    def test_success_posts_token_to_stored_origin(self, store):
        """Test the success message and its target origin."""
        # Arrange
        transaction = store.create("https://vibe.example.com/studio?step=2", "spotify")
        finisher = CallbackFinisher(store)

        # Act
        response = finisher.finish(transaction.state, "access-123", "spotify", is_error=False)

        # Assert
        page = response.body.decode()
        assert response.status_code == 200
        assert response.headers["cache-control"] == "no-store"
        assert _script_value(page, "message") == {"provider": "spotify", "token": "access-123"}
        assert _script_value(page, "targetOrigin") == "https://vibe.example.com"
        assert "window.opener.postMessage(message, targetOrigin)" in page
        assert "window.close()" in page
        assert "'*'" not in page and '"*"' not in page

    def test_failure_posts_error(self, store):
        """Test the failure message shape."""
        transaction = store.create("http://localhost:5173/", "google")
        finisher = CallbackFinisher(store)

        response = finisher.finish(transaction.state, "access_denied", "google", is_error=True)

        page = response.body.decode()
        assert response.status_code == 200
        assert _script_value(page, "message") == {"provider": "google", "error": "access_denied"}
        assert _script_value(page, "targetOrigin") == "http://localhost:5173"

    def test_state_is_single_use(self, store):
        """Test that a second finish for the same state is rejected."""
        # Arrange
        transaction = store.create("https://vibe.example.com/", "spotify")
        finisher = CallbackFinisher(store)
        finisher.finish(transaction.state, "access-123", "spotify", is_error=False)

        # Act & Assert
        with pytest.raises(StateMismatchError):
            finisher.finish(transaction.state, "access-456", "spotify", is_error=False)

    def test_missing_state_rejected(self, store):
        with pytest.raises(StateMismatchError):
            CallbackFinisher(store).finish(None, "access-123", "spotify", is_error=False)

    def test_provider_mismatch_rejected_and_consumed(self, store):
        """Test that a state issued for one provider cannot finish another."""
        # Arrange
        transaction = store.create("https://vibe.example.com/", "spotify")
        finisher = CallbackFinisher(store)

        # Act & Assert
        with pytest.raises(StateMismatchError) as exc:
            finisher.finish(transaction.state, "access-123", "google", is_error=False)

        assert exc.value.status_code == 400
        assert not store.exists(transaction.state)

    def test_script_payload_cannot_break_out(self, store):
        """Test that hostile error text stays inside the JSON literal."""
        # Arrange
        transaction = store.create("https://vibe.example.com/", "spotify")
        hostile = "</script><script>alert(1)</script>&\u2028"

        # Act
        response = CallbackFinisher(store).finish(transaction.state, hostile, "spotify", is_error=True)

        # Assert
        page = response.body.decode()
        script = page.split("<script>", 1)[1]
        assert "</script><script>alert" not in page
        assert "\u2028" not in script
        assert script.count("</script>") == 1
        assert _script_value(page, "message")["error"] == hostile

    def test_invalid_state_page(self):
        """Test the fixed rejection page."""
        response = invalid_state_response()

        assert response.status_code == 400
        assert "Invalid state" in response.body.decode()
        assert "<script>" not in response.body.decode()
        assert response.headers["cache-control"] == "no-store"
