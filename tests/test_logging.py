"""
Tests for log redaction and request log fields.
"""
import pytest
import structlog
from structlog.testing import LogCapture

from app.core.logging import (
    log_error_details,
    log_request_details,
    redact_oauth_secrets,
    setup_logging,
)


@pytest.fixture
def captured():
    """A logger running the relay's context and redaction processors into a capture."""
    capture = LogCapture()
    log = structlog.wrap_logger(
        None,
        processors=[structlog.contextvars.merge_contextvars, redact_oauth_secrets, capture],
    )
    yield log, capture
    structlog.contextvars.clear_contextvars()


class TestRedactOAuthSecrets:
    """Test the redaction processor."""

    def test_drops_credentials_and_truncates_state(self):
        # Arrange
        event = {
            "event": "callback",
            "state": "abcdefghijklmnop",
            "code": "auth-code",
            "access_token": "ya29.token",
            "client_secret": "shh",
            "provider": "google",
        }

        # Act
        result = redact_oauth_secrets(None, "info", event)

        # Assert
        assert result == {"event": "callback", "state": "abcdefgh", "provider": "google"}

    def test_leaves_non_string_state(self):
        result = redact_oauth_secrets(None, "info", {"event": "x", "state": None})

        assert result == {"event": "x", "state": None}

    def test_applies_to_bound_context(self, captured):
        """Test that values bound through contextvars are redacted as well."""
        log, capture = captured
        structlog.contextvars.bind_contextvars(state="0123456789abcdef", code="leaked")

        log.info("spotify_callback_received")

        assert capture.entries[0]["state"] == "01234567"
        assert "code" not in capture.entries[0]

    def test_installed_by_setup_logging(self):
        setup_logging()

        assert redact_oauth_secrets in structlog.get_config()["processors"]


class TestRequestLogFields:
    """Test the helpers used by the request middleware."""

    def test_request_details_keep_bound_request_id(self, captured):
        # Arrange
        log, capture = captured
        structlog.contextvars.bind_contextvars(request_id="req-abc")

        # Act
        log.info("Request started", **log_request_details("GET", "/health", client_ip="127.0.0.1"))

        # Assert
        entry = capture.entries[0]
        assert entry["request_id"] == "req-abc"
        assert entry["path"] == "/health"
        assert entry["client_ip"] == "127.0.0.1"

    def test_request_details_without_client(self):
        assert log_request_details("POST", "/generate-playlist-vibe") == {
            "method": "POST",
            "path": "/generate-playlist-vibe",
        }

    def test_error_details(self):
        details = log_error_details(ValueError("bad input"), path="/oauth/start")

        assert details == {
            "error_type": "ValueError",
            "error_message": "bad input",
            "path": "/oauth/start",
        }
