"""
OAuth Callback Relay

Renders the page that closes the popup and hands the flow result back to the
window that opened it. The postMessage target origin is always taken from the
redirect target stored when the flow started, never from the callback request.
"""
import html
import json
from typing import Any, Dict, Optional
from urllib.parse import urlsplit

import structlog
from fastapi import status
from fastapi.responses import HTMLResponse

from app.core.exceptions import StateMismatchError

from .state_store import TransactionNotFoundError, TransactionStore

logger = structlog.get_logger(__name__)

_DEFAULT_PORTS = {"http": 80, "https": 443}

_PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <title>{title}</title>
  </head>
  <body>
    <p>{text}</p>
    <script>
      (function () {{
        var message = {message};
        var targetOrigin = {target_origin};
        if (window.opener) {{
          window.opener.postMessage(message, targetOrigin);
        }}
        window.close();
      }})();
    </script>
  </body>
</html>
"""

INVALID_STATE_PAGE = """<!DOCTYPE html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <title>Invalid state</title>
  </head>
  <body>
    <p>Invalid state</p>
  </body>
</html>
"""


def origin_of(url: str) -> str:
    """Return the ``scheme://host[:port]`` origin of an absolute http(s) URL.

    Raises:
        ValueError: If the URL is not an absolute http(s) URL
    """
    parts = urlsplit(url)
    scheme = parts.scheme.lower()
    if scheme not in _DEFAULT_PORTS or not parts.hostname:
        raise ValueError(f"not an absolute http(s) URL: {url!r}")

    host = parts.hostname
    if ":" in host:
        host = f"[{host}]"

    port = parts.port
    if port is None or port == _DEFAULT_PORTS[scheme]:
        return f"{scheme}://{host}"
    return f"{scheme}://{host}:{port}"


def _script_json(value: Any) -> str:
    # Safe to embed inside <script>: no tag breakout, no JS line terminators
    return (
        json.dumps(value)
        .replace("<", "\\u003c")
        .replace(">", "\\u003e")
        .replace("&", "\\u0026")
        .replace("\u2028", "\\u2028")
        .replace("\u2029", "\\u2029")
    )


def invalid_state_response() -> HTMLResponse:
    """Fixed rejection page for unknown, reused or missing state."""
    return HTMLResponse(
        INVALID_STATE_PAGE,
        status_code=status.HTTP_400_BAD_REQUEST,
        headers={"Cache-Control": "no-store"},
    )


class CallbackFinisher:
    """Consumes the transaction for a callback and renders the relay page."""

    def __init__(self, store: TransactionStore):
        self.store = store

    def finish(
        self,
        state: Optional[str],
        result: Optional[str],
        provider: str,
        is_error: bool,
    ) -> HTMLResponse:
        """
        Finish an OAuth flow.

        Args:
            state: State token from the callback query
            result: Access token on success, error text on failure
            provider: Provider the callback was received for
            is_error: Whether the flow failed

        Returns:
            Relay page (200)

        Raises:
            StateMismatchError: If the state is missing, unknown, reused or
                belongs to another provider
        """
        if not state:
            logger.warning("oauth_callback_missing_state", provider=provider)
            raise StateMismatchError(provider=provider)

        try:
            transaction = self.store.consume(state)
        except TransactionNotFoundError:
            logger.warning("oauth_callback_invalid_state", provider=provider, state=state)
            raise StateMismatchError(provider=provider)

        if transaction.provider != provider:
            logger.warning(
                "oauth_state_provider_mismatch",
                state=state,
                expected=transaction.provider,
                actual=provider,
            )
            raise StateMismatchError(provider=provider)

        target_origin = origin_of(transaction.redirect_target)

        message: Dict[str, Any] = {"provider": provider}
        if is_error:
            message["error"] = result or "Authorization failed."
            title = "Connection failed"
            text = f"Could not connect {provider}: {message['error']}"
        else:
            message["token"] = result
            title = "Connected"
            text = f"{provider.capitalize()} connected. You can close this window."

        logger.info(
            "oauth_flow_finished",
            provider=provider,
            success=not is_error,
            target_origin=target_origin,
            state=state,
        )

        page = _PAGE_TEMPLATE.format(
            title=html.escape(title),
            text=html.escape(text),
            message=_script_json(message),
            target_origin=_script_json(target_origin),
        )
        return HTMLResponse(page, headers={"Cache-Control": "no-store"})
