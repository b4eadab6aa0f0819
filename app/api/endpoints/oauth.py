"""
OAuth relay endpoints.

The web client opens /oauth/start in a popup. After the provider redirects
back to /callback/{provider}, the popup posts the result to its opener and
closes itself.
"""
import re
from typing import Dict, Optional

import structlog
from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import HTMLResponse, RedirectResponse

from app.core.dependencies import (
    get_callback_finisher,
    get_oauth_providers,
    get_transaction_store,
)
from app.core.exceptions import ServiceNotConfiguredError, StateMismatchError, ValidationError
from app.services.oauth import (
    SUPPORTED_PROVIDERS,
    CallbackFinisher,
    OAuthError,
    OAuthProvider,
    OAuthProviderInterface,
    TransactionStore,
    origin_of,
)

logger = structlog.get_logger(__name__)
router = APIRouter()

_REDIRECT_RE = re.compile(r"^https?://")

MISSING_CODE_MESSAGE = "Missing authorization code."


def _validate_redirect(redirect: Optional[str]) -> str:
    if not redirect or not _REDIRECT_RE.match(redirect):
        raise ValidationError("Invalid redirect.", field="redirect")
    try:
        origin_of(redirect)
    except ValueError:
        raise ValidationError("Invalid redirect.", field="redirect")
    return redirect


@router.get("/oauth/start")
async def oauth_start(
    provider: Optional[str] = Query(None),
    redirect: Optional[str] = Query(None),
    store: TransactionStore = Depends(get_transaction_store),
    providers: Dict[OAuthProvider, OAuthProviderInterface] = Depends(get_oauth_providers),
) -> RedirectResponse:
    """
    Start an OAuth flow.

    Args:
        provider: ``spotify`` or ``google``
        redirect: Absolute URL of the page that opened the popup

    Returns:
        Redirect to the provider's authorization page
    """
    if provider not in SUPPORTED_PROVIDERS:
        logger.warning("oauth_start_unknown_provider", provider=provider)
        raise ValidationError("Unknown provider.", field="provider")

    redirect_target = _validate_redirect(redirect)

    adapter = providers.get(OAuthProvider(provider))
    if adapter is None:
        logger.error("oauth_provider_not_configured", provider=provider)
        raise ServiceNotConfiguredError(provider, f"{provider} OAuth not configured.")

    transaction = store.create(redirect_target, provider)
    auth_url = adapter.generate_authorization_url(transaction.state)

    logger.info("oauth_flow_started", provider=provider, state=transaction.state)
    return RedirectResponse(url=auth_url, status_code=status.HTTP_302_FOUND)


@router.get("/callback/{provider}", response_class=HTMLResponse)
async def oauth_callback(
    provider: OAuthProvider,
    code: Optional[str] = Query(None),
    state: Optional[str] = Query(None),
    error: Optional[str] = Query(None),
    store: TransactionStore = Depends(get_transaction_store),
    finisher: CallbackFinisher = Depends(get_callback_finisher),
    providers: Dict[OAuthProvider, OAuthProviderInterface] = Depends(get_oauth_providers),
) -> HTMLResponse:
    """
    Handle the provider redirect and relay the result to the opener window.

    Args:
        provider: Provider the callback belongs to
        code: Authorization code
        state: State issued by /oauth/start
        error: Error reported by the provider (e.g. ``access_denied``)

    Returns:
        Relay page; the invalid-state page (400) is rendered by the
        StateMismatchError handler
    """
    name = provider.value

    # Unknown state never reaches the token endpoint
    pending = store.peek(state) if state else None
    if pending is None:
        logger.warning(
            "oauth_callback_rejected",
            provider=name,
            state=state,
        )
        raise StateMismatchError(provider=name)

    if pending.provider != name:
        # Spend the state so it cannot be retried against the right provider
        store.consume(state)
        logger.warning(
            "oauth_state_provider_mismatch",
            state=state,
            expected=pending.provider,
            actual=name,
        )
        raise StateMismatchError(provider=name)

    if error:
        logger.warning("oauth_provider_error", provider=name, error=error, state=state)
        return finisher.finish(state, error, name, is_error=True)

    if not code:
        logger.warning("oauth_callback_missing_code", provider=name, state=state)
        return finisher.finish(state, MISSING_CODE_MESSAGE, name, is_error=True)

    adapter = providers.get(provider)
    if adapter is None:
        logger.error("oauth_provider_not_configured", provider=name)
        return finisher.finish(state, f"{name} OAuth not configured.", name, is_error=True)

    try:
        tokens = await adapter.exchange_code_for_tokens(code)
    except OAuthError as e:
        logger.error(
            "oauth_token_exchange_failed",
            provider=name,
            error=e.error,
            description=e.description,
            state=state,
        )
        return finisher.finish(state, e.message, name, is_error=True)

    return finisher.finish(state, tokens.access_token, name, is_error=False)
