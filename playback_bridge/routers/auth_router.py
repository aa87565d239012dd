"""Spotify OAuth routes: /login redirects to Spotify, /callback stores tokens."""

import secrets
import time

import httpx
from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse, RedirectResponse

from playback_bridge.config import Settings, get_settings
from playback_bridge.dependencies import get_credential_store, get_http_client
from playback_bridge.exceptions import OAuthCallbackException
from playback_bridge.services import auth_service
from playback_bridge.state_managers import CredentialStore

router = APIRouter()

# OAuth state storage with TTL cleanup.
# States expire after 10 minutes so abandoned auth flows don't pile up.
_oauth_states: dict[str, float] = {}  # state -> timestamp
OAUTH_STATE_TTL_SECONDS = 600


def _cleanup_expired_oauth_states() -> None:
    """Remove expired OAuth states."""
    current_time = time.time()
    expired_states = [
        state for state, timestamp in _oauth_states.items() if current_time - timestamp > OAUTH_STATE_TTL_SECONDS
    ]
    for state in expired_states:
        _oauth_states.pop(state, None)


@router.get("/login")
async def login(settings: Settings = Depends(get_settings)):
    """Initiate the Spotify OAuth flow."""
    _cleanup_expired_oauth_states()

    # Random state for CSRF protection
    state = secrets.token_urlsafe(32)
    _oauth_states[state] = time.time()

    return RedirectResponse(url=auth_service.build_authorize_url(settings, state), status_code=302)


@router.get("/callback", response_class=PlainTextResponse)
async def callback(
    code: str | None = None,
    state: str | None = None,
    error: str | None = None,
    client: httpx.AsyncClient = Depends(get_http_client),
    credentials: CredentialStore = Depends(get_credential_store),
    settings: Settings = Depends(get_settings),
):
    """Handle the Spotify OAuth callback."""
    if error:
        raise OAuthCallbackException(f"Spotify authorization failed: {error}")

    if not state or _oauth_states.pop(state, None) is None:
        raise OAuthCallbackException("Invalid state parameter")

    if not code:
        raise OAuthCallbackException("No authorization code received")

    await auth_service.exchange_code(client, credentials, settings, code)
    return "Spotify connected"
