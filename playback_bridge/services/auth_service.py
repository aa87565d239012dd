"""Spotify OAuth authorization-code flow helpers."""

from urllib.parse import urlencode

import httpx

from playback_bridge.config import Settings
from playback_bridge.exceptions import UpstreamAuthException
from playback_bridge.logging_config import get_console_logger, get_logger, log_with_context
from playback_bridge.middleware.logging_middleware import mask_secret
from playback_bridge.state_managers import CredentialStore, token_error_detail

logger = get_logger(__name__)
console_logger = get_console_logger()

# Spotify OAuth scopes needed for playback control and playlist lookup
SPOTIFY_SCOPES = [
    "user-modify-playback-state",
    "user-read-playback-state",
    "user-read-currently-playing",
    "playlist-read-private",
    "playlist-read-collaborative",
]


def build_authorize_url(settings: Settings, state: str) -> str:
    """Build the Spotify authorization URL the user is redirected to."""
    params = {
        "client_id": settings.spotify_client_id,
        "response_type": "code",
        "redirect_uri": settings.spotify_redirect_uri,
        "state": state,
        "scope": " ".join(SPOTIFY_SCOPES),
    }
    return f"{settings.spotify_authorize_url}?{urlencode(params)}"


async def exchange_code(
    client: httpx.AsyncClient,
    credentials: CredentialStore,
    settings: Settings,
    code: str,
) -> None:
    """Exchange an authorization code for tokens and store them.

    Raises:
        UpstreamAuthException: The token endpoint rejected the code or was unreachable
    """
    try:
        response = await client.post(
            settings.spotify_token_url,
            auth=(settings.spotify_client_id, settings.spotify_client_secret),
            data={
                "grant_type": "authorization_code",
                "code": code,
                "redirect_uri": settings.spotify_redirect_uri,
            },
        )
    except httpx.HTTPError as e:
        raise UpstreamAuthException(f"Token exchange failed: {e}") from e

    if response.is_error:
        detail = token_error_detail(response)
        log_with_context(
            logger,
            "error",
            "Authorization code exchange rejected",
            status_code=response.status_code,
            event_type="oauth_exchange_rejected",
            **detail,
        )
        raise UpstreamAuthException("Token exchange failed", details=detail)

    data = response.json()
    if not data.get("access_token"):
        raise UpstreamAuthException("Token exchange returned no access token")

    refresh_token = data.get("refresh_token")
    await credentials.set_tokens(data["access_token"], refresh_token)

    log_with_context(
        logger,
        "info",
        "Spotify connected",
        refresh_token=mask_secret(refresh_token),
        event_type="oauth_connected",
    )
    if refresh_token:
        # Shown once on the console so deployments can seed SPOTIFY_REFRESH_TOKEN and skip /login
        console_logger.info("Set SPOTIFY_REFRESH_TOKEN=%s to skip /login on restart", refresh_token)
