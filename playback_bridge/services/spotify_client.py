"""Authenticated Spotify Web API client."""

import functools
from collections.abc import Awaitable, Callable
from typing import Any

import httpx

from playback_bridge.exceptions import UpstreamRequestException
from playback_bridge.logging_config import get_logger, log_with_context
from playback_bridge.state_managers import CredentialStore

logger = get_logger(__name__)

SendFunc = Callable[..., Awaitable[httpx.Response]]


def is_auth_failure(response: httpx.Response) -> bool:
    """Spotify signals an expired or revoked access token with 401."""
    return response.status_code == 401


def retry_on_auth_failure(predicate: Callable[[httpx.Response], bool] = is_auth_failure):
    """Retry a send exactly once after refreshing the access token.

    The wrapped coroutine receives the bearer token as its first argument
    after ``self``. If its response matches ``predicate`` the credential
    store is refreshed once and the identical call is repeated once. The
    second response is returned as-is, whatever it is.
    """

    def decorator(send: SendFunc) -> SendFunc:
        @functools.wraps(send)
        async def wrapper(self: "SpotifyClient", *args: Any, **kwargs: Any) -> httpx.Response:
            token = await self.credentials.get_access_token()
            response = await send(self, token, *args, **kwargs)
            if not predicate(response):
                return response

            log_with_context(
                logger,
                "info",
                "Access token rejected, refreshing and retrying once",
                status_code=response.status_code,
                path=response.request.url.path,
                event_type="auth_retry",
            )
            token = await self.credentials.refresh(stale_token=token)
            return await send(self, token, *args, **kwargs)

        return wrapper

    return decorator


def error_detail(response: httpx.Response) -> tuple[str, str | None]:
    """Extract Spotify's error message and reason from a failed response.

    Spotify answers ``{"error": {"status": 403, "message": "...", "reason": "..."}}``.
    """
    try:
        data = response.json()
    except ValueError:
        return response.text[:200] or response.reason_phrase, None

    error = data.get("error") if isinstance(data, dict) else None
    if isinstance(error, dict):
        return str(error.get("message") or response.reason_phrase), error.get("reason")
    if isinstance(error, str):
        return data.get("error_description") or error, None
    return response.reason_phrase, None


class SpotifyClient:
    """Thin wrapper over the shared httpx client for api.spotify.com.

    Every call carries the current bearer token and is retried once on 401
    after a token refresh. Any other error status raises
    UpstreamRequestException.
    """

    def __init__(self, http_client: httpx.AsyncClient, credentials: CredentialStore, base_url: str):
        self.http_client = http_client
        self.credentials = credentials
        self.base_url = base_url.rstrip("/")

    @retry_on_auth_failure()
    async def _send(
        self,
        token: str | None,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json: Any = None,
    ) -> httpx.Response:
        try:
            return await self.http_client.request(
                method,
                f"{self.base_url}{path}",
                params=params,
                json=json,
                headers={"Authorization": f"Bearer {token}"} if token else None,
            )
        except httpx.HTTPError as e:
            log_with_context(
                logger,
                "error",
                "Spotify API unreachable",
                method=method,
                path=path,
                error=str(e),
                error_type=type(e).__name__,
                event_type="upstream_transport_error",
            )
            raise UpstreamRequestException(f"Spotify API unreachable: {e}") from e

    async def request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json: Any = None,
    ) -> httpx.Response:
        """Issue an authenticated request.

        Args:
            method: HTTP method
            path: Path below the API base URL, e.g. "/me/player/play"
            params: Query parameters (None values are dropped)
            json: JSON body

        Returns:
            The successful response.

        Raises:
            UpstreamRequestException: Non-2xx response, including a second 401
        """
        if params:
            params = {key: value for key, value in params.items() if value is not None}

        response = await self._send(method, path, params=params or None, json=json)
        if response.is_error:
            message, reason = error_detail(response)
            log_with_context(
                logger,
                "error",
                "Spotify API error",
                method=method,
                path=path,
                status_code=response.status_code,
                upstream_message=message,
                reason=reason,
                event_type="upstream_error",
            )
            raise UpstreamRequestException(
                f"Spotify API error: {message}",
                upstream_status=response.status_code,
                reason=reason,
            )
        return response

    async def get_json(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        """GET a path and decode the body; empty responses decode to {}."""
        response = await self.request("GET", path, params=params)
        if response.status_code == 204 or not response.content:
            return {}
        return response.json()
