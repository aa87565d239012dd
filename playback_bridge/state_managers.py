"""State managers for handling application-wide mutable state.

Mutable state is guarded with asyncio.Lock. All state managers inherit
from the StateManager ABC so the lifespan can initialize and clean them up.
"""

import asyncio
from abc import ABC, abstractmethod

import httpx

from playback_bridge.config import Settings
from playback_bridge.exceptions import CredentialMissingException, UpstreamAuthException, UpstreamRequestException
from playback_bridge.logging_config import get_logger, log_with_context

logger = get_logger(__name__)


class StateManager(ABC):
    """Base class for all state managers.

    State managers provide lock-guarded access to mutable application state.
    All subclasses must implement lifecycle methods.
    """

    @abstractmethod
    async def initialize(self) -> None:
        """Initialize the state manager (called during app startup)."""
        pass

    @abstractmethod
    async def cleanup(self) -> None:
        """Cleanup resources (called during app shutdown)."""
        pass


def token_error_detail(response: httpx.Response) -> dict[str, str]:
    """Pull the OAuth error fields out of a token endpoint response."""
    try:
        data = response.json()
    except ValueError:
        return {"error": response.text[:200]}
    if not isinstance(data, dict):
        return {"error": str(data)[:200]}
    return {
        "error": str(data.get("error", "")),
        "error_description": str(data.get("error_description", "")),
    }


class CredentialStore(StateManager):
    """Holds the Spotify access and refresh tokens.

    The access token has no expiry tracking. It is assumed valid until the
    API answers 401, at which point the caller asks for a refresh.

    Refreshes are single-flight: concurrent callers that saw the same token
    fail wait on one lock, and only the first performs the exchange.
    """

    def __init__(self, client: httpx.AsyncClient, settings: Settings, refresh_token: str | None = None):
        """Initialize the credential store.

        Args:
            client: Shared HTTP client used for the token endpoint
            settings: Settings with client id/secret and token URL
            refresh_token: Optional pre-seeded refresh token
        """
        self._client = client
        self._settings = settings
        self._access_token: str | None = None
        self._refresh_token: str | None = refresh_token or None
        self._lock = asyncio.Lock()
        self.refresh_count = 0

    async def initialize(self) -> None:
        log_with_context(
            logger,
            "info",
            "Credential store initialized",
            has_refresh_token=self._refresh_token is not None,
            event_type="credential_store_ready",
        )

    async def cleanup(self) -> None:
        async with self._lock:
            self._access_token = None

    @property
    def access_token(self) -> str | None:
        return self._access_token

    def is_authenticated(self) -> bool:
        """Check if a refresh token is available."""
        return self._refresh_token is not None

    async def set_tokens(self, access_token: str | None, refresh_token: str | None = None) -> None:
        """Store tokens obtained from the authorization callback.

        The existing refresh token is kept when the provider omits one.
        """
        async with self._lock:
            self._access_token = access_token
            if refresh_token:
                self._refresh_token = refresh_token

    async def ensure_access_token(self) -> None:
        """Refresh only if no access token is held but a refresh token is."""
        if self._access_token is None and self._refresh_token is not None:
            async with self._lock:
                if self._access_token is None:
                    await self._exchange_refresh_token()

    async def get_access_token(self) -> str | None:
        """Return the current access token, obtaining one first if needed."""
        await self.ensure_access_token()
        return self._access_token

    async def refresh(self, stale_token: str | None = None) -> str:
        """Exchange the refresh token for a new access token.

        Args:
            stale_token: The access token the caller saw rejected. If another
                task already replaced it, that newer token is returned
                without a second exchange.

        Returns:
            The new access token.

        Raises:
            CredentialMissingException: No refresh token is held
            UpstreamAuthException: The token endpoint rejected the exchange
            UpstreamRequestException: The token endpoint could not be reached
        """
        async with self._lock:
            if stale_token is not None and self._access_token not in (None, stale_token):
                return self._access_token
            return await self._exchange_refresh_token()

    async def _exchange_refresh_token(self) -> str:
        """Call the token endpoint. Caller must hold the lock."""
        if self._refresh_token is None:
            raise CredentialMissingException()

        try:
            response = await self._client.post(
                self._settings.spotify_token_url,
                auth=(self._settings.spotify_client_id, self._settings.spotify_client_secret),
                data={"grant_type": "refresh_token", "refresh_token": self._refresh_token},
            )
        except httpx.HTTPError as e:
            log_with_context(
                logger,
                "error",
                "Token endpoint unreachable",
                error=str(e),
                error_type=type(e).__name__,
                event_type="token_refresh_failed",
            )
            raise UpstreamRequestException(f"Spotify token endpoint unreachable: {e}") from e

        if response.is_error:
            detail = token_error_detail(response)
            log_with_context(
                logger,
                "error",
                "Token refresh rejected",
                status_code=response.status_code,
                event_type="token_refresh_rejected",
                **detail,
            )
            raise UpstreamAuthException("Spotify token refresh failed", details=detail)

        data = response.json()
        access_token = data.get("access_token")
        if not access_token:
            raise UpstreamAuthException("Spotify token refresh returned no access token")

        self._access_token = access_token
        # Spotify may rotate the refresh token
        if data.get("refresh_token"):
            self._refresh_token = data["refresh_token"]
        self.refresh_count += 1

        log_with_context(
            logger,
            "info",
            "Access token refreshed",
            rotated=bool(data.get("refresh_token")),
            event_type="token_refreshed",
        )
        return access_token
