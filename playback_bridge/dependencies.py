"""FastAPI dependencies for dependency injection."""

import httpx
from fastapi import Depends, Request

from playback_bridge.config import Settings, get_settings
from playback_bridge.services.playback_service import PlaybackService
from playback_bridge.services.spotify_client import SpotifyClient
from playback_bridge.state_managers import CredentialStore


async def get_http_client(request: Request) -> httpx.AsyncClient:
    """
    Get the shared HTTP client from app state.

    Raises:
        RuntimeError: If HTTP client is not initialized.
    """
    client: httpx.AsyncClient | None = getattr(request.app.state, "http_client", None)

    if client is None:
        raise RuntimeError("HTTP client not initialized. This should never happen.")

    return client


async def get_credential_store(request: Request) -> CredentialStore:
    """
    Get the credential store from app state.

    Raises:
        RuntimeError: If the credential store is not initialized.
    """
    store: CredentialStore | None = getattr(request.app.state, "credential_store", None)

    if store is None:
        raise RuntimeError("Credential store not initialized.")

    return store


async def get_spotify_client(
    client: httpx.AsyncClient = Depends(get_http_client),
    credentials: CredentialStore = Depends(get_credential_store),
    settings: Settings = Depends(get_settings),
) -> SpotifyClient:
    """Build a Spotify API client over the shared HTTP client and credentials."""
    return SpotifyClient(client, credentials, settings.spotify_api_url)


async def get_playback_service(client: SpotifyClient = Depends(get_spotify_client)) -> PlaybackService:
    return PlaybackService(client)
