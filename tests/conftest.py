"""Pytest configuration and shared fixtures."""

import json
import os
from dataclasses import dataclass, field
from typing import Any

import httpx
import pytest
from fastapi.testclient import TestClient

# Settings are read when the app module is imported
os.environ.setdefault("SPOTIFY_CLIENT_ID", "test-spotify-client-id")
os.environ.setdefault("SPOTIFY_CLIENT_SECRET", "test-spotify-client-secret")
os.environ.setdefault("SPOTIFY_REFRESH_TOKEN", "test-refresh-token")

from playback_bridge.config import Settings  # noqa: E402
from playback_bridge.core.middleware import limiter  # noqa: E402
from playback_bridge.main import app as fastapi_app  # noqa: E402
from playback_bridge.services.spotify_client import SpotifyClient  # noqa: E402
from playback_bridge.state_managers import CredentialStore  # noqa: E402


@dataclass
class Call:
    """One request seen by the fake Spotify API."""

    method: str
    host: str
    path: str
    params: dict[str, str]
    body: Any
    token: str | None


@dataclass
class FakeSpotify:
    """In-memory stand-in for accounts.spotify.com and api.spotify.com.

    Tokens issued by the token endpoint are ``access-1``, ``access-2``...
    Tokens listed in ``expired_tokens`` get a 401 from the API. Responses
    queued in ``queued`` for a (method, path) are served before the default
    behaviour.
    """

    devices: list[dict] = field(default_factory=lambda: [{"id": "device-1", "name": "Kitchen", "is_active": True}])
    owned_playlists: list[dict] = field(default_factory=list)
    playlist_results: list[dict | None] = field(default_factory=list)
    track_results: list[dict] = field(default_factory=list)
    expired_tokens: set[str] = field(default_factory=set)
    token_status: int = 200
    rotate_refresh_token: str | None = None
    queued: dict[tuple[str, str], list[httpx.Response]] = field(default_factory=dict)
    calls: list[Call] = field(default_factory=list)
    tokens_issued: int = 0

    def handler(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content) if request.content and request.url.host == "api.spotify.com" else None
        auth = request.headers.get("Authorization", "")
        token = auth.removeprefix("Bearer ") if auth.startswith("Bearer ") else None
        call = Call(request.method, request.url.host, request.url.path, dict(request.url.params), body, token)
        self.calls.append(call)

        if request.url.host == "accounts.spotify.com":
            return self._token(request)

        queued = self.queued.get((request.method, call.path))
        if queued:
            return queued.pop(0)

        if token in self.expired_tokens:
            return httpx.Response(401, json={"error": {"status": 401, "message": "The access token expired"}})

        return self._api(call)

    def _token(self, request: httpx.Request) -> httpx.Response:
        if self.token_status != 200:
            return httpx.Response(
                self.token_status,
                json={"error": "invalid_grant", "error_description": "Invalid refresh token"},
            )
        self.tokens_issued += 1
        payload = {"access_token": f"access-{self.tokens_issued}", "token_type": "Bearer", "expires_in": 3600}
        if self.rotate_refresh_token:
            payload["refresh_token"] = self.rotate_refresh_token
        return httpx.Response(200, json=payload)

    def _api(self, call: Call) -> httpx.Response:
        route = (call.method, call.path.removeprefix("/v1"))
        if route == ("GET", "/me/player/devices"):
            return httpx.Response(200, json={"devices": self.devices})
        if route == ("PUT", "/me/player"):
            for device in self.devices:
                device["is_active"] = device["id"] in call.body["device_ids"]
            return httpx.Response(204)
        if route == ("GET", "/me/playlists"):
            return httpx.Response(200, json={"items": self.owned_playlists, "total": len(self.owned_playlists)})
        if route == ("GET", "/search"):
            kind = call.params["type"]
            items = self.playlist_results if kind == "playlist" else self.track_results
            return httpx.Response(200, json={f"{kind}s": {"items": items}})
        if call.method in ("PUT", "POST") and call.path.startswith("/v1/me/player/"):
            return httpx.Response(204)
        return httpx.Response(404, json={"error": {"status": 404, "message": "Service not found"}})

    # Helpers for assertions

    @property
    def token_calls(self) -> list[Call]:
        return [c for c in self.calls if c.host == "accounts.spotify.com"]

    @property
    def api_calls(self) -> list[Call]:
        return [c for c in self.calls if c.host == "api.spotify.com"]

    def routes(self) -> list[tuple[str, str]]:
        """(method, path) of every API call, with the /v1 prefix dropped."""
        return [(c.method, c.path.removeprefix("/v1")) for c in self.api_calls]

    def calls_to(self, method: str, path: str) -> list[Call]:
        return [c for c in self.api_calls if c.method == method and c.path == f"/v1{path}"]


@pytest.fixture(autouse=True)
def disable_rate_limiting():
    """Keep slowapi's in-memory counters from leaking across tests."""
    limiter.enabled = False
    yield
    limiter.enabled = True


@pytest.fixture
def fake_spotify():
    return FakeSpotify()


@pytest.fixture
def mock_settings():
    """Settings instance with test values."""
    return Settings(
        api_host="127.0.0.1",
        api_port=3000,
        spotify_client_id="test-spotify-client-id",
        spotify_client_secret="test-spotify-client-secret",
        spotify_refresh_token="test-refresh-token",
    )


@pytest.fixture
def http_client(fake_spotify):
    """Real httpx.AsyncClient wired to the fake Spotify API."""
    return httpx.AsyncClient(transport=httpx.MockTransport(fake_spotify.handler))


@pytest.fixture
def credential_store(http_client, mock_settings):
    return CredentialStore(http_client, mock_settings, mock_settings.spotify_refresh_token)


@pytest.fixture
def spotify_client(http_client, credential_store, mock_settings):
    return SpotifyClient(http_client, credential_store, mock_settings.spotify_api_url)


@pytest.fixture
def test_client(fake_spotify):
    """FastAPI test client whose upstream calls hit the fake Spotify API."""
    fastapi_app.state.http_transport = httpx.MockTransport(fake_spotify.handler)
    with TestClient(fastapi_app) as client:
        yield client
    del fastapi_app.state.http_transport
    fastapi_app.dependency_overrides.clear()
