"""Health endpoints."""

import time
from datetime import UTC, datetime

import httpx
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from playback_bridge import __version__
from playback_bridge.dependencies import get_credential_store, get_http_client
from playback_bridge.models import DetailedHealthResponse, HealthResponse
from playback_bridge.state_managers import CredentialStore

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Basic health check endpoint.

    For dependency status, use `/health/ready`.
    """
    return HealthResponse(status="ok", version=__version__)


@router.get("/health/ready", response_model=DetailedHealthResponse)
async def readiness_check(
    request: Request,
    client: httpx.AsyncClient = Depends(get_http_client),
    credentials: CredentialStore = Depends(get_credential_store),
):
    """Readiness probe - can the bridge issue playback commands?

    Ready means the HTTP client is up and a refresh token is held (seeded
    from SPOTIFY_REFRESH_TOKEN or obtained through /login). No Spotify call
    is made.

    **Returns:**
    - 200: ready
    - 503: not authorized yet
    """
    checks = {
        "http_client": "ok" if not client.is_closed else "closed",
        "spotify_auth": "ok" if credentials.is_authenticated() else "not_authenticated",
        "access_token": "held" if credentials.access_token else "none",
        "token_refreshes": str(credentials.refresh_count),
        "uptime_seconds": str(int(time.time() - getattr(request.app.state, "startup_time", time.time()))),
        "requests": str(getattr(request.app.state, "request_count", 0)),
    }
    all_healthy = checks["http_client"] == "ok" and checks["spotify_auth"] == "ok"

    return JSONResponse(
        status_code=200 if all_healthy else 503,
        content=DetailedHealthResponse(
            status="healthy" if all_healthy else "unhealthy",
            version=__version__,
            timestamp=datetime.now(UTC),
            checks=checks,
        ).model_dump(mode="json"),
    )
