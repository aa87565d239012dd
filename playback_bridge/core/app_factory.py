"""Application factory for creating and configuring the FastAPI app."""

from fastapi import FastAPI

from playback_bridge import __version__
from playback_bridge.config import get_settings
from playback_bridge.core.lifespan import lifespan
from playback_bridge.core.middleware import setup_middleware
from playback_bridge.middleware.error_handlers import register_error_handlers
from playback_bridge.routers import auth_router, health_router, playback_router


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    settings = get_settings()

    app = FastAPI(
        title="Playback Bridge API",
        description="""
        Control Spotify playback with plain-language requests.

        ## Spotify Setup
        1. Visit /login in your browser and approve access
        2. Spotify redirects back to /callback and the bridge is connected
        3. Optionally copy the logged refresh token into SPOTIFY_REFRESH_TOKEN
           so restarts don't need step 1

        ## Playback
        - `POST /play` with `{"query": "lofi beats"}` (add "no shuffle" to keep order)
        - `POST /resume`, `/pause`, `/skip`
        - `POST /volume` with `{"level": 40}`

        ## Authentication
        When BRIDGE_API_KEY is set, playback routes need `Authorization: Bearer <key>`.
        """,
        version=__version__,
        lifespan=lifespan,
        license_info={
            "name": "MIT",
        },
    )
    app.state.request_count = 0

    setup_middleware(app, settings)
    register_error_handlers(app)

    app.include_router(health_router.router, tags=["health"])
    app.include_router(auth_router.router, tags=["auth"])
    app.include_router(playback_router.router, tags=["playback"])

    return app
