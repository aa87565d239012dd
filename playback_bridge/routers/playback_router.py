"""Playback control routes.

Successful calls answer with a short plain-text status so voice
assistants and shortcuts can read it out directly. Failures go through
the JSON error handlers.
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse

from playback_bridge.core.middleware import limiter
from playback_bridge.dependencies import get_playback_service
from playback_bridge.models import PlayRequest, VolumeRequest
from playback_bridge.security import verify_api_key
from playback_bridge.services.playback_service import PlaybackService

router = APIRouter(dependencies=[Depends(verify_api_key)], default_response_class=PlainTextResponse)

FAILURE_RESPONSES = {
    500: {"description": "Spotify error, missing authorization or no device available"},
}


@router.post(
    "/play",
    summary="Play from a free-text query",
    description="""
    Resolves the query in priority order and starts playback:

    1. one of your own playlists whose name matches exactly (case-insensitive)
    2. the best public playlist match
    3. the best track match (never shuffled)

    Shuffle is on unless the query contains "no shuffle". An empty query
    resumes current playback.

    **Rate Limited:** 30 requests/minute
    """,
    responses={
        200: {
            "description": "Resumed / Your playlist playing / Playlist playing / Track playing",
            "content": {"text/plain": {"example": "Playlist playing"}},
        },
        404: {"description": "Nothing found for the query"},
        **FAILURE_RESPONSES,
    },
)
@limiter.limit("30/minute")
async def play(
    request: Request,
    body: PlayRequest | None = None,
    playback: PlaybackService = Depends(get_playback_service),
):
    query = body.query if body else None
    return await playback.play(query)


@router.post("/resume", responses=FAILURE_RESPONSES)
async def resume(playback: PlaybackService = Depends(get_playback_service)):
    """Resume playback on the active (or first available) device."""
    return await playback.resume()


@router.post("/pause", responses=FAILURE_RESPONSES)
async def pause(playback: PlaybackService = Depends(get_playback_service)):
    """Pause playback. Safe to call when already paused."""
    return await playback.pause()


@router.post("/skip", responses=FAILURE_RESPONSES)
async def skip(playback: PlaybackService = Depends(get_playback_service)):
    """Skip to the next track."""
    return await playback.skip()


@router.post(
    "/volume",
    responses={
        200: {"content": {"text/plain": {"example": "Volume set to 40%"}}},
        400: {"description": "Level missing or outside 0-100"},
        **FAILURE_RESPONSES,
    },
)
async def volume(body: VolumeRequest | None = None, playback: PlaybackService = Depends(get_playback_service)):
    """Set the playback volume in percent."""
    return await playback.set_volume(body.level if body else None)
