"""Playback orchestration: the steps behind /play and the simple controls."""

from playback_bridge.exceptions import NothingFoundException, UpstreamRequestException, VolumeValidationException
from playback_bridge.logging_config import get_logger, log_with_context
from playback_bridge.models import PlayableReference, Resolution
from playback_bridge.services import device_service
from playback_bridge.services.query_resolver import QueryResolver, is_resume_query
from playback_bridge.services.spotify_client import SpotifyClient

logger = get_logger(__name__)

RESUMED = "Resumed"
PAUSED = "Paused"
SKIPPED = "Skipped"
OWN_PLAYLIST_PLAYING = "Your playlist playing"
PLAYLIST_PLAYING = "Playlist playing"
TRACK_PLAYING = "Track playing"

MIN_VOLUME = 0
MAX_VOLUME = 100


def playing_message(reference: PlayableReference) -> str:
    if not reference.is_collection:
        return TRACK_PLAYING
    return OWN_PLAYLIST_PLAYING if reference.owned else PLAYLIST_PLAYING


ALREADY_PAUSED_REASONS = ("ALREADY_PAUSED", "UNKNOWN")


def _is_already_paused(error: UpstreamRequestException) -> bool:
    # Pausing a paused player answers 403 "Player command failed: Restriction violated"
    return (
        error.upstream_status == 403
        and error.reason in ALREADY_PAUSED_REASONS
        and "restriction violated" in error.message.casefold()
    )


class PlaybackService:
    """Sequences device priming, shuffle and play commands.

    Every operation makes sure a device is active first. /play additionally
    makes sure an access token is held and resolves the query.
    """

    def __init__(self, client: SpotifyClient, resolver: QueryResolver | None = None):
        self.client = client
        self.resolver = resolver or QueryResolver()

    async def play(self, query: str | None) -> str:
        """Play whatever the query names, or resume for a blank query.

        Returns:
            Status message for the caller.

        Raises:
            NothingFoundException: No strategy matched the query
            NoDeviceException: No device to play on
            UpstreamRequestException: A Spotify call failed
        """
        await self.client.credentials.ensure_access_token()
        device_id = await device_service.ensure_active_device(self.client)

        if is_resume_query(query):
            await self._resume(device_id)
            return RESUMED

        resolution = await self.resolver.resolve(self.client, query)
        if resolution is None:
            raise NothingFoundException(query)

        await self.set_shuffle(resolution.shuffle, device_id)
        await self._start(resolution, device_id)
        return playing_message(resolution.reference)

    async def _start(self, resolution: Resolution, device_id: str) -> None:
        reference = resolution.reference
        params = {"device_id": device_id}

        if reference.is_collection:
            await self.client.request("PUT", "/me/player/play", params=params, json={"context_uri": reference.uri})
        else:
            # Spotify needs a playback context before a bare track list is accepted
            await self.client.request("PUT", "/me/player/play", params=params)
            await self.client.request("PUT", "/me/player/play", params=params, json={"uris": [reference.uri]})

        log_with_context(
            logger,
            "info",
            "Playback started",
            uri=reference.uri,
            kind=reference.kind.value,
            shuffle=resolution.shuffle,
            device_id=device_id,
            event_type="playback_started",
        )

    async def set_shuffle(self, state: bool, device_id: str) -> None:
        await self.client.request(
            "PUT",
            "/me/player/shuffle",
            params={"state": "true" if state else "false", "device_id": device_id},
        )

    async def _resume(self, device_id: str) -> None:
        await self.client.request("PUT", "/me/player/play", params={"device_id": device_id})

    async def resume(self) -> str:
        device_id = await device_service.ensure_active_device(self.client)
        await self._resume(device_id)
        return RESUMED

    async def pause(self) -> str:
        """Pause playback. Pausing twice is not an error."""
        device_id = await device_service.ensure_active_device(self.client)
        try:
            await self.client.request("PUT", "/me/player/pause", params={"device_id": device_id})
        except UpstreamRequestException as e:
            if not _is_already_paused(e):
                raise
            log_with_context(logger, "info", "Playback already paused", device_id=device_id, event_type="pause_noop")
        return PAUSED

    async def skip(self) -> str:
        device_id = await device_service.ensure_active_device(self.client)
        await self.client.request("POST", "/me/player/next", params={"device_id": device_id})
        return SKIPPED

    async def set_volume(self, level: int | None) -> str:
        """Set the volume in percent.

        The range check runs before any Spotify call.

        Raises:
            VolumeValidationException: level missing or outside 0-100
        """
        if level is None or not MIN_VOLUME <= level <= MAX_VOLUME:
            raise VolumeValidationException(level)

        device_id = await device_service.ensure_active_device(self.client)
        await self.client.request(
            "PUT",
            "/me/player/volume",
            params={"volume_percent": level, "device_id": device_id},
        )
        return f"Volume set to {level}%"
