"""Spotify Connect device discovery and activation."""

from playback_bridge.exceptions import NoDeviceException
from playback_bridge.logging_config import get_logger, log_with_context
from playback_bridge.models import Device
from playback_bridge.services.spotify_client import SpotifyClient

logger = get_logger(__name__)


async def list_devices(client: SpotifyClient) -> list[Device]:
    """List the user's available devices.

    Devices without an id (restricted sessions) cannot be targeted and are
    skipped.
    """
    data = await client.get_json("/me/player/devices")
    return [Device.model_validate(device) for device in data.get("devices") or [] if device.get("id")]


async def transfer_playback(client: SpotifyClient, device_id: str, play: bool = False) -> None:
    """Make a device the active one without starting playback by default."""
    await client.request("PUT", "/me/player", json={"device_ids": [device_id], "play": play})


async def ensure_active_device(client: SpotifyClient) -> str:
    """Return the id of a device ready to take playback commands.

    An already active device wins. Otherwise the first listed device is
    activated with a non-playing transfer. Spotify's device order carries no
    meaning, but first is a stable default.

    Raises:
        NoDeviceException: No device is available at all
    """
    devices = await list_devices(client)
    if not devices:
        log_with_context(logger, "warning", "No Spotify devices available", event_type="no_device")
        raise NoDeviceException()

    for device in devices:
        if device.is_active:
            return device.id

    target = devices[0]
    log_with_context(
        logger,
        "info",
        "No active device, transferring playback",
        device_id=target.id,
        device_name=target.name,
        event_type="device_transfer",
    )
    await transfer_playback(client, target.id)
    return target.id
