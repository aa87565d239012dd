"""Playback Bridge models"""

from playback_bridge.models.base_models import DetailedHealthResponse, HealthResponse
from playback_bridge.models.playback import (
    Device,
    PlayableReference,
    PlayRequest,
    ReferenceKind,
    Resolution,
    VolumeRequest,
)

__all__ = [
    "DetailedHealthResponse",
    "HealthResponse",
    "Device",
    "PlayableReference",
    "PlayRequest",
    "ReferenceKind",
    "Resolution",
    "VolumeRequest",
]
