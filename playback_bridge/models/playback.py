"""Pydantic models for playback requests and resolution results."""

from enum import Enum

from pydantic import BaseModel, Field


class PlayRequest(BaseModel):
    """Body of POST /play."""

    query: str | None = Field(default=None, description="Free text, e.g. 'lofi beats' or 'no shuffle jazz'")


class VolumeRequest(BaseModel):
    """Body of POST /volume. Range is checked by the playback service."""

    level: int | None = Field(default=None, description="Volume percent, 0-100")


class Device(BaseModel):
    """Snapshot of a Spotify Connect device."""

    id: str
    is_active: bool = False
    name: str | None = None
    type: str | None = None
    volume_percent: int | None = None


class ReferenceKind(str, Enum):
    TRACK = "track"
    COLLECTION = "collection"


class PlayableReference(BaseModel):
    """Something the play endpoint can start: a track or a playlist."""

    kind: ReferenceKind
    uri: str
    name: str | None = None
    owned: bool = False

    @property
    def is_collection(self) -> bool:
        return self.kind is ReferenceKind.COLLECTION


class Resolution(BaseModel):
    """Outcome of resolving a query: what to play and whether to shuffle."""

    reference: PlayableReference
    shuffle: bool
