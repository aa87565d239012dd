"""Unit tests for query resolution."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from playback_bridge.models import PlayableReference, ReferenceKind
from playback_bridge.services.query_resolver import (
    OwnedPlaylistStrategy,
    PublicPlaylistStrategy,
    QueryResolver,
    TrackSearchStrategy,
    is_resume_query,
    wants_shuffle,
)

LOFI = {"name": "Lofi Beats", "uri": "spotify:playlist:lofi"}
QUEEN = {"name": "Bohemian Rhapsody", "uri": "spotify:track:queen"}


@pytest.fixture
def resolver():
    return QueryResolver()


@pytest.mark.parametrize("query", [None, "", "   ", "\t\n"])
def test_blank_queries_are_resume(query):
    assert is_resume_query(query)


@pytest.mark.parametrize(
    ("query", "expected"),
    [
        ("lofi beats", True),
        ("no shuffle lofi beats", False),
        ("Jazz NO SHUFFLE please", False),
        ("noshuffle jazz", True),
    ],
)
def test_wants_shuffle(query, expected):
    assert wants_shuffle(query) is expected


@pytest.mark.asyncio
@pytest.mark.parametrize("query", ["", "   ", None])
async def test_blank_query_never_searches(resolver, spotify_client, fake_spotify, query):
    assert await resolver.resolve(spotify_client, query) is None
    assert fake_spotify.api_calls == []


@pytest.mark.asyncio
async def test_owned_playlist_exact_match_short_circuits(resolver, spotify_client, fake_spotify):
    fake_spotify.owned_playlists = [
        {"name": "Road Trip", "uri": "spotify:playlist:road"},
        {"name": "Morning Coffee", "uri": "spotify:playlist:coffee"},
    ]
    fake_spotify.playlist_results = [LOFI]
    fake_spotify.track_results = [QUEEN]

    resolution = await resolver.resolve(spotify_client, "  morning COFFEE ")

    assert resolution.reference.uri == "spotify:playlist:coffee"
    assert resolution.reference.owned is True
    assert resolution.reference.kind is ReferenceKind.COLLECTION
    assert resolution.shuffle is True
    assert fake_spotify.routes() == [("GET", "/me/playlists")]
    assert fake_spotify.api_calls[0].params == {"limit": "50"}


@pytest.mark.asyncio
async def test_owned_playlist_requires_full_name(resolver, spotify_client, fake_spotify):
    fake_spotify.owned_playlists = [{"name": "Morning Coffee Jazz", "uri": "spotify:playlist:coffee"}]

    resolution = await resolver.resolve(spotify_client, "morning coffee")

    assert resolution is None
    assert ("GET", "/search") in fake_spotify.routes()


@pytest.mark.asyncio
async def test_owned_playlist_no_shuffle_phrase(resolver, spotify_client, fake_spotify):
    fake_spotify.owned_playlists = [{"name": "No Shuffle Classics", "uri": "spotify:playlist:classics"}]

    resolution = await resolver.resolve(spotify_client, "no shuffle classics")

    assert resolution.reference.uri == "spotify:playlist:classics"
    assert resolution.shuffle is False


@pytest.mark.asyncio
@pytest.mark.parametrize(("query", "shuffle"), [("lofi beats", True), ("no shuffle lofi beats", False)])
async def test_public_playlist_match(resolver, spotify_client, fake_spotify, query, shuffle):
    fake_spotify.playlist_results = [LOFI, {"name": "Other", "uri": "spotify:playlist:other"}]
    fake_spotify.track_results = [QUEEN]

    resolution = await resolver.resolve(spotify_client, query)

    assert resolution.reference.uri == "spotify:playlist:lofi"
    assert resolution.reference.owned is False
    assert resolution.shuffle is shuffle
    assert fake_spotify.routes() == [("GET", "/me/playlists"), ("GET", "/search")]
    search = fake_spotify.api_calls[1]
    assert search.params == {"q": query, "type": "playlist", "limit": "5"}


@pytest.mark.asyncio
async def test_public_playlist_skips_null_results(resolver, spotify_client, fake_spotify):
    fake_spotify.playlist_results = [None, LOFI]

    resolution = await resolver.resolve(spotify_client, "lofi")

    assert resolution.reference.uri == "spotify:playlist:lofi"


@pytest.mark.asyncio
async def test_track_match_forces_shuffle_off(resolver, spotify_client, fake_spotify):
    fake_spotify.track_results = [QUEEN]

    resolution = await resolver.resolve(spotify_client, "Bohemian Rhapsody")

    assert resolution.reference.kind is ReferenceKind.TRACK
    assert resolution.reference.uri == "spotify:track:queen"
    assert resolution.shuffle is False
    assert fake_spotify.api_calls[-1].params["type"] == "track"


@pytest.mark.asyncio
async def test_nothing_found(resolver, spotify_client, fake_spotify):
    assert await resolver.resolve(spotify_client, "zzzz") is None
    assert len(fake_spotify.api_calls) == 3


@pytest.mark.asyncio
async def test_strategies_short_circuit_in_order():
    """Later strategies are never called once one matches."""
    hit = PlayableReference(kind=ReferenceKind.COLLECTION, uri="spotify:playlist:x")
    first = MagicMock(forces_shuffle_off=False, resolve=AsyncMock(return_value=None))
    first.name = "first"
    second = MagicMock(forces_shuffle_off=False, resolve=AsyncMock(return_value=hit))
    second.name = "second"
    third = MagicMock(forces_shuffle_off=False, resolve=AsyncMock(return_value=hit))
    third.name = "third"
    client = MagicMock()

    resolution = await QueryResolver([first, second, third]).resolve(client, "anything")

    assert resolution.reference is hit
    first.resolve.assert_awaited_once_with(client, "anything")
    second.resolve.assert_awaited_once()
    third.resolve.assert_not_called()


def test_default_strategy_order():
    assert [type(s) for s in QueryResolver().strategies] == [
        OwnedPlaylistStrategy,
        PublicPlaylistStrategy,
        TrackSearchStrategy,
    ]
