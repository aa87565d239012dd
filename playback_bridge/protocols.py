"""Protocol definitions for dependency injection."""

from typing import TYPE_CHECKING, Protocol

from playback_bridge.models import PlayableReference

if TYPE_CHECKING:
    from playback_bridge.services.spotify_client import SpotifyClient


class ResolverStrategy(Protocol):
    """One step of query resolution.

    Strategies are tried in order by QueryResolver; the first one returning
    a reference wins and the rest are never called.
    """

    name: str
    forces_shuffle_off: bool

    async def resolve(self, client: "SpotifyClient", query: str) -> PlayableReference | None:
        """Look for something playable matching the query.

        Args:
            client: Authenticated Spotify client
            query: Raw query text (never blank)

        Returns:
            A reference, or None to fall through to the next strategy
        """
        ...
