"""Turn free-text queries into something playable.

Resolution tries a fixed list of strategies in priority order and stops at
the first hit:

1. the user's own playlists, exact name match (case-insensitive)
2. public playlists, first search result
3. tracks, first search result

Matching is deliberately plain: case folding and equality, no tokenizing
or ranking beyond what Spotify's search already does.
"""

from collections.abc import Sequence

from playback_bridge.logging_config import get_logger, log_with_context
from playback_bridge.models import PlayableReference, ReferenceKind, Resolution
from playback_bridge.protocols import ResolverStrategy
from playback_bridge.services.spotify_client import SpotifyClient

logger = get_logger(__name__)

NO_SHUFFLE_PHRASE = "no shuffle"
OWNED_PLAYLIST_LIMIT = 50
SEARCH_LIMIT = 5


def is_resume_query(query: str | None) -> bool:
    """Blank queries mean "resume whatever was playing"."""
    return query is None or not query.strip()


def wants_shuffle(query: str) -> bool:
    return NO_SHUFFLE_PHRASE not in query.casefold()


def _first_item(items: list | None) -> dict | None:
    # Playlist search results can contain nulls
    for item in items or []:
        if item and item.get("uri"):
            return item
    return None


class OwnedPlaylistStrategy:
    """Exact (case-insensitive) name match against the user's playlists.

    Only the first page of playlists is checked.
    """

    name = "owned_playlist"
    forces_shuffle_off = False

    async def resolve(self, client: SpotifyClient, query: str) -> PlayableReference | None:
        wanted = query.strip().casefold()
        data = await client.get_json("/me/playlists", params={"limit": OWNED_PLAYLIST_LIMIT})
        for playlist in data.get("items") or []:
            if not playlist or not playlist.get("uri"):
                continue
            if (playlist.get("name") or "").strip().casefold() == wanted:
                return PlayableReference(
                    kind=ReferenceKind.COLLECTION,
                    uri=playlist["uri"],
                    name=playlist.get("name"),
                    owned=True,
                )
        return None


class SearchStrategy:
    """First result of a Spotify search for one item type."""

    name = "search"
    search_type = "track"
    kind = ReferenceKind.TRACK
    forces_shuffle_off = False

    async def resolve(self, client: SpotifyClient, query: str) -> PlayableReference | None:
        data = await client.get_json(
            "/search",
            params={"q": query, "type": self.search_type, "limit": SEARCH_LIMIT},
        )
        item = _first_item((data.get(f"{self.search_type}s") or {}).get("items"))
        if item is None:
            return None
        return PlayableReference(kind=self.kind, uri=item["uri"], name=item.get("name"))


class PublicPlaylistStrategy(SearchStrategy):
    name = "public_playlist"
    search_type = "playlist"
    kind = ReferenceKind.COLLECTION


class TrackSearchStrategy(SearchStrategy):
    """Single tracks never shuffle."""

    name = "track"
    search_type = "track"
    kind = ReferenceKind.TRACK
    forces_shuffle_off = True


DEFAULT_STRATEGIES: tuple[ResolverStrategy, ...] = (
    OwnedPlaylistStrategy(),
    PublicPlaylistStrategy(),
    TrackSearchStrategy(),
)


class QueryResolver:
    """Runs strategies in order until one returns a reference."""

    def __init__(self, strategies: Sequence[ResolverStrategy] = DEFAULT_STRATEGIES):
        self.strategies = tuple(strategies)

    async def resolve(self, client: SpotifyClient, query: str | None) -> Resolution | None:
        """Resolve a query.

        Args:
            client: Authenticated Spotify client
            query: Free text from the caller

        Returns:
            The resolution, or None for a blank query or when nothing matched.
            Blank queries never trigger a search.
        """
        if is_resume_query(query):
            return None

        for strategy in self.strategies:
            reference = await strategy.resolve(client, query)
            if reference is None:
                continue

            shuffle = False if strategy.forces_shuffle_off else wants_shuffle(query)
            log_with_context(
                logger,
                "info",
                "Query resolved",
                query=query,
                strategy=strategy.name,
                uri=reference.uri,
                shuffle=shuffle,
                event_type="query_resolved",
            )
            return Resolution(reference=reference, shuffle=shuffle)

        log_with_context(logger, "info", "Query matched nothing", query=query, event_type="query_unresolved")
        return None
