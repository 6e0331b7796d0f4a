"""Jellyfin connector acting as the library index for candidate search.

Talks to the Jellyfin REST API with an async httpx client. Searches never
raise: HTTP and transport failures are logged and returned as a failed
SearchResult so candidate proposal can degrade to an empty list.
"""

from typing import Any
from uuid import UUID

from attrs import define, field
import backoff
import httpx

from matchbook.config import get_logger, settings
from matchbook.domain.entities import CandidateItem
from matchbook.domain.matching import SearchResult

logger = get_logger(__name__).bind(service="jellyfin")

AUDIO_MEDIA_TYPE = "Audio"


def _artist_names(values: list[Any] | None) -> list[str]:
    # Artists arrive as plain strings, album artists as {"Name", "Id"} pairs
    names = []
    for value in values or []:
        name = value.get("Name") if isinstance(value, dict) else value
        if name:
            names.append(str(name))
    return names


def to_candidate_item(item: dict[str, Any]) -> CandidateItem | None:
    """Convert a Jellyfin BaseItemDto to a candidate, None for non-audio items."""
    if AUDIO_MEDIA_TYPE not in (item.get("MediaType"), item.get("Type")):
        return None

    try:
        item_id = UUID(str(item["Id"]))
    except (KeyError, ValueError):
        logger.debug(f"Skipping Jellyfin item without a valid id: {item.get('Id')!r}")
        return None

    album_artists = _artist_names(item.get("AlbumArtists"))
    if not album_artists and item.get("AlbumArtist"):
        album_artists = [str(item["AlbumArtist"])]

    return CandidateItem(
        id=item_id,
        name=item.get("Name") or "",
        album_name=item.get("Album"),
        artist_names=_artist_names(item.get("Artists")),
        album_artist_names=album_artists,
        track_number=item.get("IndexNumber") or 0,
        path=item.get("Path") or "",
    )


@define(slots=True)
class JellyfinLibraryIndex:
    """Library index implementation over the Jellyfin ``/Items`` endpoint.

    Use as an async context manager, or call ``aclose()`` when done.
    """

    base_url: str = field(factory=lambda: settings.jellyfin.url)
    api_key: str = field(factory=lambda: settings.jellyfin.api_key, repr=False)
    timeout_seconds: float = field(factory=lambda: settings.jellyfin.timeout_seconds)
    transport: httpx.AsyncBaseTransport | None = field(default=None, repr=False)
    client: httpx.AsyncClient = field(init=False, repr=False)

    def __attrs_post_init__(self) -> None:
        """Initialize the HTTP client."""
        logger.debug(f"Initializing Jellyfin connector for {self.base_url}")
        self.client = httpx.AsyncClient(
            base_url=self.base_url.rstrip("/"),
            headers={"X-Emby-Token": self.api_key, "Accept": "application/json"},
            timeout=self.timeout_seconds,
            transport=self.transport,
        )

    async def __aenter__(self) -> "JellyfinLibraryIndex":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self.client.aclose()

    @backoff.on_exception(
        backoff.expo,
        httpx.TransportError,
        max_tries=lambda: settings.jellyfin.retry_count,
    )
    async def _get_items(self, params: dict[str, Any]) -> list[dict[str, Any]]:
        response = await self.client.get("/Items", params=params)
        response.raise_for_status()
        return response.json().get("Items") or []

    async def search(self, query: str, media_type: str, limit: int) -> SearchResult:
        """Search library items by free text.

        Args:
            query: Search term
            media_type: Media type filter, e.g. "Audio"
            limit: Maximum number of items

        Returns:
            SearchResult with audio candidates, or a failed result on any HTTP error
        """
        params = {
            "searchTerm": query,
            "MediaTypes": media_type,
            "IncludeItemTypes": media_type,
            "Recursive": "true",
            "Limit": limit,
            "Fields": "Path",
        }
        try:
            items = await self._get_items(params)
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Jellyfin search failed for {query!r}: {e}")
            return SearchResult.failed(str(e))

        candidates = [
            candidate
            for item in items
            if (candidate := to_candidate_item(item)) is not None
        ]
        logger.debug(f"Jellyfin search {query!r} returned {len(candidates)} audio items")
        return SearchResult(items=candidates)

    async def get_item(self, item_id: UUID) -> CandidateItem | None:
        """Fetch one audio item by id; None if it does not exist or is not audio.

        Raises:
            httpx.HTTPError: If the server cannot be reached or answers with an error
        """
        items = await self._get_items({"Ids": str(item_id), "Fields": "Path"})
        for item in items:
            candidate = to_candidate_item(item)
            if candidate is not None and candidate.id == item_id:
                return candidate
        return None
