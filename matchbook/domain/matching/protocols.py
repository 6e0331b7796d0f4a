"""Protocols for the library index consulted during matching.

These protocols define contracts for library access without depending on
a concrete media server client, following the dependency inversion principle.
"""

from typing import Protocol
from uuid import UUID

from matchbook.domain.entities import CandidateItem

from .types import SearchResult


class LibraryIndex(Protocol):
    """Search capability over the local media library."""

    async def search(self, query: str, media_type: str, limit: int) -> SearchResult:
        """Search library items.

        Args:
            query: Free-text search term
            media_type: Media type filter (e.g. "Audio")
            limit: Maximum number of items to return

        Returns:
            SearchResult with candidate items, or a failed result with an error
        """
        ...

    async def get_item(self, item_id: UUID) -> CandidateItem | None:
        """Look up a single library item, None when it does not exist."""
        ...
