"""Propose ranked library candidates for a provider track.

One library search per call; the results are scored against the provider
track and returned closest-first. A failing library index never surfaces as
an exception here: the caller simply gets no candidates.
"""

from attrs import define, field

from matchbook.config import SearchConfig, get_logger, settings
from matchbook.domain.entities import CandidateItem, ProviderTrack
from matchbook.domain.matching import (
    CandidateSearchResult,
    LibraryIndex,
    build_search_query,
    classify_match_type,
    rank_candidates,
)
from matchbook.domain.repositories import ProviderTrackCacheProtocol

logger = get_logger(__name__)


@define(slots=True)
class FindCandidatesUseCase:
    """Search the library index and rank what comes back."""

    library_index: LibraryIndex
    provider_cache: ProviderTrackCacheProtocol | None = None
    search_config: SearchConfig = field(factory=lambda: settings.search)

    async def execute(
        self,
        provider_track: ProviderTrack,
        search_query: str | None = None,
        limit: int | None = None,
    ) -> CandidateSearchResult:
        """Find candidates for a provider track.

        Args:
            provider_track: Track to find library matches for
            search_query: Explicit search text; the track name is used when None
            limit: Maximum number of library items to consider

        Returns:
            Ranked candidates with the match type and the query actually sent
        """
        query = build_search_query(
            provider_track, search_query, self.search_config.max_query_length
        )
        if limit is None:
            limit = self.search_config.result_limit
        items = await self._search(query, limit)

        candidates = rank_candidates(provider_track, items)
        return CandidateSearchResult(
            candidates=candidates,
            match_type=classify_match_type(candidates),
            query=query,
        )

    async def search_by_provider_track(
        self,
        provider_id: str,
        provider_track_id: str,
        search_query: str | None = None,
        limit: int | None = None,
    ) -> CandidateSearchResult | None:
        """Resolve a cached provider track and find its candidates.

        Returns:
            None when the provider track is not in the cache
        """
        if self.provider_cache is None:
            raise ValueError("A provider track cache is required to search by id")

        track_id = await self.provider_cache.get_track_id(provider_id, provider_track_id)
        if track_id is None:
            logger.info(f"Provider track not cached: {provider_id}/{provider_track_id}")
            return None

        provider_track = await self.provider_cache.get_track(provider_id, track_id)
        if provider_track is None:
            return None

        return await self.execute(provider_track, search_query, limit)

    async def _search(self, query: str, limit: int) -> list[CandidateItem]:
        try:
            result = await self.library_index.search(
                query, self.search_config.media_type, limit
            )
        except Exception as e:
            logger.error(f"Library search failed for {query!r}: {e}")
            return []

        if not result.success:
            logger.warning(f"Library search returned an error for {query!r}: {result.error}")
            return []

        return list(result.items)
