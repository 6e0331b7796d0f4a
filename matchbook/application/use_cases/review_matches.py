"""Paged review queues for unmatched and verified provider tracks."""

from uuid import UUID

from attrs import define, field

from matchbook.config import get_logger
from matchbook.domain.entities import (
    CandidateItem,
    MatchCriteria,
    MatchLevel,
    ProviderTrack,
    TrackMatchType,
    VerifiedMatch,
)
from matchbook.domain.matching import LibraryIndex
from matchbook.domain.repositories import (
    ProviderTrackCacheProtocol,
    VerifiedMatchStoreProtocol,
)

from .find_candidates import FindCandidatesUseCase

logger = get_logger(__name__)


@define(frozen=True, slots=True)
class ReviewItem:
    """A provider track as shown to an operator deciding on its match."""

    provider_id: str
    provider_track_id: str
    provider_track: ProviderTrack | None = None
    candidates: list[CandidateItem] = field(factory=list)
    current_match: CandidateItem | None = None
    match_type: TrackMatchType = TrackMatchType.ONE_TO_ONE
    is_manual_match: bool = False
    match_level: MatchLevel | None = None
    match_criteria: MatchCriteria | None = None


@define(frozen=True, slots=True)
class ReviewPage:
    items: list[ReviewItem] = field(factory=list)
    page: int = 1
    page_size: int = 50
    total_count: int = 0


def _validate_paging(page: int, page_size: int) -> None:
    if page < 1:
        raise ValueError(f"Page must be at least 1, got {page}")
    if page_size < 1:
        raise ValueError(f"Page size must be at least 1, got {page_size}")


@define(slots=True)
class ReviewMatchesUseCase:
    """Build review pages from the provider cache, ledger and library index."""

    provider_cache: ProviderTrackCacheProtocol
    library_index: LibraryIndex
    verified_match_store: VerifiedMatchStoreProtocol
    find_candidates: FindCandidatesUseCase

    async def list_unmatched(
        self, provider_id: str = "Spotify", page: int = 1, page_size: int = 50
    ) -> ReviewPage:
        """Provider tracks with no recorded match, each with ranked candidates."""
        _validate_paging(page, page_size)

        total = await self.provider_cache.count_unmatched_tracks(provider_id)
        tracks = await self.provider_cache.list_unmatched_tracks(
            provider_id, page, page_size
        )

        items = []
        for track in tracks:
            found = await self.find_candidates.execute(track)
            items.append(
                ReviewItem(
                    provider_id=provider_id,
                    provider_track_id=track.provider_track_id,
                    provider_track=track,
                    candidates=found.candidates,
                    match_type=found.match_type,
                )
            )

        return ReviewPage(items=items, page=page, page_size=page_size, total_count=total)

    async def list_verified(
        self, provider_id: str = "Spotify", page: int = 1, page_size: int = 50
    ) -> ReviewPage:
        """Ledger entries of a provider, joined with their current library item."""
        _validate_paging(page, page_size)

        if not self.verified_match_store.load():
            logger.warning("Could not load verified matches, showing current state")

        matches = self.verified_match_store.get_by_provider(provider_id)
        start = (page - 1) * page_size
        items = [
            await self._verified_item(match)
            for match in matches[start : start + page_size]
        ]

        return ReviewPage(
            items=items, page=page, page_size=page_size, total_count=len(matches)
        )

    async def _verified_item(self, match: VerifiedMatch) -> ReviewItem:
        provider_track = None
        track_id = await self.provider_cache.get_track_id(
            match.provider_id, match.provider_track_id
        )
        if track_id is not None:
            provider_track = await self.provider_cache.get_track(match.provider_id, track_id)

        return ReviewItem(
            provider_id=match.provider_id,
            provider_track_id=match.provider_track_id,
            provider_track=provider_track,
            current_match=await self._library_item(match.jellyfin_track_id),
            match_type=TrackMatchType.ONE_TO_ONE,
            is_manual_match=match.is_manual_match,
            match_level=match.match_level,
            match_criteria=match.match_criteria,
        )

    async def _library_item(self, item_id: UUID) -> CandidateItem | None:
        try:
            return await self.library_index.get_item(item_id)
        except Exception as e:
            logger.warning(f"Could not fetch library item {item_id}: {e}")
            return None
