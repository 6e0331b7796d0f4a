"""Accept operator-chosen matches between provider tracks and library items.

Each accepted pair is written to three places: the manual override map, the
verified match ledger and the provider track cache. Requests are processed
independently, so one bad request never aborts the rest of the batch.
"""

import asyncio
from collections.abc import Callable
from datetime import UTC, datetime
from uuid import UUID

from attrs import define, field

from matchbook.config import MatchingConfig, get_logger, settings
from matchbook.domain.entities import (
    ManualOverrideEntry,
    MatchCriteria,
    MatchLevel,
    ProviderTrack,
    VerifiedMatch,
)
from matchbook.domain.matching import LibraryIndex
from matchbook.domain.repositories import (
    ManualOverrideStoreProtocol,
    ProviderTrackCacheProtocol,
    VerifiedMatchStoreProtocol,
)

logger = get_logger(__name__)

MANUAL_ACCEPT_NOTE = "Manually accepted through Track Matching interface"
PROVIDER_TRACK_NOT_FOUND = "Provider track not found"
LIBRARY_ITEM_NOT_FOUND = "Jellyfin track not found"
OPERATION_CANCELLED = "Operation cancelled"


@define(frozen=True, slots=True)
class AcceptRequest:
    """One provider track to be matched to a chosen library item."""

    provider_track_id: str
    jellyfin_track_id: UUID
    provider_id: str = "Spotify"


@define(frozen=True, slots=True)
class AcceptResult:
    """Outcome of a single accept request."""

    provider_track_id: str
    success: bool
    error: str | None = None


@define(frozen=True, slots=True)
class AcceptMatchesCommand:
    """Batch of accept requests with optional cooperative cancellation."""

    requests: list[AcceptRequest] = field(factory=list)
    cancel_event: asyncio.Event | None = None


@define(frozen=True, slots=True)
class AcceptMatchesResult:
    """Per-request results plus whether both stores were written back."""

    results: list[AcceptResult] = field(factory=list)
    manual_map_saved: bool = False
    verified_matches_saved: bool = False

    @property
    def persisted(self) -> bool:
        return self.manual_map_saved and self.verified_matches_saved

    @property
    def accepted_count(self) -> int:
        return sum(1 for result in self.results if result.success)


class _RequestFailed(Exception):
    """Expected per-request failure with an operator-facing message."""


@define(slots=True)
class AcceptMatchesUseCase:
    """Record manual matches for a batch of provider tracks.

    The matching configuration is read through ``matching_config_provider`` at
    call time, so changes to the active configuration apply to the next batch.
    Concurrent batches against the same store files are not serialized here.
    """

    provider_cache: ProviderTrackCacheProtocol
    library_index: LibraryIndex
    manual_override_store: ManualOverrideStoreProtocol
    verified_match_store: VerifiedMatchStoreProtocol
    matching_config_provider: Callable[[], MatchingConfig | None] = field(
        default=lambda: settings.matching
    )

    async def execute(self, command: AcceptMatchesCommand) -> AcceptMatchesResult:
        """Process every request, then save both stores once.

        Raises:
            ValueError: If the command carries no requests
        """
        if not command.requests:
            raise ValueError("No matches provided")

        if not self.manual_override_store.load():
            logger.warning("Could not load manual overrides, continuing with current state")
        if not self.verified_match_store.load():
            logger.warning("Could not load verified matches, continuing with current state")

        match_level, match_criteria = self._active_matching()

        results = []
        for request in command.requests:
            if command.cancel_event is not None and command.cancel_event.is_set():
                results.append(
                    AcceptResult(request.provider_track_id, False, OPERATION_CANCELLED)
                )
                continue
            results.append(await self._accept(request, match_level, match_criteria))

        manual_map_saved = self.manual_override_store.save()
        verified_matches_saved = self.verified_match_store.save()
        if not (manual_map_saved and verified_matches_saved):
            logger.error(
                "Accepted matches were not fully persisted",
                manual_map_saved=manual_map_saved,
                verified_matches_saved=verified_matches_saved,
            )

        result = AcceptMatchesResult(
            results=results,
            manual_map_saved=manual_map_saved,
            verified_matches_saved=verified_matches_saved,
        )
        logger.info(
            f"Accepted {result.accepted_count} of {len(results)} matches",
            persisted=result.persisted,
        )
        return result

    def _active_matching(self) -> tuple[MatchLevel, MatchCriteria]:
        config = self.matching_config_provider()
        if config is None:
            return MatchLevel.DEFAULT, MatchCriteria.TRACK_NAME
        return config.item_match_level, config.item_match_criteria

    async def _accept(
        self,
        request: AcceptRequest,
        match_level: MatchLevel,
        match_criteria: MatchCriteria,
    ) -> AcceptResult:
        try:
            track_id, provider_track = await self._resolve_provider_track(request)

            library_item = await self.library_index.get_item(request.jellyfin_track_id)
            if library_item is None:
                raise _RequestFailed(LIBRARY_ITEM_NOT_FOUND)

            library_item_id = str(library_item.id)
            self._replace_override(provider_track, library_item_id)

            self.verified_match_store.add(
                VerifiedMatch(
                    provider_id=request.provider_id,
                    provider_track_id=request.provider_track_id,
                    jellyfin_track_id=library_item.id,
                    match_level=match_level,
                    match_criteria=match_criteria,
                    is_manual_match=True,
                    verified_at=datetime.now(UTC),
                    notes=MANUAL_ACCEPT_NOTE,
                )
            )

            await self.provider_cache.record_match(
                track_id, library_item_id, MatchLevel.DEFAULT, MatchCriteria.ALL
            )
        except _RequestFailed as e:
            logger.warning(f"Cannot accept {request.provider_track_id}: {e}")
            return AcceptResult(request.provider_track_id, False, str(e))
        except Exception as e:
            logger.exception(f"Failed to accept match for {request.provider_track_id}")
            return AcceptResult(request.provider_track_id, False, str(e))

        logger.debug(
            "Accepted manual match",
            provider_track_id=request.provider_track_id,
            library_item_id=library_item_id,
        )
        return AcceptResult(request.provider_track_id, True)

    async def _resolve_provider_track(
        self, request: AcceptRequest
    ) -> tuple[int, ProviderTrack]:
        track_id = await self.provider_cache.get_track_id(
            request.provider_id, request.provider_track_id
        )
        if track_id is None:
            raise _RequestFailed(PROVIDER_TRACK_NOT_FOUND)

        provider_track = await self.provider_cache.get_track(request.provider_id, track_id)
        if provider_track is None:
            raise _RequestFailed(PROVIDER_TRACK_NOT_FOUND)

        return track_id, provider_track

    def _replace_override(self, provider_track: ProviderTrack, library_item_id: str) -> None:
        snapshot = provider_track.snapshot()
        existing = self.manual_override_store.get_by_snapshot(snapshot)
        if existing is not None:
            self.manual_override_store.remove(existing)

        self.manual_override_store.add(
            ManualOverrideEntry(provider=snapshot, library_item_id=library_item_id)
        )
