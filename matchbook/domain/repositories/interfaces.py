"""Domain repository interfaces.

These interfaces define the contracts for data access without depending on
infrastructure implementations, following the dependency inversion principle.
"""

from typing import Protocol
from uuid import UUID

from matchbook.domain.entities import (
    ManualOverrideEntry,
    MatchCriteria,
    MatchLevel,
    ProviderTrack,
    ProviderTrackSnapshot,
    VerifiedMatch,
)


class ProviderTrackCacheProtocol(Protocol):
    """Cache of provider tracks and of the library items they resolved to."""

    async def get_track_id(self, provider_id: str, provider_track_id: str) -> int | None:
        """Internal id of a provider track, None when it is not cached."""
        ...

    async def get_track(self, provider_id: str, track_id: int) -> ProviderTrack | None:
        """Provider track by internal id, None when it is not cached."""
        ...

    async def record_match(
        self,
        track_id: int,
        library_item_id: str,
        match_level: MatchLevel,
        match_criteria: MatchCriteria,
    ) -> None:
        """Mark a provider track as resolved to a library item."""
        ...

    async def list_unmatched_tracks(
        self, provider_id: str, page: int, page_size: int
    ) -> list[ProviderTrack]:
        """Page through provider tracks that have no recorded match."""
        ...

    async def count_unmatched_tracks(self, provider_id: str) -> int:
        """Number of provider tracks without a recorded match."""
        ...


class ManualOverrideStoreProtocol(Protocol):
    """Keyed collection of manual provider-to-library overrides."""

    def add(self, entry: ManualOverrideEntry) -> None: ...

    def remove(self, entry: ManualOverrideEntry | None) -> bool: ...

    def get_by_snapshot(
        self, snapshot: ProviderTrackSnapshot
    ) -> ManualOverrideEntry | None: ...

    def get_all(self) -> list[ManualOverrideEntry]: ...

    def load(self) -> bool: ...

    def save(self) -> bool: ...


class VerifiedMatchStoreProtocol(Protocol):
    """Ledger of accepted matches keyed by provider track."""

    def add(self, entry: VerifiedMatch) -> None: ...

    def remove(self, entry: VerifiedMatch | None) -> bool: ...

    def remove_by_provider_track_id(
        self, provider_id: str, provider_track_id: str
    ) -> bool: ...

    def get_by_provider_track_id(
        self, provider_id: str, provider_track_id: str
    ) -> VerifiedMatch | None: ...

    def get_by_jellyfin_track_id(self, jellyfin_track_id: UUID) -> VerifiedMatch | None: ...

    def get_by_provider(self, provider_id: str) -> list[VerifiedMatch]: ...

    def get_all(self) -> list[VerifiedMatch]: ...

    def load(self) -> bool: ...

    def save(self) -> bool: ...
