"""Manual override map: operator-chosen library items for provider tracks."""

from pathlib import Path
from typing import Any

from matchbook.domain.entities import (
    ManualOverrideEntry,
    ProviderTrack,
    ProviderTrackSnapshot,
)
from matchbook.infrastructure.persistence.json_store import JsonFileStore
from matchbook.infrastructure.persistence.mappers import ManualOverrideMapper

MANUAL_MAP_FILE = "manual_track_map.json"

SnapshotKey = tuple[str, str, tuple[str, ...], tuple[str, ...]]


class ManualOverrideStore(JsonFileStore[SnapshotKey, ManualOverrideEntry]):
    """Manual overrides keyed by the provider track's metadata snapshot.

    The snapshot (name, album, artists, album artists) is compared exactly;
    at most one override exists per snapshot.
    """

    label = "manual track overrides"

    def __init__(self, data_dir: Path | str, file_name: str = MANUAL_MAP_FILE) -> None:
        super().__init__(data_dir, file_name)

    def _key(self, entry: ManualOverrideEntry) -> SnapshotKey:
        return entry.provider.key

    def _to_dict(self, entry: ManualOverrideEntry) -> dict[str, Any]:
        return ManualOverrideMapper.to_dict(entry)

    def _from_dict(self, data: dict[str, Any]) -> ManualOverrideEntry:
        return ManualOverrideMapper.from_dict(data)

    def remove_by_snapshot(self, snapshot: ProviderTrackSnapshot) -> bool:
        """Remove the override for a snapshot; False if there was none."""
        return self._remove_key(snapshot.key)

    def get_by_snapshot(
        self, snapshot: ProviderTrackSnapshot
    ) -> ManualOverrideEntry | None:
        """Override for a snapshot, None if the track is not overridden."""
        return self._get(snapshot.key)

    def get_by_provider_track(self, track: ProviderTrack) -> ManualOverrideEntry | None:
        """Override for the current snapshot of a provider track."""
        return self.get_by_snapshot(track.snapshot())

    def get_by_library_item_id(self, library_item_id: str) -> list[ManualOverrideEntry]:
        """All overrides that point at a library item."""
        return [
            entry
            for entry in self._entries.values()
            if entry.library_item_id == library_item_id
        ]
