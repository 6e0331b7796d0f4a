"""Ledger of verified provider-to-library track matches."""

from pathlib import Path
from typing import Any
from uuid import UUID

from matchbook.domain.entities import VerifiedMatch
from matchbook.infrastructure.persistence.json_store import JsonFileStore
from matchbook.infrastructure.persistence.mappers import VerifiedMatchMapper

VERIFIED_MATCHES_FILE = "verified_matches.json"


class VerifiedMatchStore(JsonFileStore[tuple[str, str], VerifiedMatch]):
    """Verified matches keyed by ``(provider_id, provider_track_id)``.

    Every accepted match, manual or automatic, ends up here. Adding a match
    for a provider track that is already verified replaces the old entry.
    """

    label = "verified matches"

    def __init__(
        self, data_dir: Path | str, file_name: str = VERIFIED_MATCHES_FILE
    ) -> None:
        super().__init__(data_dir, file_name)

    def _key(self, entry: VerifiedMatch) -> tuple[str, str]:
        return entry.key

    def _to_dict(self, entry: VerifiedMatch) -> dict[str, Any]:
        return VerifiedMatchMapper.to_dict(entry)

    def _from_dict(self, data: dict[str, Any]) -> VerifiedMatch:
        return VerifiedMatchMapper.from_dict(data)

    def remove_by_provider_track_id(
        self, provider_id: str, provider_track_id: str
    ) -> bool:
        """Remove the match for a provider track; False if none was recorded."""
        return self._remove_key((provider_id, provider_track_id))

    def get_by_provider_track_id(
        self, provider_id: str, provider_track_id: str
    ) -> VerifiedMatch | None:
        """Verified match for a provider track, None if not verified."""
        return self._get((provider_id, provider_track_id))

    def get_by_jellyfin_track_id(self, jellyfin_track_id: UUID) -> VerifiedMatch | None:
        """First verified match pointing at a library item, None if there is none."""
        return next(
            (
                match
                for match in self._entries.values()
                if match.jellyfin_track_id == jellyfin_track_id
            ),
            None,
        )

    def get_by_provider(self, provider_id: str) -> list[VerifiedMatch]:
        """All verified matches of one provider, in insertion order."""
        return [
            match for match in self._entries.values() if match.provider_id == provider_id
        ]
