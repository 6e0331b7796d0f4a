"""Mappers between match-store domain entities and their JSON representation.

The on-disk format uses camelCase keys and nested provider/jellyfin objects,
matching the existing match files.
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from attrs import define

from matchbook.domain.entities import (
    ManualOverrideEntry,
    MatchCriteria,
    MatchLevel,
    ProviderTrackSnapshot,
    VerifiedMatch,
    ensure_utc,
)


@define(frozen=True, slots=True)
class VerifiedMatchMapper:
    """Maps between VerifiedMatch and its JSON object."""

    @staticmethod
    def to_dict(match: VerifiedMatch) -> dict[str, Any]:
        """Convert a verified match to a JSON-ready dictionary."""
        return {
            "providerId": match.provider_id,
            "providerTrackId": match.provider_track_id,
            "jellyfinTrackId": str(match.jellyfin_track_id),
            "matchLevel": match.match_level.value,
            "matchCriteria": match.match_criteria.to_names(),
            "isManualMatch": match.is_manual_match,
            "verifiedAt": ensure_utc(match.verified_at).isoformat(),
            "notes": match.notes,
        }

    @staticmethod
    def from_dict(data: dict[str, Any]) -> VerifiedMatch:
        """Convert a JSON object to a verified match.

        Raises:
            KeyError: A required field is missing
            ValueError: A field holds a value that cannot be parsed
        """
        return VerifiedMatch(
            provider_id=str(data["providerId"]),
            provider_track_id=str(data["providerTrackId"]),
            jellyfin_track_id=UUID(str(data["jellyfinTrackId"])),
            match_level=MatchLevel.parse(data.get("matchLevel", MatchLevel.DEFAULT)),
            match_criteria=MatchCriteria.parse(data.get("matchCriteria", 0)),
            is_manual_match=bool(data.get("isManualMatch", False)),
            verified_at=ensure_utc(datetime.fromisoformat(data["verifiedAt"])),
            notes=data.get("notes"),
        )


@define(frozen=True, slots=True)
class ManualOverrideMapper:
    """Maps between ManualOverrideEntry and its JSON object."""

    @staticmethod
    def to_dict(entry: ManualOverrideEntry) -> dict[str, Any]:
        """Convert a manual override to a JSON-ready dictionary."""
        return {
            "provider": {
                "name": entry.provider.name,
                "albumName": entry.provider.album_name,
                "artistNames": list(entry.provider.artist_names),
                "albumArtistNames": list(entry.provider.album_artist_names),
            },
            "jellyfin": {
                "track": entry.library_item_id,
            },
        }

    @staticmethod
    def from_dict(data: dict[str, Any]) -> ManualOverrideEntry:
        """Convert a JSON object to a manual override.

        Raises:
            KeyError: A required field is missing
        """
        provider = data["provider"]
        return ManualOverrideEntry(
            provider=ProviderTrackSnapshot(
                name=str(provider["name"]),
                album_name=str(provider.get("albumName") or ""),
                artist_names=[str(name) for name in provider.get("artistNames") or []],
                album_artist_names=[
                    str(name) for name in provider.get("albumArtistNames") or []
                ],
            ),
            library_item_id=str(data["jellyfin"]["track"]),
        )
