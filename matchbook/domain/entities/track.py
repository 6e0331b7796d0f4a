"""Track-related domain entities.

Provider-side and library-side track representations plus the field-level
difference value object. Pure value objects with zero external dependencies.
"""

from enum import StrEnum
from uuid import UUID

import attrs
from attrs import define, field, validators


class DifferenceField(StrEnum):
    """Track fields compared when scoring a library candidate."""

    TRACK_NAME = "TrackName"
    ALBUM_NAME = "AlbumName"
    ARTISTS = "Artists"
    ALBUM_ARTISTS = "AlbumArtists"


@define(frozen=True, slots=True)
class TrackDifference:
    """A single field whose provider and library values disagree."""

    field: DifferenceField
    provider_value: str
    library_value: str


@define(frozen=True, slots=True)
class ProviderTrackSnapshot:
    """Metadata snapshot of a provider track, used to key manual overrides."""

    name: str = field(validator=validators.instance_of(str))
    album_name: str = ""
    artist_names: list[str] = field(factory=list)
    album_artist_names: list[str] = field(factory=list)

    @property
    def key(self) -> tuple[str, str, tuple[str, ...], tuple[str, ...]]:
        """Hashable identity of the snapshot."""
        return (
            self.name,
            self.album_name,
            tuple(self.artist_names),
            tuple(self.album_artist_names),
        )


@define(frozen=True, slots=True)
class ProviderTrack:
    """Track as known by an external music provider.

    Owned by the provider track cache; the matching core only reads it.
    """

    provider_id: str = field(validator=validators.instance_of(str))
    provider_track_id: str = field(validator=validators.instance_of(str))
    name: str = field(validator=validators.instance_of(str))
    album_name: str = ""
    artist_names: list[str] = field(factory=list)
    album_artist_names: list[str] = field(factory=list)

    # Internal cache row id, when the track came from the cache
    id: int | None = None

    def snapshot(self) -> ProviderTrackSnapshot:
        """Metadata snapshot used as the manual override key."""
        return ProviderTrackSnapshot(
            name=self.name,
            album_name=self.album_name,
            artist_names=list(self.artist_names),
            album_artist_names=list(self.album_artist_names),
        )


@define(frozen=True, slots=True)
class CandidateItem:
    """Library audio item proposed as a match for a provider track."""

    id: UUID = field(validator=validators.instance_of(UUID))
    name: str = ""
    album_name: str | None = None
    artist_names: list[str] = field(factory=list)
    album_artist_names: list[str] = field(factory=list)
    track_number: int = 0
    path: str = ""
    differences: list[TrackDifference] = field(factory=list)

    def with_differences(self, differences: list[TrackDifference]) -> "CandidateItem":
        """Create a new candidate annotated with its field differences."""
        return attrs.evolve(self, differences=list(differences))
