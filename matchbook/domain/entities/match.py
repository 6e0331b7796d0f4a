"""Match-related domain entities.

Verified matches, manual overrides and the enumerations describing how a
match was produced. Pure value objects with zero external dependencies.
"""

from datetime import UTC, datetime
from enum import IntFlag, StrEnum
from typing import Any
from uuid import UUID

from attrs import define, field, validators

from .shared import ensure_utc
from .track import ProviderTrackSnapshot


class MatchLevel(StrEnum):
    """Confidence tier of the matcher configuration that produced a match."""

    DEFAULT = "Default"
    STRICT = "Strict"
    LOOSE = "Loose"

    @classmethod
    def parse(cls, value: Any) -> "MatchLevel":
        """Parse a level by value or member name, ignoring case."""
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower()
        for level in cls:
            if text in (level.value.lower(), level.name.lower()):
                return level
        raise ValueError(f"Unknown match level: {value!r}")


class MatchCriteria(IntFlag):
    """Metadata fields that contributed to a match (combinable)."""

    NONE = 0
    TRACK_NAME = 1
    ALBUM_NAME = 2
    ARTISTS = 4
    ALBUM_ARTISTS = 8
    ALL = TRACK_NAME | ALBUM_NAME | ARTISTS | ALBUM_ARTISTS

    def to_names(self) -> str:
        """Render as comma-joined flag names, e.g. ``"TrackName, Artists"``."""
        names = [name for flag, name in _CRITERIA_NAMES.items() if flag in self]
        return ", ".join(names) if names else "None"

    @classmethod
    def parse(cls, value: Any) -> "MatchCriteria":
        """Parse flag names, a comma-joined string of names, or an integer."""
        if isinstance(value, cls):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            return cls(value)
        if not isinstance(value, str):
            raise ValueError(f"Invalid match criteria: {value!r}")

        text = value.strip()
        if text.isdigit():
            return cls(int(text))

        result = cls.NONE
        for token in text.replace("|", ",").split(","):
            key = token.strip().replace("_", "").lower()
            if not key or key == "none":
                continue
            if key not in _CRITERIA_BY_KEY:
                raise ValueError(f"Unknown match criteria flag: {token.strip()!r}")
            result |= _CRITERIA_BY_KEY[key]
        return result


_CRITERIA_NAMES = {
    MatchCriteria.TRACK_NAME: "TrackName",
    MatchCriteria.ALBUM_NAME: "AlbumName",
    MatchCriteria.ARTISTS: "Artists",
    MatchCriteria.ALBUM_ARTISTS: "AlbumArtists",
}
_CRITERIA_BY_KEY = {
    **{name.lower(): flag for flag, name in _CRITERIA_NAMES.items()},
    "all": MatchCriteria.ALL,
}


class TrackMatchType(StrEnum):
    """Whether a provider track has a single or several library candidates."""

    ONE_TO_ONE = "OneToOne"
    ONE_TO_MANY = "OneToMany"


@define(frozen=True, slots=True)
class ManualOverrideEntry:
    """Operator-supplied mapping from a provider track snapshot to a library item.

    The snapshot is only a best-effort key: provider tracks carry no stronger
    identity inside the override map.
    """

    provider: ProviderTrackSnapshot = field(
        validator=validators.instance_of(ProviderTrackSnapshot)
    )
    library_item_id: str = field(validator=validators.instance_of(str))


@define(frozen=True, slots=True)
class VerifiedMatch:
    """Durable record that a provider track was reconciled with a library item.

    Identity is ``(provider_id, provider_track_id)``; the ledger keeps at most
    one entry per key.
    """

    provider_id: str = field(validator=validators.instance_of(str))
    provider_track_id: str = field(validator=validators.instance_of(str))
    jellyfin_track_id: UUID = field(validator=validators.instance_of(UUID))
    match_level: MatchLevel = field(
        default=MatchLevel.DEFAULT, validator=validators.instance_of(MatchLevel)
    )
    match_criteria: MatchCriteria = field(
        default=MatchCriteria.TRACK_NAME,
        validator=validators.instance_of(MatchCriteria),
    )
    is_manual_match: bool = False
    verified_at: datetime = field(
        factory=lambda: datetime.now(UTC), converter=ensure_utc
    )
    notes: str | None = None

    @property
    def key(self) -> tuple[str, str]:
        """Ledger identity of this match."""
        return (self.provider_id, self.provider_track_id)
