"""Core domain entities representing tracks and matches."""

from .match import (
    ManualOverrideEntry,
    MatchCriteria,
    MatchLevel,
    TrackMatchType,
    VerifiedMatch,
)
from .shared import ensure_utc
from .track import (
    CandidateItem,
    DifferenceField,
    ProviderTrack,
    ProviderTrackSnapshot,
    TrackDifference,
)

__all__ = [
    # Track entities
    "CandidateItem",
    "DifferenceField",
    "ProviderTrack",
    "ProviderTrackSnapshot",
    "TrackDifference",
    # Match entities
    "ManualOverrideEntry",
    "MatchCriteria",
    "MatchLevel",
    "TrackMatchType",
    "VerifiedMatch",
    # Shared utilities
    "ensure_utc",
]
