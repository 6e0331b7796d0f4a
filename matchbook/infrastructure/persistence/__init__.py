"""Persistence layer: JSON match stores and the provider track cache."""

from .manual_override_store import MANUAL_MAP_FILE, ManualOverrideStore
from .provider_track_cache import SqlProviderTrackCache
from .verified_match_store import VERIFIED_MATCHES_FILE, VerifiedMatchStore

__all__ = [
    "MANUAL_MAP_FILE",
    "VERIFIED_MATCHES_FILE",
    "ManualOverrideStore",
    "SqlProviderTrackCache",
    "VerifiedMatchStore",
]
