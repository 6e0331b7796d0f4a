"""Domain repository interfaces."""

from .interfaces import (
    ManualOverrideStoreProtocol,
    ProviderTrackCacheProtocol,
    VerifiedMatchStoreProtocol,
)

__all__ = [
    "ManualOverrideStoreProtocol",
    "ProviderTrackCacheProtocol",
    "VerifiedMatchStoreProtocol",
]
