"""Connectors to external services used as matching collaborators."""

from .jellyfin import JellyfinLibraryIndex, to_candidate_item

__all__ = ["JellyfinLibraryIndex", "to_candidate_item"]
