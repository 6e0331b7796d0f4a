"""Candidate scoring and ranking for provider-to-library reconciliation."""

from .algorithms import (
    ARTIST_SEPARATOR,
    build_search_query,
    calculate_differences,
    classify_match_type,
    rank_candidates,
)
from .protocols import LibraryIndex
from .types import CandidateSearchResult, SearchResult

__all__ = [
    "ARTIST_SEPARATOR",
    "CandidateSearchResult",
    "LibraryIndex",
    "SearchResult",
    "build_search_query",
    "calculate_differences",
    "classify_match_type",
    "rank_candidates",
]
