"""Application layer fixtures: mocked provider cache and library index."""

from unittest.mock import AsyncMock, Mock

import pytest

from matchbook.domain.matching import SearchResult


@pytest.fixture
def provider_cache(provider_track):
    """Provider cache that knows exactly one Spotify track, T1."""
    cache = Mock()
    cache.get_track_id = AsyncMock(
        side_effect=lambda provider_id, track_id: 1
        if (provider_id, track_id) == ("Spotify", "T1")
        else None
    )
    cache.get_track = AsyncMock(return_value=provider_track)
    cache.record_match = AsyncMock()
    cache.list_unmatched_tracks = AsyncMock(return_value=[])
    cache.count_unmatched_tracks = AsyncMock(return_value=0)
    return cache


@pytest.fixture
def library_index():
    index = Mock()
    index.search = AsyncMock(return_value=SearchResult())
    index.get_item = AsyncMock(return_value=None)
    return index
