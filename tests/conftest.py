"""Shared fixtures: provider tracks, library candidates and store directories."""

from uuid import UUID

import pytest

from matchbook.domain.entities import CandidateItem, ProviderTrack

ITEM_A = UUID("aaaaaaaa-0000-0000-0000-000000000001")
ITEM_B = UUID("bbbbbbbb-0000-0000-0000-000000000002")
ITEM_C = UUID("cccccccc-0000-0000-0000-000000000003")


@pytest.fixture
def provider_track():
    """Cached Spotify track used throughout the matching tests."""
    return ProviderTrack(
        id=1,
        provider_id="Spotify",
        provider_track_id="T1",
        name="Paranoid Android",
        album_name="OK Computer",
        artist_names=["Radiohead"],
        album_artist_names=["Radiohead"],
    )


@pytest.fixture
def make_candidate():
    """Factory for library candidates that default to an exact match."""

    def _make(item_id=ITEM_A, **overrides):
        fields = {
            "name": "Paranoid Android",
            "album_name": "OK Computer",
            "artist_names": ["Radiohead"],
            "album_artist_names": ["Radiohead"],
            "track_number": 2,
            "path": "/music/Radiohead/OK Computer/02 Paranoid Android.flac",
        }
        fields.update(overrides)
        return CandidateItem(id=item_id, **fields)

    return _make


@pytest.fixture
def data_dir(tmp_path):
    """Directory for the JSON stores, not created yet."""
    return tmp_path / "data"
