"""Tests for AcceptMatchesUseCase with real JSON stores and mocked collaborators."""

import asyncio
from unittest.mock import Mock

import pytest

from matchbook.application.use_cases import (
    AcceptMatchesCommand,
    AcceptMatchesUseCase,
    AcceptRequest,
)
from matchbook.config import MatchingConfig
from matchbook.domain.entities import MatchCriteria, MatchLevel, ProviderTrack
from matchbook.infrastructure.persistence import ManualOverrideStore, VerifiedMatchStore

from tests.conftest import ITEM_A, ITEM_B, ITEM_C


@pytest.fixture
def stores(data_dir):
    return ManualOverrideStore(data_dir), VerifiedMatchStore(data_dir)


@pytest.fixture
def known_items(library_index, make_candidate):
    """Library index that knows ITEM_A and ITEM_B."""
    items = {item_id: make_candidate(item_id) for item_id in (ITEM_A, ITEM_B)}
    library_index.get_item.side_effect = lambda item_id: items.get(item_id)
    return items


def _use_case(provider_cache, library_index, stores, matching=None):
    manual, verified = stores
    return AcceptMatchesUseCase(
        provider_cache=provider_cache,
        library_index=library_index,
        manual_override_store=manual,
        verified_match_store=verified,
        matching_config_provider=lambda: matching,
    )


def _request(track_id="T1", item_id=ITEM_A):
    return AcceptRequest(provider_track_id=track_id, jellyfin_track_id=item_id)


class TestAcceptMatchesUseCase:
    """Test cases for the manual match acceptance workflow."""

    async def test_accepts_single_match(
        self, provider_cache, library_index, known_items, stores, data_dir
    ):
        result = await _use_case(provider_cache, library_index, stores).execute(
            AcceptMatchesCommand(requests=[_request()])
        )

        assert result.results[0].success is True
        assert result.results[0].error is None
        assert result.persisted is True

        reloaded = VerifiedMatchStore(data_dir)
        reloaded.load()
        match = reloaded.get_by_provider_track_id("Spotify", "T1")
        assert match.jellyfin_track_id == ITEM_A
        assert match.is_manual_match is True
        assert match.match_level == MatchLevel.DEFAULT
        assert match.match_criteria == MatchCriteria.TRACK_NAME
        assert match.notes == "Manually accepted through Track Matching interface"

        overrides = ManualOverrideStore(data_dir)
        overrides.load()
        assert [e.library_item_id for e in overrides.get_all()] == [str(ITEM_A)]

        provider_cache.record_match.assert_awaited_once_with(
            1, str(ITEM_A), MatchLevel.DEFAULT, MatchCriteria.ALL
        )

    async def test_uses_active_matching_config(
        self, provider_cache, library_index, known_items, stores
    ):
        matching = MatchingConfig(
            item_match_level=MatchLevel.STRICT,
            item_match_criteria=MatchCriteria.TRACK_NAME | MatchCriteria.ARTISTS,
        )

        await _use_case(provider_cache, library_index, stores, matching).execute(
            AcceptMatchesCommand(requests=[_request()])
        )

        match = stores[1].get_by_provider_track_id("Spotify", "T1")
        assert match.match_level == MatchLevel.STRICT
        assert match.match_criteria == MatchCriteria.TRACK_NAME | MatchCriteria.ARTISTS

    async def test_failures_are_isolated_per_item(
        self, provider_cache, library_index, known_items, stores, provider_track
    ):
        """Test that a missing library item fails only its own request."""
        tracks = {
            "T1": (1, provider_track),
            "T2": (2, ProviderTrack(provider_id="Spotify", provider_track_id="T2", name="Lucky")),
            "T3": (3, ProviderTrack(provider_id="Spotify", provider_track_id="T3", name="Airbag")),
        }
        by_id = dict(tracks.values())
        provider_cache.get_track_id.side_effect = lambda provider_id, track_id: tracks[track_id][0]
        provider_cache.get_track.side_effect = lambda provider_id, track_id: by_id[track_id]

        result = await _use_case(provider_cache, library_index, stores).execute(
            AcceptMatchesCommand(
                requests=[_request("T1", ITEM_A), _request("T2", ITEM_C), _request("T3", ITEM_B)]
            )
        )

        assert [(r.provider_track_id, r.success, r.error) for r in result.results] == [
            ("T1", True, None),
            ("T2", False, "Jellyfin track not found"),
            ("T3", True, None),
        ]
        manual, verified = stores
        assert verified.count == 2
        assert manual.count == 2

    async def test_unknown_provider_track(self, provider_cache, library_index, known_items, stores):
        result = await _use_case(provider_cache, library_index, stores).execute(
            AcceptMatchesCommand(requests=[_request("missing")])
        )

        assert result.results[0].success is False
        assert result.results[0].error == "Provider track not found"
        library_index.get_item.assert_not_awaited()

    async def test_provider_track_vanishing_between_lookups(
        self, provider_cache, library_index, known_items, stores
    ):
        provider_cache.get_track.return_value = None

        result = await _use_case(provider_cache, library_index, stores).execute(
            AcceptMatchesCommand(requests=[_request()])
        )

        assert result.results[0].error == "Provider track not found"

    async def test_reaccepting_replaces_previous_match(
        self, provider_cache, library_index, known_items, stores
    ):
        use_case = _use_case(provider_cache, library_index, stores)

        await use_case.execute(AcceptMatchesCommand(requests=[_request("T1", ITEM_A)]))
        await use_case.execute(AcceptMatchesCommand(requests=[_request("T1", ITEM_B)]))

        manual, verified = stores
        assert verified.count == 1
        assert verified.get_by_provider_track_id("Spotify", "T1").jellyfin_track_id == ITEM_B
        assert [e.library_item_id for e in manual.get_all()] == [str(ITEM_B)]

    async def test_empty_batch_raises(self, provider_cache, library_index, stores):
        with pytest.raises(ValueError, match="No matches provided"):
            await _use_case(provider_cache, library_index, stores).execute(
                AcceptMatchesCommand(requests=[])
            )

    async def test_cancelled_batch_fails_remaining_items(
        self, provider_cache, library_index, known_items, stores
    ):
        cancel = asyncio.Event()
        cancel.set()

        result = await _use_case(provider_cache, library_index, stores).execute(
            AcceptMatchesCommand(requests=[_request("T1"), _request("T2")], cancel_event=cancel)
        )

        assert all(r.error == "Operation cancelled" for r in result.results)
        assert stores[1].count == 0

    async def test_cache_failure_fails_item(
        self, provider_cache, library_index, known_items, stores
    ):
        """Test that a provider cache write error is reported for that item."""
        provider_cache.record_match.side_effect = RuntimeError("database is locked")

        result = await _use_case(provider_cache, library_index, stores).execute(
            AcceptMatchesCommand(requests=[_request()])
        )

        assert result.results[0].success is False
        assert result.results[0].error == "database is locked"
        assert result.persisted is True

    async def test_unexpected_error_is_reported_per_item(
        self, provider_cache, library_index, stores
    ):
        library_index.get_item.side_effect = RuntimeError("timeout talking to Jellyfin")

        result = await _use_case(provider_cache, library_index, stores).execute(
            AcceptMatchesCommand(requests=[_request()])
        )

        assert result.results[0].success is False
        assert result.results[0].error == "timeout talking to Jellyfin"

    async def test_persistence_failure_is_flagged(
        self, provider_cache, library_index, known_items, tmp_path
    ):
        blocker = tmp_path / "data"
        blocker.write_text("not a directory")
        stores = (ManualOverrideStore(blocker), VerifiedMatchStore(blocker))

        result = await _use_case(provider_cache, library_index, stores).execute(
            AcceptMatchesCommand(requests=[_request()])
        )

        assert result.results[0].success is True
        assert result.manual_map_saved is False
        assert result.verified_matches_saved is False
        assert result.persisted is False

    async def test_failed_load_continues(self, provider_cache, library_index, known_items):
        manual = Mock(wraps=ManualOverrideStore("unused"))
        manual.load.return_value = False
        manual.save.return_value = True
        verified = Mock(wraps=VerifiedMatchStore("unused"))
        verified.load.return_value = False
        verified.save.return_value = True

        result = await _use_case(
            provider_cache, library_index, (manual, verified)
        ).execute(AcceptMatchesCommand(requests=[_request()]))

        assert result.results[0].success is True
        assert result.persisted is True
        verified.add.assert_called_once()
