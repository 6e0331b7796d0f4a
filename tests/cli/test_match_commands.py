"""CLI tests for the track matching commands with patched services."""

import asyncio
from contextlib import asynccontextmanager
from datetime import UTC, datetime
import json
import os
import signal
import sys
from unittest.mock import AsyncMock, Mock, patch

import pytest
from typer.testing import CliRunner

from matchbook.application.use_cases import (
    AcceptMatchesResult,
    AcceptResult,
    ReviewItem,
    ReviewPage,
)
from matchbook.domain.entities import TrackMatchType, VerifiedMatch
from matchbook.domain.matching import CandidateSearchResult
from matchbook.infrastructure.cli.app import app
from matchbook.infrastructure.cli.match_commands import (
    cancel_on_interrupt,
    parse_accept_requests,
)
from matchbook.infrastructure.persistence import VerifiedMatchStore

from tests.conftest import ITEM_A, ITEM_B

COMMANDS = "matchbook.infrastructure.cli.match_commands"


@pytest.fixture
def runner():
    """CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def quiet_logging():
    with patch("matchbook.infrastructure.cli.app.setup_loguru_logger"):
        yield


@pytest.fixture
def services():
    services = Mock()
    services.find_candidates.search_by_provider_track = AsyncMock()
    services.accept_matches.execute = AsyncMock()
    services.review_matches.list_unmatched = AsyncMock()
    services.review_matches.list_verified = AsyncMock()

    @asynccontextmanager
    async def fake_open():
        yield services

    with patch(f"{COMMANDS}.open_matching_services", fake_open):
        yield services


def test_help_lists_matching_commands(runner):
    result = runner.invoke(app, ["--help"])

    assert result.exit_code == 0
    for command in ("search", "accept", "accept-file", "unmatched", "verified", "forget"):
        assert command in result.stdout


def test_version(runner):
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert "Matchbook" in result.stdout


def test_search_shows_candidates(runner, services, make_candidate):
    services.find_candidates.search_by_provider_track.return_value = CandidateSearchResult(
        candidates=[make_candidate(ITEM_A)],
        match_type=TrackMatchType.ONE_TO_ONE,
        query="Paranoid Android",
    )

    result = runner.invoke(app, ["search", "T1", "--query", "Paranoid Android"])

    assert result.exit_code == 0
    services.find_candidates.search_by_provider_track.assert_awaited_once_with(
        "Spotify", "T1", "Paranoid Android", None
    )


def test_search_unknown_track_exits_nonzero(runner, services):
    services.find_candidates.search_by_provider_track.return_value = None

    result = runner.invoke(app, ["search", "nope"])

    assert result.exit_code == 1
    assert "Provider track not found" in result.stdout


def test_accept_single_match(runner, services):
    services.accept_matches.execute.return_value = AcceptMatchesResult(
        results=[AcceptResult("T1", True)],
        manual_map_saved=True,
        verified_matches_saved=True,
    )

    result = runner.invoke(app, ["accept", "T1", str(ITEM_A)])

    assert result.exit_code == 0
    command = services.accept_matches.execute.await_args.args[0]
    assert command.requests[0].provider_id == "Spotify"
    assert command.requests[0].jellyfin_track_id == ITEM_A
    assert "1 of 1" in result.stdout


def test_accept_unsaved_batch_exits_nonzero(runner, services):
    services.accept_matches.execute.return_value = AcceptMatchesResult(
        results=[AcceptResult("T1", True)],
        manual_map_saved=False,
        verified_matches_saved=True,
    )

    result = runner.invoke(app, ["accept", "T1", str(ITEM_A)])

    assert result.exit_code == 1


def test_accept_invalid_library_id(runner, services):
    result = runner.invoke(app, ["accept", "T1", "not-a-uuid"])

    assert result.exit_code == 1
    services.accept_matches.execute.assert_not_awaited()


def test_accept_file(runner, services, tmp_path):
    path = tmp_path / "matches.json"
    path.write_text(
        json.dumps(
            [
                {"providerId": "Spotify", "providerTrackId": "T1", "jellyfinTrackId": str(ITEM_A)},
                {"providerTrackId": "T2", "jellyfinTrackId": str(ITEM_B)},
            ]
        )
    )
    services.accept_matches.execute.return_value = AcceptMatchesResult(
        results=[AcceptResult("T1", True), AcceptResult("T2", False, "Jellyfin track not found")],
        manual_map_saved=True,
        verified_matches_saved=True,
    )

    result = runner.invoke(app, ["accept-file", str(path)])

    assert result.exit_code == 0
    command = services.accept_matches.execute.await_args.args[0]
    assert [r.provider_track_id for r in command.requests] == ["T1", "T2"]
    assert "1 of 2" in result.stdout


def test_parse_accept_requests_rejects_non_list():
    with pytest.raises(ValueError):
        parse_accept_requests({"providerTrackId": "T1"})


def test_unmatched_and_verified_pages(runner, services, provider_track, make_candidate):
    page = ReviewPage(
        items=[
            ReviewItem(
                provider_id="Spotify",
                provider_track_id="T1",
                provider_track=provider_track,
                candidates=[make_candidate(ITEM_A)],
            )
        ],
        page=1,
        page_size=50,
        total_count=1,
    )
    services.review_matches.list_unmatched.return_value = page
    services.review_matches.list_verified.return_value = page

    unmatched = runner.invoke(app, ["unmatched", "--page-size", "10"])
    verified = runner.invoke(app, ["verified", "--provider", "Deezer"])

    assert unmatched.exit_code == 0
    assert verified.exit_code == 0
    services.review_matches.list_unmatched.assert_awaited_once_with("Spotify", 1, 10)
    services.review_matches.list_verified.assert_awaited_once_with("Deezer", 1, 50)


def test_forget_removes_verified_match(runner, data_dir):
    store = VerifiedMatchStore(data_dir)
    store.add(
        VerifiedMatch(
            provider_id="Spotify",
            provider_track_id="T1",
            jellyfin_track_id=ITEM_A,
            verified_at=datetime(2024, 5, 1, tzinfo=UTC),
        )
    )
    store.save()

    with patch(f"{COMMANDS}.build_stores", return_value=(Mock(), VerifiedMatchStore(data_dir))):
        first = runner.invoke(app, ["forget", "T1"])
        second = runner.invoke(app, ["forget", "T1"])

    assert first.exit_code == 0
    assert second.exit_code == 1

    reloaded = VerifiedMatchStore(data_dir)
    reloaded.load()
    assert reloaded.count == 0


def test_accept_passes_cancel_event(runner, services):
    services.accept_matches.execute.return_value = AcceptMatchesResult(
        results=[AcceptResult("T1", True)],
        manual_map_saved=True,
        verified_matches_saved=True,
    )

    runner.invoke(app, ["accept", "T1", str(ITEM_A)])

    command = services.accept_matches.execute.await_args.args[0]
    assert isinstance(command.cancel_event, asyncio.Event)
    assert not command.cancel_event.is_set()


@pytest.mark.skipif(sys.platform == "win32", reason="event loop signal handlers are Unix only")
async def test_interrupt_sets_cancel_event():
    """Test that Ctrl+C during a batch sets the cancel event instead of aborting."""
    cancel_event = asyncio.Event()

    with cancel_on_interrupt(cancel_event):
        os.kill(os.getpid(), signal.SIGINT)
        await asyncio.wait_for(cancel_event.wait(), timeout=1)

    assert cancel_event.is_set()
