"""Track matching commands: search, accept, review and forget."""

import asyncio
from collections.abc import Iterator
from contextlib import contextmanager
import json
from pathlib import Path
import signal
from typing import Annotated, Any
from uuid import UUID

import typer

from matchbook.application.use_cases import AcceptMatchesCommand, AcceptRequest
from matchbook.config import get_logger, settings
from matchbook.infrastructure.cli.ui import (
    command_error_handler,
    console,
    display_accept_results,
    display_candidates,
    display_review_page,
)
from matchbook.infrastructure.context import build_stores, open_matching_services

logger = get_logger(__name__)

DEFAULT_PROVIDER = "Spotify"

ProviderOption = Annotated[
    str, typer.Option("--provider", "-p", help="Provider the track belongs to")
]
PageOption = Annotated[int, typer.Option("--page", min=1, help="Page number")]
PageSizeOption = Annotated[
    int, typer.Option("--page-size", min=1, help="Items per page")
]


def parse_accept_requests(data: Any) -> list[AcceptRequest]:
    """Build accept requests from a JSON list of ``{providerId, providerTrackId, jellyfinTrackId}``."""
    if not isinstance(data, list):
        raise ValueError("Expected a JSON list of match requests")

    requests = []
    for entry in data:
        if not isinstance(entry, dict):
            raise ValueError(f"Invalid match request: {entry!r}")
        requests.append(
            AcceptRequest(
                provider_id=entry.get("providerId") or DEFAULT_PROVIDER,
                provider_track_id=str(entry.get("providerTrackId") or ""),
                jellyfin_track_id=UUID(str(entry.get("jellyfinTrackId"))),
            )
        )
    return requests


@command_error_handler
def search(
    provider_track_id: Annotated[str, typer.Argument(help="Provider track id")],
    provider: ProviderOption = DEFAULT_PROVIDER,
    query: Annotated[
        str | None,
        typer.Option("--query", "-q", help="Search text instead of the track name"),
    ] = None,
    limit: Annotated[
        int | None, typer.Option("--limit", "-l", min=1, help="Maximum candidates")
    ] = None,
) -> None:
    """Propose ranked library candidates for a cached provider track."""

    async def _run():
        async with open_matching_services() as services:
            return await services.find_candidates.search_by_provider_track(
                provider, provider_track_id, query, limit
            )

    result = asyncio.run(_run())
    if result is None:
        console.print(f"[red]Provider track not found:[/red] {provider}/{provider_track_id}")
        raise typer.Exit(code=1)

    display_candidates(result)


@contextmanager
def cancel_on_interrupt(cancel_event: asyncio.Event) -> Iterator[None]:
    """Set ``cancel_event`` on Ctrl+C while the block runs.

    Must be entered from inside a running event loop. Requests already
    processed keep their results and the stores are still saved.
    """
    loop = asyncio.get_running_loop()
    try:
        loop.add_signal_handler(signal.SIGINT, cancel_event.set)
    except (NotImplementedError, RuntimeError):
        # No loop signal handlers on Windows or outside the main thread
        yield
        return

    try:
        yield
    finally:
        loop.remove_signal_handler(signal.SIGINT)


def _run_accept(requests: list[AcceptRequest]) -> None:
    async def _run():
        cancel_event = asyncio.Event()
        async with open_matching_services() as services:
            with cancel_on_interrupt(cancel_event):
                result = await services.accept_matches.execute(
                    AcceptMatchesCommand(requests=requests, cancel_event=cancel_event)
                )
        if cancel_event.is_set():
            console.print("[yellow]Interrupted: remaining matches were cancelled[/yellow]")
        return result

    result = asyncio.run(_run())
    display_accept_results(result)
    if not result.persisted:
        raise typer.Exit(code=1)


@command_error_handler
def accept(
    provider_track_id: Annotated[str, typer.Argument(help="Provider track id")],
    jellyfin_track_id: Annotated[str, typer.Argument(help="Jellyfin item id")],
    provider: ProviderOption = DEFAULT_PROVIDER,
) -> None:
    """Accept a library item as the match for a provider track."""
    _run_accept(
        [
            AcceptRequest(
                provider_id=provider,
                provider_track_id=provider_track_id,
                jellyfin_track_id=UUID(jellyfin_track_id),
            )
        ]
    )


@command_error_handler
def accept_file(
    path: Annotated[
        Path,
        typer.Argument(exists=True, dir_okay=False, help="JSON file of match requests"),
    ],
) -> None:
    """Accept a batch of matches listed in a JSON file."""
    requests = parse_accept_requests(json.loads(path.read_text(encoding="utf-8")))
    logger.info(f"Accepting {len(requests)} matches from {path}")
    _run_accept(requests)


@command_error_handler
def unmatched(
    provider: ProviderOption = DEFAULT_PROVIDER,
    page: PageOption = 1,
    page_size: PageSizeOption = 50,
) -> None:
    """List cached provider tracks that have no match yet."""

    async def _run():
        async with open_matching_services() as services:
            return await services.review_matches.list_unmatched(provider, page, page_size)

    display_review_page(asyncio.run(_run()), "Unmatched Tracks")


@command_error_handler
def verified(
    provider: ProviderOption = DEFAULT_PROVIDER,
    page: PageOption = 1,
    page_size: PageSizeOption = 50,
) -> None:
    """List verified matches with their current library item."""

    async def _run():
        async with open_matching_services() as services:
            return await services.review_matches.list_verified(provider, page, page_size)

    display_review_page(asyncio.run(_run()), "Verified Matches")


@command_error_handler
def forget(
    provider_track_id: Annotated[str, typer.Argument(help="Provider track id")],
    provider: ProviderOption = DEFAULT_PROVIDER,
) -> None:
    """Remove a verified match from the ledger."""
    _, verified_match_store = build_stores(settings)
    if not verified_match_store.load():
        console.print("[red]Could not read the verified match ledger[/red]")
        raise typer.Exit(code=1)

    if not verified_match_store.remove_by_provider_track_id(provider, provider_track_id):
        console.print(f"[yellow]No verified match for {provider}/{provider_track_id}[/yellow]")
        raise typer.Exit(code=1)

    if not verified_match_store.save():
        console.print("[red]Could not save the verified match ledger[/red]")
        raise typer.Exit(code=1)

    console.print(f"[green]✓ Forgot verified match for {provider}/{provider_track_id}[/green]")


def register_match_commands(app: typer.Typer) -> None:
    """Register track matching commands with the Typer app."""
    panel = "🎯 Track Matching"
    app.command(name="search", rich_help_panel=panel)(search)
    app.command(name="accept", rich_help_panel=panel)(accept)
    app.command(name="accept-file", rich_help_panel=panel)(accept_file)
    app.command(name="unmatched", rich_help_panel=panel)(unmatched)
    app.command(name="verified", rich_help_panel=panel)(verified)
    app.command(name="forget", rich_help_panel=panel)(forget)
