"""UI helpers for CLI interaction.

Reusable Rich renderers and the shared error handler, keeping presentation
separate from the use cases.
"""

from collections.abc import Callable
import functools

from rich.console import Console
from rich.table import Table
import typer

from matchbook.application.use_cases import AcceptMatchesResult, ReviewPage
from matchbook.config import get_logger
from matchbook.domain.entities import CandidateItem
from matchbook.domain.matching import CandidateSearchResult

console = Console()
logger = get_logger(__name__)


def command_error_handler[**P, R](func: Callable[P, R]) -> Callable[P, R]:
    """Decorator to standardize error handling for CLI commands.

    Unexpected exceptions are logged with their traceback, shown as a short
    message and converted to ``typer.Exit(code=1)``.
    """

    @functools.wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        operation = func.__name__.replace("_", " ")

        with logger.contextualize(operation=operation):
            try:
                logger.debug(f"Executing {operation}")
                return func(*args, **kwargs)

            except typer.Exit:
                raise

            except typer.Abort:
                logger.info(f"Operation {operation} aborted by user")
                raise

            except Exception as e:
                logger.exception(f"Error during {operation}")
                console.print(f"\n[bold red]✗ Error during {operation}:[/bold red] {e}")
                raise typer.Exit(code=1) from e

    return wrapper


def _artists(names: list[str]) -> str:
    return ", ".join(names) or "[dim]-[/dim]"


def _candidate_row(index: int, candidate: CandidateItem) -> list[str]:
    differences = ", ".join(d.field.value for d in candidate.differences)
    return [
        str(index),
        str(candidate.id),
        candidate.name,
        candidate.album_name or "",
        _artists(candidate.artist_names),
        differences or "[green]exact[/green]",
    ]


def display_candidates(result: CandidateSearchResult) -> None:
    """Render ranked candidates, closest match first."""
    if not result.candidates:
        console.print(f"[yellow]No library candidates for query[/yellow] {result.query!r}")
        return

    table = Table(title=f"Candidates for {result.query!r} ({result.match_type.value})")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Jellyfin ID", style="cyan", no_wrap=True)
    table.add_column("Track")
    table.add_column("Album")
    table.add_column("Artists")
    table.add_column("Differences", style="yellow")

    for index, candidate in enumerate(result.candidates, start=1):
        table.add_row(*_candidate_row(index, candidate))

    console.print(table)


def display_accept_results(result: AcceptMatchesResult) -> None:
    """Render per-request outcomes and the persistence status."""
    table = Table(title="Accepted Matches")
    table.add_column("Provider Track", style="cyan")
    table.add_column("Status")
    table.add_column("Error", style="red")

    for item in result.results:
        status = "[green]✓ accepted[/green]" if item.success else "[red]✗ failed[/red]"
        table.add_row(item.provider_track_id, status, item.error or "")

    console.print(table)
    console.print(
        f"[bold]{result.accepted_count}[/bold] of {len(result.results)} matches accepted"
    )
    if not result.persisted:
        console.print(
            "[bold red]Warning:[/bold red] matches could not be saved "
            f"(manual map: {result.manual_map_saved}, "
            f"verified matches: {result.verified_matches_saved})"
        )


def display_review_page(page: ReviewPage, title: str) -> None:
    """Render a page of the unmatched or verified review queue."""
    table = Table(
        title=f"{title} (page {page.page}, {page.total_count} total)",
    )
    table.add_column("Provider Track", style="cyan", no_wrap=True)
    table.add_column("Track")
    table.add_column("Artists")
    table.add_column("Match Type")
    table.add_column("Best / Current Match")
    table.add_column("Level")

    for item in page.items:
        track = item.provider_track
        match = item.current_match or (item.candidates[0] if item.candidates else None)
        table.add_row(
            item.provider_track_id,
            track.name if track else "[dim]not cached[/dim]",
            _artists(track.artist_names) if track else "",
            item.match_type.value,
            f"{match.name} [dim]({match.id})[/dim]" if match else "[dim]none[/dim]",
            item.match_level.value if item.match_level else "",
        )

    console.print(table)
