"""Pure algorithms for comparing provider tracks with library candidates.

These functions contain no external dependencies: they score candidates by
counting field-level differences and rank them so the closest match comes first.
"""

from collections.abc import Iterable

from matchbook.domain.entities import (
    CandidateItem,
    DifferenceField,
    ProviderTrack,
    TrackDifference,
    TrackMatchType,
)

# Separator used to flatten artist lists before comparison
ARTIST_SEPARATOR = ", "


def _differs(provider_value: str, library_value: str) -> bool:
    return provider_value.casefold() != library_value.casefold()


def calculate_differences(
    provider: ProviderTrack, candidate: CandidateItem
) -> list[TrackDifference]:
    """List the fields on which a library candidate disagrees with a provider track.

    Comparison is case-insensitive. Artist lists are joined with ", " in their
    original order, so reordered artists count as a difference. A missing
    candidate album is compared as an empty string.

    Returns:
        Differences in fixed field order: TrackName, AlbumName, Artists, AlbumArtists
    """
    pairs = [
        (DifferenceField.TRACK_NAME, provider.name, candidate.name),
        (DifferenceField.ALBUM_NAME, provider.album_name, candidate.album_name or ""),
        (
            DifferenceField.ARTISTS,
            ARTIST_SEPARATOR.join(provider.artist_names),
            ARTIST_SEPARATOR.join(candidate.artist_names),
        ),
        (
            DifferenceField.ALBUM_ARTISTS,
            ARTIST_SEPARATOR.join(provider.album_artist_names),
            ARTIST_SEPARATOR.join(candidate.album_artist_names),
        ),
    ]

    return [
        TrackDifference(field=name, provider_value=ours, library_value=theirs)
        for name, ours, theirs in pairs
        if _differs(ours, theirs)
    ]


def rank_candidates(
    provider: ProviderTrack, candidates: Iterable[CandidateItem]
) -> list[CandidateItem]:
    """Annotate candidates with their differences and order them fewest-first.

    The sort is stable: candidates with the same number of differences keep
    the order the library index returned them in.
    """
    annotated = [
        candidate.with_differences(calculate_differences(provider, candidate))
        for candidate in candidates
    ]
    return sorted(annotated, key=lambda candidate: len(candidate.differences))


def classify_match_type(candidates: list[CandidateItem]) -> TrackMatchType:
    """More than one candidate is ambiguous; zero or one is not."""
    if len(candidates) > 1:
        return TrackMatchType.ONE_TO_MANY
    return TrackMatchType.ONE_TO_ONE


def build_search_query(
    provider: ProviderTrack, search_query: str | None, max_length: int
) -> str:
    """Pick the library search text: the explicit query, else the track name."""
    query = search_query if search_query is not None else provider.name
    return query[:max_length]
