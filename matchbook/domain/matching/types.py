"""Pure domain types for candidate search results."""

from attrs import define, field

from matchbook.domain.entities import CandidateItem, TrackMatchType


@define(frozen=True, slots=True)
class SearchResult:
    """Outcome of a library index search.

    A failed search carries an error message instead of raising, so callers
    can degrade to an empty candidate list.
    """

    items: list[CandidateItem] = field(factory=list)
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.error is None

    @classmethod
    def failed(cls, error: str) -> "SearchResult":
        return cls(items=[], error=error)


@define(frozen=True, slots=True)
class CandidateSearchResult:
    """Ranked library candidates for one provider track."""

    candidates: list[CandidateItem] = field(factory=list)
    match_type: TrackMatchType = TrackMatchType.ONE_TO_ONE
    query: str = ""
