"""Use cases for proposing, accepting and reviewing track matches."""

from .accept_matches import (
    AcceptMatchesCommand,
    AcceptMatchesResult,
    AcceptMatchesUseCase,
    AcceptRequest,
    AcceptResult,
)
from .find_candidates import FindCandidatesUseCase
from .review_matches import ReviewItem, ReviewMatchesUseCase, ReviewPage

__all__ = [
    "AcceptMatchesCommand",
    "AcceptMatchesResult",
    "AcceptMatchesUseCase",
    "AcceptRequest",
    "AcceptResult",
    "FindCandidatesUseCase",
    "ReviewItem",
    "ReviewMatchesUseCase",
    "ReviewPage",
]
