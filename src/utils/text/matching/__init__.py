"""Matching package."""

from .matching import MATCH_THRESHOLD, MatchResult, select_best
from .similarity import score_title

__all__ = [
    "MATCH_THRESHOLD",
    "MatchResult",
    "select_best",
    "score_title",
]
