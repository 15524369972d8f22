"""Recommendation and completion services."""

from .completion import CompletionService
from .recommendations import RecommendationService
from .scoring import RandomSource, ScoringEngine, SystemRandomSource
from .sessions import SessionService

__all__ = [
    "CompletionService",
    "RandomSource",
    "RecommendationService",
    "ScoringEngine",
    "SessionService",
    "SystemRandomSource",
]
