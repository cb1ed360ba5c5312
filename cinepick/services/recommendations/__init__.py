"""Recommendation core: aggregation, preference filtering, exclusions."""

from cinepick.services.recommendations.aggregator import (
    CandidateAggregator,
    CandidatePool,
    select_seeds,
)
from cinepick.services.recommendations.engine import RecommendationEngine
from cinepick.services.recommendations.exclusions import ExclusionSet, initial_exclusions
from cinepick.services.recommendations.predicate import describe, matches
from cinepick.services.recommendations.session import RecommendationSession

__all__ = [
    "CandidateAggregator",
    "CandidatePool",
    "ExclusionSet",
    "RecommendationEngine",
    "RecommendationSession",
    "describe",
    "initial_exclusions",
    "matches",
    "select_seeds",
]
