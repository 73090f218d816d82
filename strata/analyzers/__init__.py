"""
Strata Analyzers
=================

The stages of the estimation pipeline: the pattern matchers and their
aggregator, the minimum-entropy searcher, the scorer and the feedback
generator.
"""

from strata.analyzers.matcher import compute_matches
from strata.analyzers.searcher import find_minimum_entropy
from strata.analyzers.scorer import crack_time_metrics, score
from strata.analyzers.feedback import get_feedback

__all__ = [
    "compute_matches",
    "crack_time_metrics",
    "find_minimum_entropy",
    "get_feedback",
    "score",
]
