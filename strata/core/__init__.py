"""
Strata Core Module
===================

Contains the data models shared by every stage of the Strata password
strength estimator. The orchestrating engine lives in
:mod:`strata.core.engine` and is imported from there, since it depends on
the analyzers that in turn depend on these models.
"""

from strata.core.models import (
    Feedback,
    KeyboardGraph,
    Match,
    PatternKind,
    RankTable,
    SearchResult,
    StrengthResult,
)

__all__ = [
    "Feedback",
    "KeyboardGraph",
    "Match",
    "PatternKind",
    "RankTable",
    "SearchResult",
    "StrengthResult",
]
