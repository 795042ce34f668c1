"""
Medication candidate search over RxNav.
"""

from .candidate_search import (
    CandidateSearchEngine,
    SearchAccumulator,
    StrategyOutcome,
)

__all__ = [
    "CandidateSearchEngine",
    "SearchAccumulator",
    "StrategyOutcome",
]
