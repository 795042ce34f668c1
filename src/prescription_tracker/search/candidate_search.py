# ============================================================================
# src/prescription_tracker/search/candidate_search.py
# ============================================================================
"""
Candidate Search Engine

Turns a free-text drug name into a ranked list of MedicationCandidate objects
using RxNav, trying strategies in order:

1. Exact lookup          confidence 100
2. Approximate lookup    confidence = source score (90 if absent)
3. Spelling suggestions  confidence 85
4. Relation expansion    confidence 75 (only when 1-4 candidates so far)

Every strategy shares one SearchAccumulator so a display name is only ever
accepted once per search (case-insensitive). A strategy that raises is
recorded as a failed StrategyOutcome; candidates it accepted before failing
are kept and the remaining strategies still run.

When nothing is found a single placeholder candidate is returned:
confidence 50 if the source answered with no data, 25 if every strategy
failed.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional, Set, Tuple

from ..config.sources_config import source_settings
from ..core.medication import MedicationCandidate
from ..sources.rxnorm_client import ConceptDetail, EXPANSION_TTYS, RxNormClient
from ..utils.exceptions import SourceError
from ..utils.logging import log_performance

logger = logging.getLogger(__name__)


EXACT_CONFIDENCE = 100
APPROXIMATE_DEFAULT_CONFIDENCE = 90
SPELLING_CONFIDENCE = 85
RELATED_CONFIDENCE = 75
NO_DATA_CONFIDENCE = 50
FAILURE_CONFIDENCE = 25

EXACT_MAX_IDS = 5
APPROXIMATE_MAX_ENTRIES = 20
APPROXIMATE_MAX_CANDIDATES = 10
SPELLING_MAX_SUGGESTIONS = 8
RELATED_PER_GROUP = 3
RELATED_TRIGGER_MAX = 4


@dataclass
class SearchAccumulator:
    """Running results of one search plus the lowercase names already used."""
    results: List[MedicationCandidate] = field(default_factory=list)
    seen_names: Set[str] = field(default_factory=set)

    def claim(self, name: str) -> bool:
        """Reserve name; False if it was already taken."""
        key = name.lower()
        if key in self.seen_names:
            return False
        self.seen_names.add(key)
        return True

    def add(self, candidate: MedicationCandidate) -> None:
        self.seen_names.add(candidate.name.lower())
        self.results.append(candidate)

    def __len__(self) -> int:
        return len(self.results)


@dataclass
class StrategyOutcome:
    """What one strategy contributed, and whether it finished."""
    strategy: str
    candidates: List[MedicationCandidate] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def succeeded(cls, strategy: str, candidates: List[MedicationCandidate]) -> "StrategyOutcome":
        return cls(strategy=strategy, candidates=candidates)

    @classmethod
    def failed(cls, strategy: str, candidates: List[MedicationCandidate], reason: str) -> "StrategyOutcome":
        return cls(strategy=strategy, candidates=candidates, error=reason)


Strategy = Callable[[str, SearchAccumulator], Awaitable[None]]


class CandidateSearchEngine:
    """
    Multi-strategy medication search over RxNav.

    Config options:
        min_query_length: Shorter queries return [] (default: SEARCH_MIN_QUERY_LENGTH)
        max_results: Ranked list size (default: SEARCH_MAX_RESULTS)
    """

    def __init__(self, rxnorm: Optional[RxNormClient] = None, config: Optional[Dict[str, Any]] = None):
        self.config = config or {}
        self.rxnorm = rxnorm or RxNormClient(self.config.get('rxnorm'))
        self.min_query_length = self.config.get('min_query_length', source_settings.SEARCH_MIN_QUERY_LENGTH)
        self.max_results = self.config.get('max_results', source_settings.SEARCH_MAX_RESULTS)

    @property
    def strategies(self) -> List[Tuple[str, Strategy]]:
        return [
            ("exact", self._exact_lookup),
            ("approximate", self._approximate_lookup),
            ("spelling", self._spelling_lookup),
            ("related", self._related_expansion),
        ]

    # ========================================================================
    # PUBLIC API
    # ========================================================================

    @log_performance(logger, "Medication search")
    async def search(self, query: str) -> List[MedicationCandidate]:
        """
        Ranked candidates for query, best first.

        Never raises; short queries give [] without any network call.
        """
        search_term = (query or "").strip()
        if len(search_term) < self.min_query_length:
            return []

        logger.info(f"Searching for medication: '{search_term}'")

        try:
            accumulator = SearchAccumulator()
            outcomes = []
            for name, strategy in self.strategies:
                outcome = await self._run_strategy(name, strategy, search_term, accumulator)
                if outcome is not None:
                    outcomes.append(outcome)

            ranked = self._rank(accumulator.results)
            if ranked:
                logger.info(
                    f"Final results for '{search_term}': "
                    f"{', '.join(f'{c.title} ({c.confidence_score:g})' for c in ranked)}"
                )
                return ranked

            all_failed = bool(outcomes) and not any(o.ok for o in outcomes)
            confidence = FAILURE_CONFIDENCE if all_failed else NO_DATA_CONFIDENCE
            logger.info(f"No RxNorm results for '{search_term}', creating basic entry")

        except Exception as e:
            logger.error(f"Medication search failed completely for '{search_term}': {e}")
            confidence = FAILURE_CONFIDENCE

        return [MedicationCandidate.placeholder(search_term, confidence)]

    async def close(self):
        await self.rxnorm.close()

    # ========================================================================
    # ORCHESTRATION
    # ========================================================================

    async def _run_strategy(
        self,
        name: str,
        strategy: Strategy,
        query: str,
        accumulator: SearchAccumulator
    ) -> Optional[StrategyOutcome]:
        """Run one strategy; None means it did not apply to this search."""
        if name == "related" and not (0 < len(accumulator) <= RELATED_TRIGGER_MAX):
            return None

        before = len(accumulator)
        try:
            await strategy(query, accumulator)
        except Exception as e:
            logger.warning(f"{name} search strategy failed for '{query}': {e}")
            return StrategyOutcome.failed(name, accumulator.results[before:], str(e))

        added = accumulator.results[before:]
        logger.debug(f"{name} search strategy added {len(added)} candidates")
        return StrategyOutcome.succeeded(name, added)

    def _rank(self, candidates: List[MedicationCandidate]) -> List[MedicationCandidate]:
        ranked = sorted(candidates, key=lambda c: c.confidence_score, reverse=True)
        return ranked[:self.max_results]

    # ========================================================================
    # STRATEGIES
    # ========================================================================

    async def _exact_lookup(self, query: str, acc: SearchAccumulator) -> None:
        rxcuis = await self.rxnorm.find_rxcuis(query)
        for rxcui in rxcuis[:EXACT_MAX_IDS]:
            detail = await self._fetch_detail(rxcui)
            if detail and acc.claim(detail.name):
                acc.add(self._candidate_from_detail(detail, EXACT_CONFIDENCE))

    async def _approximate_lookup(self, query: str, acc: SearchAccumulator) -> None:
        matches = await self.rxnorm.approximate_term(query, max_entries=APPROXIMATE_MAX_ENTRIES)
        for match in matches[:APPROXIMATE_MAX_CANDIDATES]:
            if match.name and not acc.claim(match.name):
                continue

            detail = await self._fetch_detail(match.rxcui)
            if not detail:
                continue
            if detail.name.lower() != match.name.lower() and not acc.claim(detail.name):
                continue

            score = match.score if match.score else APPROXIMATE_DEFAULT_CONFIDENCE
            acc.add(self._candidate_from_detail(detail, score))

    async def _spelling_lookup(self, query: str, acc: SearchAccumulator) -> None:
        suggestions = await self.rxnorm.spelling_suggestions(query)
        for suggestion in suggestions[:SPELLING_MAX_SUGGESTIONS]:
            if not acc.claim(suggestion):
                continue

            rxcuis = await self.rxnorm.find_rxcuis(suggestion)
            if not rxcuis:
                continue

            detail = await self._fetch_detail(rxcuis[0])
            if not detail:
                continue
            if detail.name.lower() != suggestion.lower() and not acc.claim(detail.name):
                continue

            acc.add(self._candidate_from_detail(detail, SPELLING_CONFIDENCE))

    async def _related_expansion(self, query: str, acc: SearchAccumulator) -> None:
        first = acc.results[0]
        if not first.concept_id:
            return

        groups = await self.rxnorm.get_related(first.concept_id, EXPANSION_TTYS)
        for group in groups:
            if len(acc) >= self.max_results:
                break
            for concept in group.concepts[:RELATED_PER_GROUP]:
                if len(acc) >= self.max_results:
                    break
                if not acc.claim(concept.name):
                    continue
                acc.add(MedicationCandidate(
                    title=concept.name,
                    name=concept.name,
                    concept_id=concept.rxcui or None,
                    brand_names=[concept.name],
                    confidence_score=RELATED_CONFIDENCE,
                ))

    # ========================================================================
    # HELPERS
    # ========================================================================

    async def _fetch_detail(self, rxcui: str) -> Optional[ConceptDetail]:
        """Concept detail, or None when the lookup fails."""
        try:
            return await self.rxnorm.get_details(rxcui)
        except SourceError as e:
            logger.warning(f"Error getting RxNorm details for RXCUI {rxcui}: {e}")
            return None

    @staticmethod
    def _candidate_from_detail(detail: ConceptDetail, confidence: float) -> MedicationCandidate:
        # Generic names are left to the labeling source
        return MedicationCandidate(
            title=detail.name,
            name=detail.name,
            concept_id=detail.rxcui,
            brand_names=list(detail.brand_names) or [detail.name],
            dosage_forms=list(detail.dosage_forms),
            confidence_score=confidence,
        )
