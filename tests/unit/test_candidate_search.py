# ============================================================================
# tests/unit/test_candidate_search.py
# ============================================================================
"""
Tests for the RxNav candidate search cascade
"""

import pytest

from conftest import FakeRxNormClient, detail
from prescription_tracker.search.candidate_search import (
    CandidateSearchEngine,
    FAILURE_CONFIDENCE,
    NO_DATA_CONFIDENCE,
    SearchAccumulator,
    StrategyOutcome,
)
from prescription_tracker.core.medication import MedicationCandidate
from prescription_tracker.sources.rxnorm_client import ApproximateMatch


def test_accumulator_claims_names_once():
    """Names are claimed case-insensitively"""
    acc = SearchAccumulator()
    assert acc.claim("Abilify")
    assert not acc.claim("ABILIFY")

    acc.add(MedicationCandidate(title="Zoloft"))
    assert not acc.claim("zoloft")
    assert len(acc) == 1


def test_strategy_outcome():
    assert StrategyOutcome.succeeded("exact", []).ok
    assert not StrategyOutcome.failed("exact", [], "timeout").ok


@pytest.mark.asyncio
async def test_short_query_makes_no_calls():
    """Queries shorter than two characters return nothing"""
    rxnorm = FakeRxNormClient()
    engine = CandidateSearchEngine(rxnorm=rxnorm)

    assert await engine.search("a") == []
    assert await engine.search("  b  ") == []
    assert rxnorm.calls == []


@pytest.mark.asyncio
async def test_exact_and_approximate_results(abilify_rxnorm):
    """Exact match ranks first and duplicate names are dropped"""
    engine = CandidateSearchEngine(rxnorm=abilify_rxnorm)

    results = await engine.search("abilify")
    names = [c.name for c in results]

    assert names[0] == "Abilify"
    assert results[0].confidence_score == 100
    assert results[0].concept_id == "89013"
    assert results[0].dosage_forms == ["tablet"]
    assert results[0].generic_names == []
    assert len({n.lower() for n in names}) == len(names)
    assert "Abilify Discmelt" in names


@pytest.mark.asyncio
async def test_related_expansion_when_few_results(abilify_rxnorm):
    """Relatives of the first candidate are added with confidence 75"""
    engine = CandidateSearchEngine(rxnorm=abilify_rxnorm)

    results = await engine.search("abilify")
    by_name = {c.name: c for c in results}

    assert by_name["Abilify Mycite"].confidence_score == 75
    assert by_name["aripiprazole"].confidence_score == 75
    assert [c.name for c in results] == ["Abilify", "Abilify Mycite", "aripiprazole", "Abilify Discmelt"]


@pytest.mark.asyncio
async def test_approximate_score_defaults_to_90():
    rxnorm = FakeRxNormClient(
        approximate=[ApproximateMatch(rxcui="1", name="Zoloft", score=None)],
        details={"1": detail("1", "Zoloft")},
    )
    engine = CandidateSearchEngine(rxnorm=rxnorm)

    results = await engine.search("zolof")

    assert results[0].name == "Zoloft"
    assert results[0].confidence_score == 90


@pytest.mark.asyncio
async def test_spelling_suggestions():
    rxnorm = FakeRxNormClient(
        exact={"sertraline": ["36437"]},
        spelling=["sertraline"],
        details={"36437": detail("36437", "sertraline", ["Zoloft"])},
    )
    engine = CandidateSearchEngine(rxnorm=rxnorm)

    results = await engine.search("sertralin")

    assert results[0].name == "sertraline"
    assert results[0].confidence_score == 85
    assert results[0].brand_names == ["Zoloft"]


@pytest.mark.asyncio
async def test_results_are_ranked_and_capped():
    """Eight results at most, best first"""
    exact_ids = [f"e{i}" for i in range(5)]
    details = {rxcui: detail(rxcui, f"Exact {rxcui}") for rxcui in exact_ids}
    approximate = []
    for i in range(10):
        details[f"a{i}"] = detail(f"a{i}", f"Approx {i}")
        approximate.append(ApproximateMatch(rxcui=f"a{i}", name=f"Approx {i}", score=float(50 + i)))

    rxnorm = FakeRxNormClient(exact={"many": exact_ids}, approximate=approximate, details=details)
    engine = CandidateSearchEngine(rxnorm=rxnorm)

    results = await engine.search("many")

    assert len(results) == 8
    assert [c.confidence_score for c in results] == [100, 100, 100, 100, 100, 59.0, 58.0, 57.0]
    # More than four candidates, so no relation lookup
    assert not any(call[0] == "get_related" for call in rxnorm.calls)


@pytest.mark.asyncio
async def test_no_data_gives_placeholder_50():
    """Reachable source with no matches"""
    engine = CandidateSearchEngine(rxnorm=FakeRxNormClient())

    results = await engine.search("notadrug")

    assert len(results) == 1
    placeholder = results[0]
    assert placeholder.title == "notadrug"
    assert placeholder.brand_names == ["notadrug"]
    assert placeholder.generic_names == []
    assert placeholder.confidence_score == NO_DATA_CONFIDENCE
    assert placeholder.from_api is False


@pytest.mark.asyncio
async def test_all_strategies_failing_gives_placeholder_25():
    rxnorm = FakeRxNormClient(failing={"find_rxcuis", "approximate_term", "spelling_suggestions", "get_related"})
    engine = CandidateSearchEngine(rxnorm=rxnorm)

    results = await engine.search("abilify")

    assert len(results) == 1
    assert results[0].brand_names == ["abilify"]
    assert results[0].confidence_score == FAILURE_CONFIDENCE


@pytest.mark.asyncio
async def test_failing_strategy_does_not_stop_others(abilify_rxnorm):
    """Approximate failure still leaves exact and related results"""
    abilify_rxnorm.failing = {"approximate_term"}
    engine = CandidateSearchEngine(rxnorm=abilify_rxnorm)

    results = await engine.search("abilify")
    names = [c.name for c in results]

    assert names[0] == "Abilify"
    assert "Abilify Mycite" in names
    assert "Abilify Discmelt" not in names


@pytest.mark.asyncio
async def test_detail_failures_are_absorbed():
    """Concept IDs without retrievable details contribute nothing"""
    rxnorm = FakeRxNormClient(exact={"abilify": ["1", "2"]}, failing={"get_details"})
    engine = CandidateSearchEngine(rxnorm=rxnorm)

    results = await engine.search("abilify")

    assert len(results) == 1
    assert results[0].confidence_score == NO_DATA_CONFIDENCE


@pytest.mark.asyncio
async def test_unexpected_error_gives_placeholder_25(abilify_rxnorm):
    engine = CandidateSearchEngine(rxnorm=abilify_rxnorm)

    def broken_rank(candidates):
        raise RuntimeError("boom")

    engine._rank = broken_rank
    results = await engine.search("abilify")

    assert len(results) == 1
    assert results[0].confidence_score == FAILURE_CONFIDENCE


@pytest.mark.asyncio
async def test_close_closes_client(abilify_rxnorm):
    engine = CandidateSearchEngine(rxnorm=abilify_rxnorm)
    await engine.close()
    assert abilify_rxnorm.closed
