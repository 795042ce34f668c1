# ============================================================================
# tests/unit/test_medication_models.py
# ============================================================================
"""
Tests for medication records and name helpers
"""

import pytest
from dataclasses import FrozenInstanceError

from prescription_tracker.core.medication import EnrichedMedicationRecord, MedicationCandidate
from prescription_tracker.utils.text_normalizer import (
    dedupe_casefold,
    remove_overlap,
    slugify,
    strip_link_brackets,
    title_case,
)


class TestMedicationCandidate:
    """Test MedicationCandidate invariants"""

    def test_requires_title(self):
        with pytest.raises(ValueError):
            MedicationCandidate(title="")

    def test_name_defaults_to_title(self):
        assert MedicationCandidate(title="Abilify").name == "Abilify"

    def test_empty_names_dropped(self):
        candidate = MedicationCandidate(title="Abilify", generic_names=["", "Aripiprazole"], brand_names=[None, ""])
        assert candidate.generic_names == ["Aripiprazole"]
        assert candidate.brand_names == []

    def test_placeholder(self):
        placeholder = MedicationCandidate.placeholder("abilfy", 25)
        assert placeholder.title == placeholder.name == "abilfy"
        assert placeholder.brand_names == ["abilfy"]
        assert placeholder.concept_id is None
        assert not placeholder.from_api

    def test_to_dict_includes_source_url(self):
        data = MedicationCandidate(title="Abilify Discmelt").to_dict()
        assert data["source_url"] == "https://www.drugs.com/abilify-discmelt.html"
        assert data["confidence_score"] == 0.0


class TestEnrichedMedicationRecord:
    """Test canonical record construction"""

    def test_aliases_scenario(self):
        record = EnrichedMedicationRecord.build(
            title="Abilify",
            generic_names=["Aripiprazole"],
            brand_names=["Abilify", "ABILIFY", "Abilify ODT"],
        )
        assert record.aliases == ["Aripiprazole", "Abilify ODT"]

    def test_generic_and_brand_disjoint(self):
        record = EnrichedMedicationRecord.build(
            title="Zoloft",
            generic_names=["Sertraline", "sertraline"],
            brand_names=["SERTRALINE", "Zoloft"],
        )
        assert record.generic_names == ("Sertraline",)
        assert record.brand_names == ("Zoloft",)

    def test_aliases_never_contain_title(self):
        record = EnrichedMedicationRecord.build(
            title="aripiprazole",
            generic_names=["Aripiprazole"],
            brand_names=["Abilify", "abilify"],
        )
        assert record.aliases == ["Abilify"]

    def test_empty_description_is_none(self):
        assert EnrichedMedicationRecord.build(title="Abilify", description="").description is None

    def test_is_immutable(self):
        record = EnrichedMedicationRecord.build(title="Abilify")
        with pytest.raises(FrozenInstanceError):
            record.title = "Other"

    def test_to_dict(self):
        record = EnrichedMedicationRecord.build(title="Abilify", generic_names=["Aripiprazole"])
        data = record.to_dict()
        assert data["aliases"] == ["Aripiprazole"]
        assert data["brand_names"] == []


class TestTextNormalizer:

    def test_title_case(self):
        assert title_case("ARIPIPRAZOLE") == "Aripiprazole"
        assert title_case("abilify odt") == "Abilify Odt"

    def test_dedupe_keeps_first(self):
        assert dedupe_casefold(["b", "A", "a", "", "B"]) == ["b", "A"]

    def test_dedupe_exclude(self):
        assert dedupe_casefold(["Abilify", "Aripiprazole"], exclude=["ABILIFY"]) == ["Aripiprazole"]

    def test_remove_overlap(self):
        assert remove_overlap(["Zoloft", "sertraline"], ["Sertraline"]) == ["Zoloft"]

    def test_slugify(self):
        assert slugify("Abilify ODT 10mg") == "abilify-odt-10mg"

    def test_strip_link_brackets(self):
        assert strip_link_brackets("[[Dr Smith]]") == "Dr Smith"
