# ============================================================================
# tests/unit/test_description_extractor.py
# ============================================================================
"""
Tests for the indication-text description extractor
"""

import pytest

from prescription_tracker.extractors.description_extractor import (
    ACNE_DESCRIPTION,
    DescriptionExtractor,
    extract_description,
    from_acne_terms,
    from_first_sentence,
    from_is_indicated,
    from_named_product,
    from_treatment_list,
    normalize_indication_text,
    rewrite_conditions,
)


class TestNormalization:
    """Test markup and header cleanup"""

    def test_strips_tags_and_entities(self):
        raw = "<p>Take&nbsp;with&nbsp;food &amp; water</p>"
        assert normalize_indication_text(raw) == "Take with food & water"

    def test_collapses_whitespace(self):
        assert normalize_indication_text("  a \n\n b\t c  ") == "a b c"

    def test_strips_numbered_section_header(self):
        raw = "1.1 INDICATIONS AND USAGE Zyrtec relieves allergy symptoms"
        assert normalize_indication_text(raw) == "Zyrtec relieves allergy symptoms"

    def test_leaves_text_without_header(self):
        raw = "Zyrtec relieves allergy symptoms"
        assert normalize_indication_text(raw) == raw


class TestConditionRewrites:
    """Test the fixed phrase substitutions"""

    def test_bipolar_phrasing(self):
        conditions = "Schizophrenia Acute Treatment of Manic or Mixed Episodes associated with Bipolar I Disorder"
        assert rewrite_conditions(conditions) == (
            "Schizophrenia, acute episodes of Manic or Mixed Episodes in people with bipolar disorder"
        )

    def test_adjunctive_and_depression(self):
        conditions = "Schizophrenia Adjunctive Treatment of Major Depressive Disorder"
        assert rewrite_conditions(conditions) == "Schizophrenia, as add-on treatment for major depression"

    def test_associated_with_is_case_insensitive(self):
        assert rewrite_conditions("Irritability ASSOCIATED WITH Autistic Disorder") == (
            "Irritability in people with autism"
        )

    def test_tourettes(self):
        assert rewrite_conditions("Tourette's Disorder") == "Tourette's syndrome"


class TestStrategies:
    """Each strategy on its own"""

    def test_treatment_list(self):
        text = "Tablets are indicated for the treatment of: Schizophrenia Adjunctive Treatment of Major Depressive Disorder"
        assert from_treatment_list(text) == (
            "Used to treat schizophrenia, as add-on treatment for major depression."
        )

    def test_treatment_list_rejects_short_capture(self):
        assert from_treatment_list("Used for: pain") is None

    def test_is_indicated(self):
        text = "LISINOPRIL is indicated in adults with hypertension."
        assert from_is_indicated(text) == "Used to treat adults with hypertension."

    def test_is_indicated_rejects_short_condition(self):
        assert from_is_indicated("It is indicated for acne.") is None

    def test_named_product(self):
        text = "Differin Gel is indicated for the topical treatment of acne vulgaris"
        assert from_named_product(text) == "Used to treat the topical treatment of acne vulgaris."

    def test_named_product_requires_indicated(self):
        assert from_named_product("Differin Gel is a retinoid for topical use") is None

    def test_first_sentence(self):
        text = "Short one. This medicine is used to relieve mild pain. Other text."
        assert from_first_sentence(text) == "This medicine is used to relieve mild pain."

    def test_first_sentence_needs_keyword(self):
        assert from_first_sentence("Store this product at room temperature.") is None

    def test_acne_terms(self):
        assert from_acne_terms("Reduces comedones") == ACNE_DESCRIPTION
        assert from_acne_terms("Reduces fever") is None


class TestDescriptionExtractor:
    """Test the ordered extraction pipeline"""

    def test_abilify_label(self):
        raw = (
            "1 INDICATIONS AND USAGE ABILIFY (aripiprazole) Tablets are indicated "
            "for the treatment of: Schizophrenia"
        )
        assert extract_description(raw) == "Used to treat schizophrenia."

    def test_markup_label(self):
        raw = "<p>Used&nbsp;for:  chronic   hepatitis B infection</p>"
        assert extract_description(raw) == "Used to treat chronic hepatitis b infection."

    def test_acne_fallback(self):
        assert extract_description("Reduces comedones.") == ACNE_DESCRIPTION

    def test_empty_input(self):
        assert extract_description("") == ""

    def test_unextractable_text(self):
        assert extract_description("Store at room temperature.") == ""

    def test_stable_on_own_output(self):
        first = extract_description("Tablets are indicated for the treatment of: Schizophrenia")
        assert extract_description(first) == first

    def test_first_matching_strategy_wins(self):
        extractor = DescriptionExtractor(strategies=(
            lambda text: None,
            lambda text: "First.",
            lambda text: "Second.",
        ))
        assert extractor.extract("anything") == "First."

    def test_strategy_error_gives_empty(self):
        def broken(text):
            raise RuntimeError("boom")

        extractor = DescriptionExtractor(strategies=(broken,))
        assert extractor.extract("Used for: chronic hepatitis") == ""
