# ============================================================================
# FILE: tests/conftest.py
# ============================================================================
"""
Pytest configuration and shared fixtures for testing.

The drug data sources are replaced with in-memory fakes so no test touches
the network.
"""

import pytest
from pathlib import Path

from prescription_tracker.config.vault_config import VaultSettings
from prescription_tracker.notes.vault import Vault
from prescription_tracker.sources.rxnorm_client import (
    ApproximateMatch,
    ConceptDetail,
    ConceptGroup,
    RelatedConcept,
)
from prescription_tracker.utils.exceptions import SourceUnavailableError


class FakeRxNormClient:
    """
    Stand-in for RxNormClient.

    exact: lowercase name -> RxCUIs
    approximate: ApproximateMatch list returned for any term
    spelling: suggestions returned for any name
    details: RxCUI -> ConceptDetail
    related: RxCUI -> ConceptGroup list
    failing: method names that raise SourceUnavailableError
    """

    def __init__(self, exact=None, approximate=None, spelling=None, details=None, related=None, failing=()):
        self.exact = exact or {}
        self.approximate = approximate or []
        self.spelling = spelling or []
        self.details = details or {}
        self.related = related or {}
        self.failing = set(failing)
        self.calls = []
        self.closed = False

    def _record(self, method, *args):
        self.calls.append((method,) + args)
        if method in self.failing:
            raise SourceUnavailableError(f"{method} unavailable", source="rxnav")

    async def find_rxcuis(self, name):
        self._record("find_rxcuis", name)
        return list(self.exact.get(name.lower(), []))

    async def approximate_term(self, term, max_entries=20):
        self._record("approximate_term", term)
        return list(self.approximate)

    async def spelling_suggestions(self, name):
        self._record("spelling_suggestions", name)
        return list(self.spelling)

    async def get_details(self, rxcui):
        self._record("get_details", rxcui)
        return self.details.get(rxcui)

    async def get_related(self, rxcui, ttys=()):
        self._record("get_related", rxcui)
        return list(self.related.get(rxcui, []))

    async def close(self):
        self.closed = True


class FakeOpenFDAClient:
    """Stand-in for OpenFDAClient returning fixed label records."""

    def __init__(self, labels=None, error=None):
        self.labels = labels or []
        self.error = error
        self.queries = []
        self.closed = False

    async def search_labels(self, name, limit=1):
        self.queries.append(name)
        if self.error is not None:
            raise self.error
        return list(self.labels[:limit])

    async def close(self):
        self.closed = True


def detail(rxcui, name, brand_names=None, dosage_forms=None):
    return ConceptDetail(
        rxcui=rxcui,
        name=name,
        brand_names=list(brand_names or [name]),
        dosage_forms=list(dosage_forms or []),
    )


@pytest.fixture
def abilify_rxnorm():
    """RxNav fake that knows Abilify by exact name plus a couple of relatives"""
    return FakeRxNormClient(
        exact={"abilify": ["89013"]},
        approximate=[
            ApproximateMatch(rxcui="89013", name="Abilify", score=100.0),
            ApproximateMatch(rxcui="615175", name="Abilify Discmelt", score=67.0),
        ],
        details={
            "89013": detail("89013", "Abilify", ["Abilify"], ["tablet"]),
            "615175": detail("615175", "Abilify Discmelt", ["Abilify Discmelt"], ["tablet"]),
        },
        related={
            "89013": [
                ConceptGroup(tty="BN", concepts=[
                    RelatedConcept(rxcui="1992298", name="Abilify Mycite", tty="BN"),
                    RelatedConcept(rxcui="89013", name="Abilify", tty="BN"),
                ]),
                ConceptGroup(tty="IN", concepts=[
                    RelatedConcept(rxcui="89013-in", name="aripiprazole", tty="IN"),
                ]),
            ],
        },
    )


@pytest.fixture
def abilify_label():
    """openFDA label record for Abilify"""
    return {
        "openfda": {
            "brand_name": ["ABILIFY", "Abilify MyCite"],
            "generic_name": ["ARIPIPRAZOLE"],
            "pharm_class_epc": ["Atypical Antipsychotic [EPC]"],
            "pharm_class_moa": ["Dopamine D2 Receptor Partial Agonists [MoA]"],
        },
        "indications_and_usage": [
            "1 INDICATIONS AND USAGE ABILIFY (aripiprazole) Tablets are indicated "
            "for the treatment of: Schizophrenia"
        ],
    }


@pytest.fixture
def generic_only_label():
    """openFDA label that lists a generic name but no brand names"""
    return {
        "openfda": {
            "generic_name": ["SERTRALINE HYDROCHLORIDE"],
            "pharm_class_moa": ["Serotonin Uptake Inhibitors [MoA]"],
        },
        "indications_and_usage": ["<p>Used for: major depressive disorder in adults</p>"],
    }


@pytest.fixture
def vault_path(tmp_path) -> Path:
    path = tmp_path / "vault"
    path.mkdir()
    return path


@pytest.fixture
def vault(vault_path) -> Vault:
    return Vault(vault_path)


@pytest.fixture
def vault_settings():
    """Vault layout with a selected patient note"""
    return VaultSettings(SELECTED_PATIENT_NOTES=["Jane Doe"])


def write_file(root: Path, relative: str, content: str = "") -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path
