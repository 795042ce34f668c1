# ============================================================================
# src/prescription_tracker/sources/rxnorm_client.py
# ============================================================================
"""
RxNav Client

Concept-search source (NIH/NLM RxNorm REST API). Supports:
- exact name -> RxCUIs                 (rxcui.json?search=1)
- approximate/fuzzy term -> candidates (approximateTerm.json)
- spelling suggestions                 (spellingsuggestions.json)
- RxCUI -> properties                  (rxcui/{id}/properties.json)
- RxCUI -> related concepts by TTY     (rxcui/{id}/related.json)

No API key is needed. All methods raise SourceError subclasses on failure;
"nothing found" is an empty list or None.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from .base import BaseSourceClient, as_list
from ..config.sources_config import source_settings


# Term types used for brand/generic relation lookups
DETAIL_TTYS = ("BN", "SBD", "GPCK", "IN", "MIN")
EXPANSION_TTYS = ("BN", "SBD", "GPCK", "IN")

# Dosage-form words recognised in SBD/GPCK concept names
DOSAGE_FORM_PATTERN = re.compile(
    r'\b(tablet|capsule|injection|liquid|cream|ointment|gel|solution|'
    r'suspension|powder|spray|patch|suppository)\b',
    re.IGNORECASE
)


@dataclass
class ApproximateMatch:
    rxcui: str
    name: str
    score: Optional[float] = None


@dataclass
class RelatedConcept:
    rxcui: str
    name: str
    tty: str


@dataclass
class ConceptGroup:
    tty: str
    concepts: List[RelatedConcept] = field(default_factory=list)


@dataclass
class ConceptDetail:
    rxcui: str
    name: str
    brand_names: List[str] = field(default_factory=list)
    dosage_forms: List[str] = field(default_factory=list)


def _parse_score(value: Any) -> Optional[float]:
    if value in (None, ""):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def parse_concept_groups(data: Optional[Dict[str, Any]]) -> List[ConceptGroup]:
    """Flatten relatedGroup.conceptGroup into ConceptGroup objects."""
    groups = []
    related = (data or {}).get("relatedGroup") or {}
    for group in as_list(related.get("conceptGroup")):
        concepts = []
        for concept in as_list(group.get("conceptProperties")):
            name = concept.get("name")
            if not name:
                continue
            concepts.append(RelatedConcept(
                rxcui=str(concept.get("rxcui", "")),
                name=name,
                tty=concept.get("tty") or group.get("tty", ""),
            ))
        groups.append(ConceptGroup(tty=group.get("tty", ""), concepts=concepts))
    return groups


def build_concept_detail(rxcui: str, name: str, groups: Iterable[ConceptGroup]) -> ConceptDetail:
    """
    Collect brand names (BN concepts) and dosage-form words (from multi-word
    SBD/GPCK names). With no BN concept the display name is the brand name.
    """
    brand_names: List[str] = []
    dosage_forms: List[str] = []

    for group in groups:
        for concept in group.concepts:
            if concept.tty == "BN" and concept.name not in brand_names:
                brand_names.append(concept.name)
            if concept.tty in ("SBD", "GPCK") and " " in concept.name:
                match = DOSAGE_FORM_PATTERN.search(concept.name)
                if match:
                    form = match.group(1).lower()
                    if form not in dosage_forms:
                        dosage_forms.append(form)

    if not brand_names and name:
        brand_names.append(name)

    return ConceptDetail(rxcui=rxcui, name=name, brand_names=brand_names, dosage_forms=dosage_forms)


class RxNormClient(BaseSourceClient):
    """
    Async RxNav client.

    Config options:
        base_url: RxNav REST root (default: RXNAV_BASE_URL setting)
        timeout: Request timeout in seconds
    """

    source_name = "rxnav"

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        super().__init__(config)
        self.base_url = self.config.get('base_url', source_settings.RXNAV_BASE_URL).rstrip('/')

    async def find_rxcuis(self, name: str) -> List[str]:
        """Exact (normalized) name match -> RxCUIs."""
        data = await self._get_json(
            f"{self.base_url}/rxcui.json",
            params={"name": name, "search": 1},
        )
        id_group = (data or {}).get("idGroup") or {}
        return [str(r) for r in as_list(id_group.get("rxnormId")) if r]

    async def approximate_term(self, term: str, max_entries: int = 20) -> List[ApproximateMatch]:
        """Fuzzy term search -> scored candidates in source order."""
        data = await self._get_json(
            f"{self.base_url}/approximateTerm.json",
            params={"term": term, "maxEntries": max_entries},
        )
        group = (data or {}).get("approximateGroup") or {}
        matches = []
        for candidate in as_list(group.get("candidate")):
            rxcui = candidate.get("rxcui")
            if not rxcui:
                continue
            matches.append(ApproximateMatch(
                rxcui=str(rxcui),
                name=candidate.get("name") or candidate.get("candidate") or "",
                score=_parse_score(candidate.get("score")),
            ))
        return matches

    async def spelling_suggestions(self, name: str) -> List[str]:
        """Spelling corrections for a misspelled drug name."""
        data = await self._get_json(
            f"{self.base_url}/spellingsuggestions.json",
            params={"name": name},
        )
        group = (data or {}).get("suggestionGroup") or {}
        suggestion_list = group.get("suggestionList") or {}
        return [s for s in as_list(suggestion_list.get("suggestion")) if s]

    async def get_properties(self, rxcui: str) -> Optional[Dict[str, Any]]:
        """Concept properties (name, tty, synonym, ...) or None."""
        data = await self._get_json(f"{self.base_url}/rxcui/{rxcui}/properties.json")
        return (data or {}).get("properties") or None

    async def get_related(self, rxcui: str, ttys: Iterable[str] = EXPANSION_TTYS) -> List[ConceptGroup]:
        """Related concepts filtered by term type, grouped as RxNav groups them."""
        data = await self._get_json(
            f"{self.base_url}/rxcui/{rxcui}/related.json",
            params={"tty": " ".join(ttys)},
        )
        return parse_concept_groups(data)

    async def get_details(self, rxcui: str) -> Optional[ConceptDetail]:
        """
        Display name plus brand names and dosage forms for one concept.

        Returns None when the concept has no properties.
        """
        props = await self.get_properties(rxcui)
        if not props:
            self.logger.debug(f"No properties found for RXCUI {rxcui}")
            return None

        name = props.get("name") or ""
        if not name:
            return None

        groups = await self.get_related(rxcui, DETAIL_TTYS)
        detail = build_concept_detail(rxcui, name, groups)

        self.logger.debug(
            f"Details for {name}: {len(detail.brand_names)} brand names, "
            f"{len(detail.dosage_forms)} dosage forms"
        )
        return detail
