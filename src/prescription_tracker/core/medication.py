# ============================================================================
# src/prescription_tracker/core/medication.py
# ============================================================================
"""
Medication records
- MedicationCandidate: tentative search result from the concept source
- EnrichedMedicationRecord: canonical, de-duplicated record for note output
"""

from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional, Tuple

from ..utils.text_normalizer import dedupe_casefold, slugify


def _clean(names) -> List[str]:
    return [n for n in (names or []) if n]


@dataclass
class MedicationCandidate:
    title: str
    name: str = ""
    concept_id: Optional[str] = None  # RxCUI; None for synthetic entries

    generic_names: List[str] = field(default_factory=list)
    brand_names: List[str] = field(default_factory=list)
    drug_class: List[str] = field(default_factory=list)
    dosage_forms: List[str] = field(default_factory=list)

    confidence_score: float = 0.0
    from_api: bool = True  # False for synthesized placeholders

    def __post_init__(self):
        if not self.title:
            raise ValueError("MedicationCandidate.title must be non-empty")
        if not self.name:
            self.name = self.title
        self.generic_names = _clean(self.generic_names)
        self.brand_names = _clean(self.brand_names)
        self.drug_class = _clean(self.drug_class)
        self.dosage_forms = _clean(self.dosage_forms)

    @property
    def source_url(self) -> str:
        return f"https://www.drugs.com/{slugify(self.name)}.html"

    @classmethod
    def placeholder(cls, query: str, confidence: float) -> "MedicationCandidate":
        """Synthetic entry used when no source produced anything."""
        return cls(
            title=query,
            name=query,
            brand_names=[query],
            confidence_score=confidence,
            from_api=False,
        )

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["source_url"] = self.source_url
        return data


@dataclass(frozen=True)
class EnrichedMedicationRecord:
    """
    Canonical medication record.

    generic_names and brand_names are case-insensitively unique and disjoint;
    aliases is derived from them and never repeats the title.
    """
    title: str
    generic_names: Tuple[str, ...] = ()
    brand_names: Tuple[str, ...] = ()
    drug_class: Tuple[str, ...] = ()
    dosage_forms: Tuple[str, ...] = ()
    description: Optional[str] = None
    concept_id: Optional[str] = None

    @classmethod
    def build(
        cls,
        title: str,
        generic_names=(),
        brand_names=(),
        drug_class=(),
        dosage_forms=(),
        description: Optional[str] = None,
        concept_id: Optional[str] = None,
    ) -> "EnrichedMedicationRecord":
        """Construct a record, enforcing de-duplication and generic/brand disjointness."""
        generics = dedupe_casefold(generic_names)
        brands = dedupe_casefold(brand_names, exclude=generics)
        return cls(
            title=title,
            generic_names=tuple(generics),
            brand_names=tuple(brands),
            drug_class=tuple(dedupe_casefold(drug_class)),
            dosage_forms=tuple(dedupe_casefold(dosage_forms)),
            description=description or None,
            concept_id=concept_id,
        )

    @property
    def aliases(self) -> List[str]:
        return dedupe_casefold(
            list(self.generic_names) + list(self.brand_names),
            exclude=[self.title],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "generic_names": list(self.generic_names),
            "brand_names": list(self.brand_names),
            "aliases": self.aliases,
            "drug_class": list(self.drug_class),
            "dosage_forms": list(self.dosage_forms),
            "description": self.description,
            "concept_id": self.concept_id,
        }
