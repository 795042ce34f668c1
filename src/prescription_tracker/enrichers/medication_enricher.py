# ============================================================================
# src/prescription_tracker/enrichers/medication_enricher.py
# ============================================================================
"""
Medication Enricher

Enriches a selected search candidate with openFDA labeling data:
- Pharmacologic class (EPC, falling back to MoA)
- Generic name (Title Case)
- Brand names
- "Used to treat ..." description from indications_and_usage

and merges both sources into one EnrichedMedicationRecord in which generic
and brand names are de-duplicated and disjoint. Enrichment is best effort:
when openFDA has nothing or cannot be reached the candidate's own data is
used.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..core.medication import EnrichedMedicationRecord, MedicationCandidate
from ..extractors.description_extractor import DescriptionExtractor
from ..sources.openfda_client import OpenFDAClient
from ..utils.exceptions import SourceError
from ..utils.logging import log_performance
from ..utils.text_normalizer import dedupe_casefold, remove_overlap, title_case

logger = logging.getLogger(__name__)


@dataclass
class LabelEnrichment:
    """Fields taken from the first matching openFDA label."""
    drug_class: List[str] = field(default_factory=list)
    generic_names: List[str] = field(default_factory=list)
    brand_names: List[str] = field(default_factory=list)
    description: str = ""


class MedicationEnricher:
    """
    Fuses RxNav candidates with openFDA labeling.

    Usage:
        enricher = MedicationEnricher()
        record = await enricher.enrich_candidate(candidate)
    """

    def __init__(
        self,
        openfda: Optional[OpenFDAClient] = None,
        extractor: Optional[DescriptionExtractor] = None,
        config: Optional[Dict[str, Any]] = None
    ):
        self.config = config or {}
        self.openfda = openfda or OpenFDAClient(self.config.get('openfda'))
        self.extractor = extractor or DescriptionExtractor()

    async def enrich(self, title: str) -> Optional[LabelEnrichment]:
        """
        Look title up in openFDA labeling.

        Returns None when there is no matching label or the source fails.
        """
        logger.info(f"Searching openFDA for: '{title}'")
        try:
            results = await self.openfda.search_labels(title, limit=1)
        except SourceError as e:
            logger.warning(f"openFDA lookup failed for {title}: {e}")
            return None

        if not results:
            return None

        try:
            enrichment = self._parse_label(results[0])
        except (AttributeError, TypeError, IndexError) as e:
            logger.warning(f"Unexpected openFDA label shape for {title}: {e}")
            return None

        logger.info(f"Found openFDA labeling data for: {title}")
        return enrichment

    def _parse_label(self, label: Dict[str, Any]) -> LabelEnrichment:
        openfda = label.get("openfda") or {}

        drug_class = openfda.get("pharm_class_epc") or openfda.get("pharm_class_moa") or []

        generic_names = []
        listed_generics = openfda.get("generic_name") or []
        if listed_generics and listed_generics[0]:
            generic_names.append(title_case(listed_generics[0]))

        description = ""
        indications = label.get("indications_and_usage") or []
        if indications:
            description = self.extractor.extract(indications[0])

        return LabelEnrichment(
            drug_class=[c for c in drug_class if c],
            generic_names=generic_names,
            brand_names=[b for b in (openfda.get("brand_name") or []) if b],
            description=description,
        )

    def merge(
        self,
        candidate: MedicationCandidate,
        enrichment: Optional[LabelEnrichment],
        title: Optional[str] = None
    ) -> EnrichedMedicationRecord:
        """
        Fuse candidate data with labeling data. Later steps correct earlier
        ones: class override, generic union, brand union (or title inferred
        as a brand), brand names that are also generics removed, description
        override.
        """
        title = title or title_case(candidate.title)
        drug_class = list(candidate.drug_class)
        generic_names = dedupe_casefold(candidate.generic_names)
        brand_names = dedupe_casefold(candidate.brand_names)
        description = None

        if enrichment is not None:
            if enrichment.drug_class:
                drug_class = list(enrichment.drug_class)

            generic_names = dedupe_casefold(generic_names + enrichment.generic_names)

            if enrichment.brand_names:
                brand_names = dedupe_casefold(brand_names + enrichment.brand_names)
            elif generic_names and title.lower() not in {g.lower() for g in generic_names}:
                # Generic differs from the title, so the title is a brand
                brand_names = dedupe_casefold(brand_names + [title])

            brand_names = remove_overlap(brand_names, generic_names)

            if enrichment.description:
                description = enrichment.description

        record = EnrichedMedicationRecord.build(
            title=title,
            generic_names=generic_names,
            brand_names=brand_names,
            drug_class=drug_class,
            dosage_forms=candidate.dosage_forms,
            description=description,
            concept_id=candidate.concept_id,
        )

        logger.debug(
            f"Final names for {title}: generic={list(record.generic_names)} "
            f"brand={list(record.brand_names)} aliases={record.aliases}"
        )
        return record

    @log_performance(logger, "Medication enrichment")
    async def enrich_candidate(self, candidate: MedicationCandidate) -> EnrichedMedicationRecord:
        """Title-case the candidate, enrich it and merge both sources."""
        title = title_case(candidate.title)
        enrichment = await self.enrich(title)
        if enrichment is None:
            logger.info(f"No enrichment available for {title}, using search data only")
        return self.merge(candidate, enrichment, title=title)

    async def close(self):
        await self.openfda.close()
