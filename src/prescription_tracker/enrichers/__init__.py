# ============================================================================
# src/prescription_tracker/enrichers/__init__.py
# ============================================================================
"""
Enrichers add labeling data to medication candidates:
- MedicationEnricher: openFDA class, names and description merged with RxNav data
"""

from .medication_enricher import MedicationEnricher, LabelEnrichment

__all__ = [
    "MedicationEnricher",
    "LabelEnrichment",
]
