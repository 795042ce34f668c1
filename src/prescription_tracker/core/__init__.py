# ============================================================================
# src/prescription_tracker/core/__init__.py
# ============================================================================
"""
Core records. The PrescriptionTracker facade lives in core.tracker.
"""

from .medication import MedicationCandidate, EnrichedMedicationRecord
from .prescription import PrescriptionData, parse_date

__all__ = [
    "MedicationCandidate",
    "EnrichedMedicationRecord",
    "PrescriptionData",
    "parse_date",
]
