# ============================================================================
# src/prescription_tracker/notes/__init__.py
# ============================================================================
"""
Note materialization:
- Vault: case-insensitive, atomic note storage
- MedicationNoteWriter: medication reference notes
- PrescriptionNoteWriter: date-organized prescription notes
- VaultLookups: pick lists for the data-entry form
"""

from .vault import Vault
from .frontmatter import render_frontmatter, parse_frontmatter, split_frontmatter
from .dates import date_based_path, render_date_pattern
from .medication_note import MedicationNoteWriter, render_medication_note, medication_frontmatter
from .prescription_note import PrescriptionNoteWriter
from .lookups import VaultLookups, NoteLink

__all__ = [
    "Vault",
    "render_frontmatter",
    "parse_frontmatter",
    "split_frontmatter",
    "date_based_path",
    "render_date_pattern",
    "MedicationNoteWriter",
    "render_medication_note",
    "medication_frontmatter",
    "PrescriptionNoteWriter",
    "VaultLookups",
    "NoteLink",
]
