# ============================================================================
# src/prescription_tracker/core/tracker.py
# ============================================================================
"""
Prescription Tracker

Main entry point used by the API:

1. Search medications (RxNav candidate cascade)
2. Enrich the chosen candidate (openFDA) into a canonical record
3. Write medication notes (create, or overwrite when converting)
4. Write prescription notes into date folders
5. Serve form pick lists from the vault
"""

import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

from .medication import EnrichedMedicationRecord, MedicationCandidate
from .prescription import PrescriptionData
from ..config.base_config import base_settings
from ..config.vault_config import VaultSettings, vault_settings
from ..enrichers.medication_enricher import MedicationEnricher
from ..notes.lookups import VaultLookups
from ..notes.medication_note import MedicationNoteWriter
from ..notes.prescription_note import PrescriptionNoteWriter
from ..notes.vault import Vault
from ..search.candidate_search import CandidateSearchEngine
from ..utils.exceptions import InvalidNoteLocationError, NoteNotFoundError
from ..utils.file_utils import normalize_vault_path

logger = logging.getLogger(__name__)


_NAME_CLEANUPS = (
    re.compile(r'^\d{4}-\d{2}-\d{2}\s*-\s*'),
    re.compile(r'^\d{8}\s*-\s*'),
    re.compile(r'^Rx\d+\s*-\s*'),
    re.compile(r'\s+\d+(\.\d+)?\s*(mg|mcg|g|ml|units?)(\s+.*)?$', re.IGNORECASE),
    re.compile(r'\s*-\s*medication$', re.IGNORECASE),
    re.compile(r'\s*note$', re.IGNORECASE),
    re.compile(r'^\s*-\s*'),
    re.compile(r'\s*-\s*$'),
)


def extract_medication_name(file_stem: str) -> Optional[str]:
    """
    Medication name from a note's file name.

    "2024-01-01 - Lisinopril 10mg" -> "Lisinopril"
    """
    name = file_stem
    for pattern in _NAME_CLEANUPS:
        name = pattern.sub('', name)
    name = name.strip()
    return name or None


class PrescriptionTracker:
    """
    Coordinates search, enrichment and note output for one vault.

    Usage:
        tracker = PrescriptionTracker(vault_path=Path("~/Notes"))
        candidates = await tracker.search_medications("abilify")
        path = await tracker.create_medication_note(candidates[0])
    """

    def __init__(
        self,
        vault_path: Optional[Path] = None,
        search_engine: Optional[CandidateSearchEngine] = None,
        enricher: Optional[MedicationEnricher] = None,
        settings: Optional[VaultSettings] = None,
        config: Optional[Dict[str, Any]] = None
    ):
        self.config = config or {}
        self.settings = settings or vault_settings
        self.vault = Vault(vault_path or base_settings.VAULT_PATH)

        self.search_engine = search_engine or CandidateSearchEngine(config=self.config.get('search'))
        self.enricher = enricher or MedicationEnricher(config=self.config.get('enrichment'))

        self.medication_notes = MedicationNoteWriter(self.vault, self.settings)
        self.prescription_notes = PrescriptionNoteWriter(self.vault, self.settings)
        self.lookups = VaultLookups(self.vault, self.settings)

        logger.info(f"Prescription tracker initialized for vault {self.vault.root}")

    async def search_medications(self, query: str) -> List[MedicationCandidate]:
        return await self.search_engine.search(query)

    async def enrich(self, candidate: MedicationCandidate) -> EnrichedMedicationRecord:
        return await self.enricher.enrich_candidate(candidate)

    async def create_medication_note(
        self,
        candidate: MedicationCandidate,
        allow_overwrite: bool = False
    ) -> Path:
        """
        Enrich candidate and write its medication note.

        Raises:
            NoteExistsError: a note for the title exists and allow_overwrite is False
        """
        record = await self.enrich(candidate)
        return self.medication_notes.write(record, allow_overwrite=allow_overwrite)

    async def convert_medication_note(self, relative_path: str) -> Path:
        """
        Regenerate an existing medication note with the current structure.

        The medication name is taken from the file name, searched, and the top
        candidate is written with overwrite. The old file is removed when the
        new note lands at a different path.

        Raises:
            NoteNotFoundError: the file does not exist
            InvalidNoteLocationError: the file is not a Markdown note in the medications folder
        """
        normalized = normalize_vault_path(relative_path)
        folder = normalize_vault_path(self.settings.MEDICATIONS_FOLDER)

        if not normalized.startswith(folder + "/"):
            raise InvalidNoteLocationError(
                f"Current file is not in the medications folder. Expected folder: \"{self.settings.MEDICATIONS_FOLDER}\""
            )
        if not normalized.lower().endswith(".md"):
            raise InvalidNoteLocationError("Current file is not a markdown file")

        existing = self.vault.find_note(normalized)
        if existing is None:
            raise NoteNotFoundError(f"Note not found: {relative_path}")

        medication_name = extract_medication_name(existing.stem)
        if not medication_name:
            raise InvalidNoteLocationError(f"Could not extract medication name from {existing.name}")

        logger.info(f"Converting medication file: {existing.name} -> {medication_name}")

        candidates = await self.search_medications(medication_name)
        if not candidates:
            raise NoteNotFoundError(f"No medication data found for: {medication_name}")

        new_path = await self.create_medication_note(candidates[0], allow_overwrite=True)

        if new_path.resolve() != existing.resolve() and existing.exists():
            existing.unlink()
            logger.info(f"Deleted old file: {self.vault.relative(existing)}")

        return new_path

    def create_prescription_note(self, data: PrescriptionData) -> Path:
        return self.prescription_notes.write(data)

    async def close(self):
        await self.search_engine.close()
        await self.enricher.close()
