# ============================================================================
# src/prescription_tracker/notes/prescription_note.py
# ============================================================================
"""
Prescription notes

Each filled prescription becomes a note in a date-organized folder:

    Prescriptions/2024/2024-03/20240305 - Rx123456 -- Abilify 10mg.md

An optional scanned drug label is renamed to
"<YYYYMMDD> - <Pharmacy> -- <Medication> <Dose>.<ext>" next to where it
already is, and linked from the note.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from .dates import date_based_path
from .frontmatter import render_frontmatter
from .vault import Vault
from ..config.vault_config import VaultSettings, vault_settings
from ..core.prescription import PrescriptionData, parse_date
from ..utils.exceptions import NoteError, NoteExistsError
from ..utils.file_utils import sanitize_filename
from ..utils.text_normalizer import strip_link_brackets

logger = logging.getLogger(__name__)

FILE_CLASS = "Prescriptions"


class PrescriptionNoteWriter:
    """Builds and writes prescription notes."""

    def __init__(self, vault: Vault, settings: Optional[VaultSettings] = None):
        self.vault = vault
        self.settings = settings or vault_settings

    def folder_for(self, data: PrescriptionData) -> str:
        fill_date = parse_date(data.fill_date)
        if fill_date is None:
            raise ValueError("fill date is required")
        return date_based_path(
            fill_date,
            self.settings.PRESCRIPTION_FOLDER,
            self.settings.DATE_ORGANIZATION,
        )

    @staticmethod
    def file_stem(data: PrescriptionData) -> str:
        medication = sanitize_filename(data.medication_name)
        dosage = sanitize_filename(data.dosage)
        number = data.prescription_number or "UNKNOWN"
        return f"{data.fill_date_compact} - Rx{number} -- {medication} {dosage}".rstrip()

    @staticmethod
    def frontmatter(data: PrescriptionData, file_stem: str, drug_label_file: str = "") -> Dict[str, Any]:
        return {
            "fileClass": FILE_CLASS,
            "filename": file_stem,
            "rxNum": data.prescription_number,
            "medication": data.medication_name,
            "diagnosis": data.diagnosis,
            "pharmacy": data.pharmacy,
            "prescriber": data.prescribed_by,
            "qtyWrit": data.quantity_written,
            "qtyDisp": data.quantity_dispensed,
            "refills": data.refills_remaining,
            "dose": data.dosage,
            "dateWritten": data.date_written,
            "dateFilled": data.fill_date,
            "dateObtained": data.obtained_date,
            "copay": data.copay,
            "mfg": data.manufacturer,
            "patient": data.patient,
            "drugLabel": f"[[{drug_label_file}]]" if drug_label_file else "",
            "substituted": data.substituted,
            "daySupply": data.days_supply,
            "dateFinished": data.date_finished,
        }

    def render(self, data: PrescriptionData, file_stem: str, drug_label_file: str = "") -> str:
        heading = f"# {strip_link_brackets(data.medication_name)} {data.dosage}".rstrip()
        return render_frontmatter(self.frontmatter(data, file_stem, drug_label_file)) + f"\n{heading}\n"

    def rename_drug_label(self, data: PrescriptionData) -> str:
        """
        Rename the scanned label file for this prescription.

        Returns the new file name (with extension) or '' when the label
        could not be renamed; failures are logged, not raised.
        """
        if not data.drug_label or not data.drug_label.strip():
            return ""

        original = self.vault.find_note(data.drug_label)
        if original is None or not original.is_file():
            logger.warning(f"Drug label file not found: {data.drug_label}")
            return ""

        if not (data.fill_date and data.pharmacy and data.medication_name and data.dosage):
            logger.warning("Missing required fields for drug label renaming")
            return ""

        pharmacy = sanitize_filename(strip_link_brackets(data.pharmacy), keep_brackets=True)
        medication = sanitize_filename(strip_link_brackets(data.medication_name), keep_brackets=True)
        dosage = sanitize_filename(strip_link_brackets(data.dosage), keep_brackets=True)
        new_name = f"{data.fill_date_compact} - {pharmacy} -- {medication} {dosage}{original.suffix}"

        try:
            renamed = self.vault.rename(original, new_name)
        except (NoteExistsError, OSError) as e:
            logger.warning(f"Could not rename drug label {original.name}: {e}")
            return ""

        logger.info(f"Drug label renamed to: {renamed.name}")
        return renamed.name

    @staticmethod
    def validate(data: PrescriptionData) -> None:
        """
        Check the form dates before anything touches the vault.

        Raises:
            NoteError: fill date missing, or any entered date not YYYY-MM-DD
        """
        if not data.fill_date or not data.fill_date.strip():
            raise NoteError("Fill date is required")

        for label, value in (
            ("fill", data.fill_date),
            ("obtained", data.obtained_date),
            ("written", data.date_written),
        ):
            try:
                parse_date(value)
            except (TypeError, ValueError) as e:
                raise NoteError(f"Invalid {label} date '{value}': expected YYYY-MM-DD") from e

    def write(self, data: PrescriptionData) -> Path:
        """
        Create the prescription note. Never overwrites.

        The drug label is only renamed once the note is known to be writable.

        Raises:
            NoteExistsError: a note with the same name already exists
            NoteError: the fill date is missing, or a date is not YYYY-MM-DD
        """
        self.validate(data)
        folder = self.folder_for(data)
        file_stem = self.file_stem(data)
        relative = f"{folder}/{file_stem}.md"

        existing = self.vault.find_note(relative)
        if existing is not None:
            raise NoteExistsError(f"Note already exists: {existing.name}", path=existing)

        self.vault.ensure_folder(folder)
        drug_label_file = self.rename_drug_label(data)

        path = self.vault.write_note(
            relative,
            self.render(data, file_stem, drug_label_file),
            overwrite=False,
        )
        logger.info(f"Prescription note created: {file_stem}")
        return path
