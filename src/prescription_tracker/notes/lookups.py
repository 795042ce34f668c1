# ============================================================================
# src/prescription_tracker/notes/lookups.py
# ============================================================================
"""
Pick lists for the data-entry form, read from the vault.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from .frontmatter import parse_frontmatter
from .prescription_note import FILE_CLASS
from .vault import Vault
from ..config.vault_config import VaultSettings, vault_settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NoteLink:
    name: str
    link: str  # wiki link, "[[stem]]"

    def to_dict(self):
        return {"name": self.name, "link": self.link}


class VaultLookups:
    """Doctors, patients, medications, diagnoses and manufacturers known to the vault."""

    def __init__(self, vault: Vault, settings: Optional[VaultSettings] = None):
        self.vault = vault
        self.settings = settings or vault_settings

    def _read_frontmatter(self, path) -> dict:
        try:
            return parse_frontmatter(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Error reading file {path}: {e}")
            return {}

    def _is_doctor(self, relationship) -> bool:
        wanted = self.settings.DOCTOR_RELATIONSHIP_VALUE
        if isinstance(relationship, list):
            return wanted in relationship
        if isinstance(relationship, str):
            return relationship == wanted
        return False

    def doctors(self) -> List[NoteLink]:
        """People notes whose relationship property marks them as a doctor."""
        doctors = []
        for path in self.vault.markdown_files(self.settings.PEOPLE_FOLDER):
            frontmatter = self._read_frontmatter(path)
            relationship = frontmatter.get(self.settings.RELATIONSHIP_PROPERTY)
            if relationship is None or not self._is_doctor(relationship):
                continue
            display_name = frontmatter.get("name") or path.stem
            doctors.append(NoteLink(name=str(display_name), link=f"[[{path.stem}]]"))

        logger.debug(f"Total doctors found: {len(doctors)}")
        return sorted(doctors, key=lambda d: d.name.lower())

    def patients(self) -> List[NoteLink]:
        """Selected patient notes that exist in the people folder."""
        patients = []
        for selected in self.settings.SELECTED_PATIENT_NOTES:
            path = self.vault.find_note(f"{self.settings.PEOPLE_FOLDER}/{selected}.md")
            if path is None:
                continue
            display_name = self._read_frontmatter(path).get("name") or selected
            patients.append(NoteLink(name=str(display_name), link=f"[[{selected}]]"))
        return sorted(patients, key=lambda p: p.name.lower())

    def _folder_links(self, folder: str) -> List[NoteLink]:
        links = [NoteLink(name=p.stem, link=f"[[{p.stem}]]") for p in self.vault.markdown_files(folder)]
        return sorted(links, key=lambda n: n.name.lower())

    def medications(self) -> List[NoteLink]:
        return self._folder_links(self.settings.MEDICATIONS_FOLDER)

    def diagnoses(self) -> List[NoteLink]:
        return self._folder_links(self.settings.DIAGNOSIS_FOLDER)

    def manufacturers(self) -> List[str]:
        """Distinct 'mfg' values recorded on existing prescription notes."""
        manufacturers = set()
        for path in self.vault.markdown_files(self.settings.PRESCRIPTION_FOLDER):
            frontmatter = self._read_frontmatter(path)
            if frontmatter.get("fileClass") != FILE_CLASS or not frontmatter.get("mfg"):
                continue
            manufacturer = str(frontmatter["mfg"]).strip()
            if manufacturer and manufacturer != "undefined":
                manufacturers.add(manufacturer)
        return sorted(manufacturers)

    def pharmacies(self) -> List[str]:
        return list(self.settings.PHARMACY_LIST)
