# ============================================================================
# src/prescription_tracker/notes/medication_note.py
# ============================================================================
"""
Medication reference notes

One note per canonical title, "<Medications folder>/<Title>.md":

    ---
    title: Abilify
    generic_names:
    - Aripiprazole
    brand_names:
    - Abilify ODT
    aliases:
    - Aripiprazole
    - Abilify ODT
    ...
    ---
    # Abilify

    Used to treat schizophrenia.

    ## Additional Resources
    ...

Empty list properties are left out of the front matter.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from .frontmatter import render_frontmatter
from .vault import Vault
from ..config.vault_config import VaultSettings, vault_settings
from ..core.medication import EnrichedMedicationRecord
from ..utils.exceptions import NoteError
from ..utils.file_utils import sanitize_filename
from ..utils.text_normalizer import slugify

logger = logging.getLogger(__name__)


def medication_frontmatter(record: EnrichedMedicationRecord) -> Dict[str, Any]:
    data: Dict[str, Any] = {"title": record.title}
    for key, values in (
        ("generic_names", list(record.generic_names)),
        ("brand_names", list(record.brand_names)),
        ("aliases", record.aliases),
        ("dosage_forms", list(record.dosage_forms)),
        ("drug_class", list(record.drug_class)),
    ):
        if values:
            data[key] = values
    return data


def render_medication_note(record: EnrichedMedicationRecord) -> str:
    slug = slugify(record.title)
    drugs_com_url = f"https://www.drugs.com/{slug}.html"
    goodrx_url = f"https://www.goodrx.com/{slug}/what-is"

    body = f"# {record.title}\n\n"
    if record.description:
        body += f"{record.description}\n\n"

    body += "## Additional Resources\n\n"
    body += f"- [Drugs.com - Complete Drug Information]({drugs_com_url})\n"
    body += f"- [GoodRx - What is {record.title}?]({goodrx_url})\n"

    return render_frontmatter(medication_frontmatter(record)) + body


class MedicationNoteWriter:
    """Writes EnrichedMedicationRecord notes into the medications folder."""

    def __init__(self, vault: Vault, settings: Optional[VaultSettings] = None):
        self.vault = vault
        self.settings = settings or vault_settings

    @property
    def folder(self) -> str:
        return self.settings.MEDICATIONS_FOLDER

    def note_path(self, record: EnrichedMedicationRecord) -> str:
        """
        Raises:
            NoteError: nothing of the title survives file name sanitizing
        """
        name = sanitize_filename(record.title).strip()
        if not name:
            raise NoteError(f"Medication title '{record.title}' has no usable file name characters")
        return f"{self.folder}/{name}.md"

    def write(self, record: EnrichedMedicationRecord, allow_overwrite: bool = False) -> Path:
        """
        Create the note for record.

        Raises:
            NoteError: the title does not make a file name
            NoteExistsError: a note for this title exists and allow_overwrite is False
        """
        relative = self.note_path(record)
        self.vault.ensure_folder(self.folder)
        path = self.vault.write_note(
            relative,
            render_medication_note(record),
            overwrite=allow_overwrite,
        )
        logger.info(f"Medication note written: {path.name}")
        return path
