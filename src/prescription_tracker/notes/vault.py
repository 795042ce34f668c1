# ============================================================================
# src/prescription_tracker/notes/vault.py
# ============================================================================
"""
Vault storage

A vault is a plain folder of Markdown notes addressed by vault-relative
paths ("Medications/Abilify.md"). Note lookups are case-insensitive on the
file name, so "abilify.md" and "Abilify.md" are the same note. Writes go
through a temporary file and os.replace.
"""

import logging
from pathlib import Path
from typing import List, Optional

from ..utils.exceptions import InvalidNoteLocationError, NoteExistsError, NoteNotFoundError
from ..utils.file_utils import (
    atomic_write_text,
    ensure_directory,
    find_case_insensitive,
    list_markdown_files,
    normalize_vault_path,
)

logger = logging.getLogger(__name__)


class Vault:
    """Filesystem-backed note store rooted at one folder."""

    def __init__(self, root: Path):
        self.root = Path(root).resolve()

    def path(self, relative: str) -> Path:
        """Absolute path for a vault-relative path; refuses to leave the vault."""
        normalized = normalize_vault_path(relative)
        target = (self.root / normalized).resolve() if normalized else self.root
        if target != self.root and self.root not in target.parents:
            raise InvalidNoteLocationError(f"Path escapes the vault: {relative}")
        return target

    def relative(self, path: Path) -> str:
        return Path(path).resolve().relative_to(self.root).as_posix()

    def ensure_folder(self, relative: str) -> Path:
        return ensure_directory(self.path(relative))

    def find_note(self, relative: str) -> Optional[Path]:
        """Existing file matching relative, compared case-insensitively on the name."""
        return find_case_insensitive(self.path(relative))

    def read_note(self, relative: str) -> str:
        existing = self.find_note(relative)
        if existing is None:
            raise NoteNotFoundError(f"Note not found: {relative}")
        return existing.read_text(encoding="utf-8")

    def write_note(self, relative: str, content: str, overwrite: bool = False) -> Path:
        """
        Create or replace a note.

        Args:
            relative: Vault-relative target path
            content: Full note text
            overwrite: Replace an existing note (matched case-insensitively)

        Returns:
            Path that was written (the existing file's path when replacing)

        Raises:
            NoteExistsError: the note exists and overwrite is False
        """
        target = self.path(relative)
        existing = find_case_insensitive(target)

        if existing is not None:
            if not overwrite:
                logger.warning(f"File already exists, not overwriting: {self.relative(existing)}")
                raise NoteExistsError(f"Note already exists: {existing.name}", path=existing)
            if existing != target:
                logger.info(f"Found case-insensitive match: {self.relative(existing)} for {relative}")
            atomic_write_text(existing, content)
            logger.info(f"Note updated: {self.relative(existing)}")
            return existing

        atomic_write_text(target, content)
        logger.info(f"Note created: {self.relative(target)}")
        return target

    def delete_note(self, relative: str) -> None:
        existing = self.find_note(relative)
        if existing is None:
            raise NoteNotFoundError(f"Note not found: {relative}")
        existing.unlink()
        logger.info(f"Deleted note: {self.relative(existing)}")

    def rename(self, source: Path, new_name: str) -> Path:
        """
        Rename a file within its folder.

        Raises:
            NoteExistsError: a file named new_name already exists there
        """
        destination = source.with_name(new_name)
        if find_case_insensitive(destination) is not None:
            raise NoteExistsError(f"Target filename already exists: {new_name}", path=destination)
        source.rename(destination)
        return destination

    def markdown_files(self, folder: str, recursive: bool = True) -> List[Path]:
        return list_markdown_files(self.path(folder), recursive=recursive)
