# ============================================================================
# src/prescription_tracker/utils/file_utils.py
# ============================================================================
"""
File utilities for working inside a notes vault.
"""

import os
import re
import tempfile
from pathlib import Path
from typing import List, Optional


# Characters removed from generated note names
ILLEGAL_NOTE_CHARS = re.compile(r'[<>:"/\\|?*\[\]]')
ILLEGAL_PATH_CHARS = re.compile(r'[<>:"/\\|?*]')


def ensure_directory(path: Path) -> Path:
    """
    Ensure directory exists, create if not.

    Args:
        path: Directory path

    Returns:
        Path to directory
    """
    path.mkdir(parents=True, exist_ok=True)
    return path


def sanitize_filename(filename: str, keep_brackets: bool = False) -> str:
    """
    Remove characters that are not allowed in note file names.

    Spaces and hyphens are kept. Square brackets are removed too unless
    keep_brackets is set, since they break wiki links.

    Args:
        filename: Original filename
        keep_brackets: Leave '[' and ']' in place

    Returns:
        Sanitized filename
    """
    pattern = ILLEGAL_PATH_CHARS if keep_brackets else ILLEGAL_NOTE_CHARS
    return pattern.sub('', filename)


def normalize_vault_path(path: str) -> str:
    """
    Normalize a vault-relative path: forward slashes, no duplicate or
    leading/trailing separators.
    """
    parts = [p for p in path.replace('\\', '/').split('/') if p and p != '.']
    return '/'.join(parts)


def find_case_insensitive(path: Path) -> Optional[Path]:
    """
    Find an existing file whose name matches path's name case-insensitively
    in the same directory.

    Args:
        path: Wanted file path

    Returns:
        The existing path, or None
    """
    if path.exists():
        return path

    directory = path.parent
    if not directory.is_dir():
        return None

    wanted = path.name.lower()
    for candidate in directory.iterdir():
        if candidate.is_file() and candidate.name.lower() == wanted:
            return candidate

    return None


def atomic_write_text(path: Path, content: str) -> Path:
    """
    Write text to path through a temporary file in the same directory, so
    readers see either the old or the new content.

    Args:
        path: Destination file
        content: Text content

    Returns:
        Destination path
    """
    ensure_directory(path.parent)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            f.write(content)
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise

    return path


def list_markdown_files(directory: Path, recursive: bool = True) -> List[Path]:
    """
    List Markdown notes in directory.

    Args:
        directory: Directory to search
        recursive: Include sub-folders

    Returns:
        Sorted list of note paths
    """
    if not directory.is_dir():
        return []

    pattern = '**/*.md' if recursive else '*.md'
    return sorted(p for p in directory.glob(pattern) if p.is_file())
