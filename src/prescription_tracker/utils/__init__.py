# ============================================================================
# src/prescription_tracker/utils/__init__.py
# ============================================================================
"""
Utility modules for the prescription tracker.
"""

from .exceptions import (
    PrescriptionTrackerError,
    ConfigurationError,
    SourceError,
    SourceUnavailableError,
    SourceResponseError,
    NoteError,
    NoteExistsError,
    NoteNotFoundError,
    InvalidNoteLocationError,
)

from .logging import (
    setup_logging,
    log_performance,
    JsonFormatter,
)

from .file_utils import (
    ensure_directory,
    sanitize_filename,
    normalize_vault_path,
    find_case_insensitive,
    atomic_write_text,
    list_markdown_files,
)

from .text_normalizer import (
    title_case,
    dedupe_casefold,
    remove_overlap,
    slugify,
    strip_link_brackets,
)

__all__ = [
    # Exceptions
    'PrescriptionTrackerError',
    'ConfigurationError',
    'SourceError',
    'SourceUnavailableError',
    'SourceResponseError',
    'NoteError',
    'NoteExistsError',
    'NoteNotFoundError',
    'InvalidNoteLocationError',
    # Logging
    'setup_logging',
    'log_performance',
    'JsonFormatter',
    # File Utils
    'ensure_directory',
    'sanitize_filename',
    'normalize_vault_path',
    'find_case_insensitive',
    'atomic_write_text',
    'list_markdown_files',
    # Text
    'title_case',
    'dedupe_casefold',
    'remove_overlap',
    'slugify',
    'strip_link_brackets',
]
