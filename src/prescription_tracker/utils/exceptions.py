# ============================================================================
# src/prescription_tracker/utils/exceptions.py
# ============================================================================
"""
Custom exceptions for the prescription tracker.
"""


class PrescriptionTrackerError(Exception):
    """Base exception for all prescription tracker errors."""
    pass


class ConfigurationError(PrescriptionTrackerError):
    """Invalid configuration."""
    pass


class SourceError(PrescriptionTrackerError):
    """Error talking to an external drug data source."""
    def __init__(self, message: str, source: str = "unknown"):
        super().__init__(message)
        self.source = source


class SourceUnavailableError(SourceError):
    """Source could not be reached, timed out, or returned an error status."""
    def __init__(self, message: str, source: str = "unknown", status: int = None):
        super().__init__(message, source)
        self.status = status


class SourceResponseError(SourceError):
    """Source answered with a body that could not be decoded."""
    pass


class NoteError(PrescriptionTrackerError):
    """Error materializing a note in the vault."""
    pass


class NoteExistsError(NoteError):
    """A note already exists and overwriting was not allowed."""
    def __init__(self, message: str, path=None):
        super().__init__(message)
        self.path = path


class NoteNotFoundError(NoteError):
    """Referenced note or file does not exist."""
    pass


class InvalidNoteLocationError(NoteError):
    """Note is outside the expected folder or is not a Markdown file."""
    pass
