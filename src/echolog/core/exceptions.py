"""
Echolog exception hierarchy.

All echolog exceptions inherit from EchologError, making it easy for consumers
to catch library-level errors while still distinguishing specific failure modes.
"""


class EchologError(Exception):
    """Base exception class for all echolog errors."""


class ConfigurationError(EchologError):
    """Raised for configuration errors (missing keys, invalid values)."""


class InvalidEntryError(EchologError, ValueError):
    """Raised when an entry would break a record invariant."""


class JournalError(EchologError):
    """Base class for errors reported by journal operations."""


class EmptyContentError(JournalError):
    """Raised when a create or edit is attempted with blank content."""


class EntryNotFoundError(JournalError, KeyError):
    """Raised when an edit or lookup targets an id not in the journal."""

    def __init__(self, entry_id: str):
        super().__init__(entry_id)
        self.entry_id = entry_id

    def __str__(self) -> str:
        return f"No entry with id {self.entry_id!r}"


class CaptureFailedError(JournalError):
    """Raised when an audio capture produced no usable recording."""


class CaptureStateError(JournalError):
    """Raised when a capture call arrives in the wrong recording state."""
