"""Error types for the progress core.

None of these are fatal to the process. Storage and per-record import errors
are recoverable and get reported upward; only a structurally broken import
file aborts the operation that raised it.
"""

from __future__ import annotations


class HundredsError(RuntimeError):
    """Base class for all errors raised by the progress core."""


class StorageUnavailableError(HundredsError):
    """Raised when the history store cannot be read.

    Callers fall back to in-memory defaults (a zero-valued record).
    """


class PersistenceWriteFailedError(HundredsError):
    """Raised when an upsert or delete against the history store fails.

    The in-memory state stays authoritative; the failure is only reported.
    """


class InvalidImportRecordError(HundredsError):
    """A single candidate record in an import failed validation.

    Skipped individually and counted; never aborts the whole import.
    """

    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"Invalid import record {key!r}: {reason}")


class InvalidImportFormatError(HundredsError):
    """The import payload is structurally unusable. Nothing is applied."""
