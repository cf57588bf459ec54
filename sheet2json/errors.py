from __future__ import annotations

"""Error taxonomy for the conversion pipeline.

Every error raised by the library derives from ConversionError so that the
controller (CLI / orchestrator) can catch it at the operation boundary and turn
it into a log line plus an error-log entry.
"""

__all__ = [
    "ConversionError",
    "ParseError",
    "DuplicateKeyError",
    "WorkerError",
    "SelectionViolation",
    "UnknownColumnError",
    "ClipboardError",
]


class ConversionError(Exception):
    """Base class for all conversion errors."""

    error_type = "CONVERSION_ERROR"


class ParseError(ConversionError):
    """Raised when bytes cannot be read as a spreadsheet or the first sheet has no range."""

    error_type = "PARSE_ERROR"


class DuplicateKeyError(ParseError):
    """Raised when two headers normalize to the same key and duplicates are not allowed."""

    error_type = "DUPLICATE_KEY"


class WorkerError(ConversionError):
    """Raised on the controller side when the worker answered with an error response."""

    error_type = "WORKER_ERROR"


class SelectionViolation(ConversionError):
    """Raised when a removal would leave no column selected. State is left unchanged."""

    error_type = "SELECTION_VIOLATION"


class UnknownColumnError(ConversionError):
    """Raised when a column key is not part of the loaded dataset."""

    error_type = "UNKNOWN_COLUMN"


class ClipboardError(ConversionError):
    """Raised when the clipboard writer fails."""

    error_type = "CLIPBOARD_ERROR"
