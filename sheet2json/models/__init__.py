"""Domain models for the spreadsheet -> JSON converter."""

from .conversion_result import ConversionResult, FileStat
from .dataset import Dataset, DisplayOptions, Projection
from .error_record import ErrorRecord

__all__ = [
    # Data models
    "Dataset",
    "DisplayOptions",
    "Projection",
    # Run results
    "ConversionResult",
    "FileStat",
    "ErrorRecord",
]
